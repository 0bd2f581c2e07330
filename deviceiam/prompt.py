"""
Yes/no confirmation prompts for actions that change the device.
"""

import sys


class ConsolePrompt:
    """
    Ask the operator on a text stream.

    The answer is a single non-whitespace character. Anything other than a
    lowercase 'y' or 'n' asks again. End of input, or input that cannot be
    read, counts as 'n'.
    """

    def __init__(self, stdin=None, stdout=None):
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout

    def _read_answer(self):
        while True:
            try:
                char = self.stdin.read(1)
            except (OSError, ValueError):
                # Closed stream or undecodable input ends the prompt as 'n'
                return None
            if not char:
                return None
            if not char.isspace():
                return char

    def confirm(self, message):
        while True:
            self.stdout.write(f"{message} [y/n]: ")
            self.stdout.flush()
            answer = self._read_answer()
            if answer is None or answer in ("y", "n"):
                break
        return answer == "y"


class AutoPrompt:
    """Answer every confirmation without asking (used by --yes)."""

    def __init__(self, answer=True):
        self.answer = answer

    def confirm(self, message):
        return self.answer
