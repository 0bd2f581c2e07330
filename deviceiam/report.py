"""
Operator-facing messages for IAM operation outcomes.

Reporting is presentation only: nothing here decides whether an operation
succeeded.
"""

import sys

from .decoder import OutcomeKind

SUCCESS_MESSAGE = "Success."
CANCELLED_MESSAGE = "Action cancelled."
ACCESS_DENIED_ADVICE = (
    "This is potentially due to insufficient privileges,\n"
    "check the IAM policies file if you are the owner of this device."
)
BAD_IDENTIFIER_HINT = (
    "The request returned error {code}.\n"
    "Are you sure you typed in the right role id and user id?"
)
UNKNOWN_STATUS_MESSAGE = "The CoAP request to {path} returned response code: {code}"


class ConsoleReporter:
    """Print informational lines to stdout and errors to stderr."""

    def __init__(self, stdout=None, stderr=None):
        self.stdout = stdout if stdout is not None else sys.stdout
        self.stderr = stderr if stderr is not None else sys.stderr

    def info(self, message):
        print(message, file=self.stdout)

    def error(self, message):
        print(message, file=self.stderr)


def report_listing(reporter, entry_format, items):
    """
    Print one numbered line per item, starting at 1.

    Args:
        reporter: Reporter to write to
        entry_format: Format string with {index} and {item} fields
        items: Decoded identifiers, in device order
    """
    for index, item in enumerate(items, start=1):
        reporter.info(entry_format.format(index=index, item=item))


def report_outcome(
    reporter,
    outcome,
    path,
    denied_message,
    failure_message,
    report_unknown_status=True,
):
    """
    Describe a failed outcome to the operator.

    Successful outcomes are left to the caller, since a listing and a
    mutation print different things.

    Args:
        reporter: Reporter to write to
        outcome: Outcome of the exchange
        path: Request path, shown for unknown status codes
        denied_message: First line printed for access denied
        failure_message: Fixed line printed for transport and decode failures
        report_unknown_status: If False, unknown status codes print nothing
    """
    kind = outcome.kind

    if kind is OutcomeKind.ACCESS_DENIED:
        reporter.info(denied_message)
        reporter.info(ACCESS_DENIED_ADVICE)
    elif kind is OutcomeKind.SEMANTIC_ERROR:
        reporter.info(BAD_IDENTIFIER_HINT.format(code=outcome.status_code))
    elif kind is OutcomeKind.UNKNOWN_STATUS:
        if report_unknown_status:
            reporter.info(UNKNOWN_STATUS_MESSAGE.format(path=path, code=outcome.status_code))
    elif kind in (OutcomeKind.DECODE_FAILURE, OutcomeKind.TRANSPORT_FAILURE):
        reporter.error(failure_message)
        reporter.error(f"Details: {outcome.error}")
    elif kind is OutcomeKind.INVALID_REQUEST:
        reporter.error(f"Error: {outcome.error}")
