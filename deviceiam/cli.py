"""
Command-line interface for device-iam.
"""

import argparse
import sys

from .config import (
    ConfigError,
    get_config_path,
    get_profile_name,
    list_profiles,
    load_profile,
    open_connection,
    read_config,
)
from .core import (
    add_role_to_user,
    delete_user,
    list_roles,
    list_users,
    remove_role_from_user,
)
from .prompt import AutoPrompt, ConsolePrompt
from .report import ConsoleReporter


def build_parser():
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="device-iam",
        description="Inspect and change users and roles on a connected device",
        epilog="Examples:\n"
        "  device-iam --users                          # List users on the default device\n"
        "  device-iam --profile kitchen --roles        # List roles on another device\n"
        "  device-iam --add-role alice Administrator   # Give alice the Administrator role\n"
        "  device-iam --yes --delete-user bob          # Delete bob without asking",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--profile",
        default=None,
        help="Device profile to use (defaults to 'default', overridden by DEVICE_IAM_PROFILE "
        "env var, then by this argument)",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Configuration file (defaults to ~/.config/device-iam/config, overridden by "
        "DEVICE_IAM_CONFIG env var, then by this argument)",
    )
    parser.add_argument(
        "--yes",
        "-y",
        action="store_true",
        help="Do not ask for confirmation before changing the device",
    )
    parser.add_argument(
        "--unify-status",
        action="store_true",
        help="Also report unexpected response codes from --remove-role "
        "(other actions always report them)",
    )

    actions = parser.add_mutually_exclusive_group(required=True)
    actions.add_argument("--users", action="store_true", help="List all users on the device")
    actions.add_argument("--roles", action="store_true", help="List available roles")
    actions.add_argument(
        "--add-role",
        nargs=2,
        metavar=("USER", "ROLE"),
        help="Add ROLE to USER",
    )
    actions.add_argument(
        "--remove-role",
        nargs=2,
        metavar=("USER", "ROLE"),
        help="Remove ROLE from USER",
    )
    actions.add_argument("--delete-user", metavar="USER", help="Delete USER from the device")
    actions.add_argument(
        "--profiles",
        action="store_true",
        help="List the profiles in the configuration file and exit",
    )
    return parser


def run(args, reporter=None, prompt=None):
    """
    Execute the action selected on the command line.

    Args:
        args: Parsed arguments from build_parser()
        reporter: Reporter for operation output (defaults to the console)
        prompt: Confirmation prompt (defaults to the console, or automatic
            with --yes / assume_yes)

    Returns:
        int: Process exit code
    """
    reporter = reporter if reporter is not None else ConsoleReporter()
    config = read_config(get_config_path(args.config))

    if args.profiles:
        for name in list_profiles(config):
            reporter.info(name)
        return 0

    profile = load_profile(config, get_profile_name(args.profile))
    if prompt is None:
        prompt = AutoPrompt(True) if args.yes or profile.assume_yes else ConsolePrompt()

    connection = open_connection(profile)
    try:
        result = _dispatch(args, connection, profile, prompt, reporter)
    finally:
        close = getattr(connection, "close", None)
        if callable(close):
            close()

    return 0 if result else 1


def _dispatch(args, connection, profile, prompt, reporter):
    if args.users:
        result = list_users(connection, reporter=reporter)
    elif args.roles:
        result = list_roles(connection, reporter=reporter)
    elif args.add_role:
        user, role = args.add_role
        result = add_role_to_user(connection, user, role, prompt=prompt, reporter=reporter)
    elif args.remove_role:
        user, role = args.remove_role
        result = remove_role_from_user(
            connection,
            user,
            role,
            prompt=prompt,
            reporter=reporter,
            report_unknown_status=args.unify_status or profile.report_unknown_status,
        )
    else:
        result = delete_user(connection, args.delete_user, prompt=prompt, reporter=reporter)
    return result


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        exit_code = run(args)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
