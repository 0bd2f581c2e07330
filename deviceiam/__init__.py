"""
device-iam: Manage users and roles on a connected device.

A Python client and CLI for the IAM service of a remote device. It issues
CoAP-style requests over a connection that the caller has already
established and authenticated, and turns the responses into typed results.

Key features:
- List the users and roles provisioned on the device
- Add a role to a user, remove a role from a user, delete a user
- Confirmation before every change, with an opt-out for scripting
- Device profiles in an INI file, each naming a connector callable
"""

__version__ = "0.1.0"
__license__ = "MIT"

from .config import (
    ConfigError,
    Profile,
    list_profiles,
    load_connector,
    load_profile,
    open_connection,
    read_config,
)
from .core import (
    OperationResult,
    Status,
    add_role_to_user,
    delete_user,
    list_roles,
    list_users,
    remove_role_from_user,
)
from .decoder import Outcome, OutcomeKind, PayloadError, decode_response, decode_string_list
from .prompt import AutoPrompt, ConsolePrompt
from .protocol import IamRequest, IamResponse, InvalidIdentifierError, Method
from .report import ConsoleReporter

__all__ = [
    # IAM operations - Most commonly used for programmatic access
    "list_users",
    "list_roles",
    "add_role_to_user",
    "remove_role_from_user",
    "delete_user",
    "OperationResult",
    "Status",
    # Requests and responses
    "IamRequest",
    "IamResponse",
    "InvalidIdentifierError",
    "Method",
    # Response decoding
    "Outcome",
    "OutcomeKind",
    "PayloadError",
    "decode_response",
    "decode_string_list",
    # Prompts and reporting
    "AutoPrompt",
    "ConsolePrompt",
    "ConsoleReporter",
    # Configuration
    "ConfigError",
    "Profile",
    "read_config",
    "list_profiles",
    "load_profile",
    "load_connector",
    "open_connection",
]
