"""
Request/response data model for the device IAM service.

Every IAM operation is a single CoAP-style exchange: a method and a path go
out through the connection, a status code and an optional CBOR payload come
back. The connection itself is supplied by the caller and only needs two
things:

    request = connection.create_request("GET", "/iam/users")
    response = request.execute()   # blocks; has .status_code and .payload
"""

import enum
from dataclasses import dataclass

USERS_PATH = "/iam/users"
ROLES_PATH = "/iam/roles"

# Characters that would change the meaning of a CoAP path
FORBIDDEN_ID_CHARACTERS = "/?#"


class InvalidIdentifierError(ValueError):
    """Raised when a user id or role id cannot be placed in a request path."""


class Method(enum.Enum):
    GET = "GET"
    PUT = "PUT"
    DELETE = "DELETE"


@dataclass(frozen=True)
class IamRequest:
    method: Method
    path: str


@dataclass(frozen=True)
class IamResponse:
    status_code: int
    payload: bytes = None


def validate_identifier(value, kind="identifier"):
    """
    Check that a user id or role id is usable as a single path segment.

    Identifiers are opaque to this client; the device decides whether they
    exist. Only values that would produce a malformed path are rejected.

    Args:
        value: The identifier to check
        kind: Label used in the error message (e.g. "user id")

    Returns:
        str: The identifier, unchanged

    Raises:
        InvalidIdentifierError: If the identifier is empty or contains
            path-breaking characters
    """
    if not isinstance(value, str) or not value:
        raise InvalidIdentifierError(f"The {kind} cannot be empty")

    for char in value:
        if char in FORBIDDEN_ID_CHARACTERS or char.isspace() or not char.isprintable():
            raise InvalidIdentifierError(
                f"The {kind} '{value}' contains an invalid character {char!r}"
            )
    return value


def user_path(user):
    """Path of a single user: /iam/users/{user}."""
    return f"{USERS_PATH}/{validate_identifier(user, 'user id')}"


def user_role_path(user, role):
    """Path of a role attachment: /iam/users/{user}/roles/{role}."""
    return f"{user_path(user)}/roles/{validate_identifier(role, 'role id')}"


def execute_request(connection, request):
    """
    Send a request through the connection and wait for the response.

    Exceptions raised by the connection are not caught here; the operation
    layer turns them into a transport failure outcome.

    Args:
        connection: Object providing create_request(method, path)
        request: IamRequest to send

    Returns:
        IamResponse: The status code and payload returned by the device
    """
    pending = connection.create_request(request.method.value, request.path)
    response = pending.execute()
    payload = response.payload
    if payload is not None:
        payload = bytes(payload)
    return IamResponse(status_code=int(response.status_code), payload=payload)
