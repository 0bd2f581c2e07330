"""
IAM operations against a connected device.

Every function takes an already established connection, issues exactly one
request (or none, when the operator declines a change) and returns an
OperationResult. Mutating operations ask for confirmation first.
"""

import enum
from dataclasses import dataclass

from .decoder import (
    STATUS_CONTENT,
    STATUS_CREATED,
    STATUS_DELETED,
    STATUS_INTERNAL_ERROR,
    Outcome,
    OutcomeKind,
    decode_response,
)
from .prompt import ConsolePrompt
from .protocol import (
    ROLES_PATH,
    USERS_PATH,
    IamRequest,
    InvalidIdentifierError,
    Method,
    execute_request,
    user_path,
    user_role_path,
)
from .report import (
    CANCELLED_MESSAGE,
    SUCCESS_MESSAGE,
    ConsoleReporter,
    report_listing,
    report_outcome,
)


class Status(enum.Enum):
    APPLIED = "applied"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(frozen=True)
class OperationResult:
    """
    What an IAM operation did.

    Truthiness follows the command line contract: a declined change is not
    a failure, so both APPLIED and CANCELLED are true. Use `status` to tell
    them apart.
    """

    status: Status
    outcome: Outcome = None
    request: IamRequest = None
    items: tuple = ()

    def __bool__(self):
        return self.status is not Status.FAILED

    @property
    def applied(self):
        return self.status is Status.APPLIED

    @property
    def cancelled(self):
        return self.status is Status.CANCELLED

    @property
    def failed(self):
        return self.status is Status.FAILED


@dataclass(frozen=True)
class _Exchange:
    success_code: int
    denied_message: str
    failure_message: str
    heading: str = None
    listing: bool = False
    semantic_codes: tuple = ()


_LIST_USERS = _Exchange(
    success_code=STATUS_CONTENT,
    denied_message="The request to list users ({path}) was denied.",
    failure_message="Cannot get IAM user list",
    heading="Listing all users...",
    listing=True,
)
_LIST_ROLES = _Exchange(
    success_code=STATUS_CONTENT,
    denied_message="The request to list roles ({path}) was denied.",
    failure_message="Cannot get IAM role list",
    heading="Listing available roles...",
    listing=True,
)
_ADD_ROLE = _Exchange(
    success_code=STATUS_CREATED,
    denied_message="The request was denied.",
    failure_message="An unknown error occurred.",
    semantic_codes=(STATUS_INTERNAL_ERROR,),
)
_REMOVE_ROLE = _Exchange(
    success_code=STATUS_DELETED,
    denied_message="The request to DELETE from {path} was denied.",
    failure_message="An unknown error occurred.",
    semantic_codes=(STATUS_INTERNAL_ERROR,),
)
_DELETE_USER = _Exchange(
    success_code=STATUS_DELETED,
    denied_message="The request to DELETE from {path} was denied.",
    failure_message="An unknown error occurred.",
)


def _run_exchange(connection, request, exchange, reporter, report_unknown_status=True):
    try:
        response = execute_request(connection, request)
    except Exception as e:
        outcome = Outcome.failure(OutcomeKind.TRANSPORT_FAILURE, e)
    else:
        outcome = decode_response(
            response,
            exchange.success_code,
            listing=exchange.listing,
            semantic_codes=exchange.semantic_codes,
        )
        if exchange.heading and response.status_code == exchange.success_code:
            reporter.info(exchange.heading)

    if outcome.ok:
        items = tuple(outcome.value) if exchange.listing else ()
        return OperationResult(Status.APPLIED, outcome, request, items)

    report_outcome(
        reporter,
        outcome,
        request.path,
        exchange.denied_message.format(path=request.path),
        exchange.failure_message,
        report_unknown_status=report_unknown_status,
    )
    return OperationResult(Status.FAILED, outcome, request)


def _list(connection, path, exchange, entry_format, reporter):
    reporter = reporter if reporter is not None else ConsoleReporter()
    request = IamRequest(Method.GET, path)

    result = _run_exchange(connection, request, exchange, reporter)
    if result.applied:
        report_listing(reporter, entry_format, result.items)
    return result


def _mutate(
    connection,
    method,
    build_path,
    question,
    exchange,
    prompt,
    reporter,
    report_unknown_status=True,
):
    reporter = reporter if reporter is not None else ConsoleReporter()
    prompt = prompt if prompt is not None else ConsolePrompt()

    try:
        request = IamRequest(method, build_path())
    except InvalidIdentifierError as e:
        outcome = Outcome.failure(OutcomeKind.INVALID_REQUEST, e)
        report_outcome(reporter, outcome, None, None, None)
        return OperationResult(Status.FAILED, outcome)

    if not prompt.confirm(question):
        reporter.info(CANCELLED_MESSAGE)
        return OperationResult(Status.CANCELLED, request=request)

    result = _run_exchange(
        connection, request, exchange, reporter, report_unknown_status=report_unknown_status
    )
    if result.applied:
        reporter.info(SUCCESS_MESSAGE)
    return result


def list_users(connection, reporter=None):
    """
    List the users provisioned on the device.

    Args:
        connection: Established device connection
        reporter: Where messages go (defaults to the console)

    Returns:
        OperationResult: APPLIED with the user ids in `items`, or FAILED
    """
    return _list(
        connection,
        USERS_PATH,
        _LIST_USERS,
        "[{index}] UserID: {item}",
        reporter,
    )


def list_roles(connection, reporter=None):
    """
    List the roles available on the device.

    Args:
        connection: Established device connection
        reporter: Where messages go (defaults to the console)

    Returns:
        OperationResult: APPLIED with the role ids in `items`, or FAILED
    """
    return _list(
        connection,
        ROLES_PATH,
        _LIST_ROLES,
        "[{index}]: {item}",
        reporter,
    )


def add_role_to_user(connection, user, role, prompt=None, reporter=None):
    """
    Attach a role to a user after asking the operator.

    Args:
        connection: Established device connection
        user: User id on the device
        role: Role id on the device
        prompt: Confirmation prompt (defaults to asking on the console)
        reporter: Where messages go (defaults to the console)

    Returns:
        OperationResult: APPLIED on 201, CANCELLED if declined, else FAILED
    """
    return _mutate(
        connection,
        Method.PUT,
        lambda: user_role_path(user, role),
        f'Add role "{role}" to user "{user}"? ',
        _ADD_ROLE,
        prompt,
        reporter,
    )


def remove_role_from_user(
    connection, user, role, prompt=None, reporter=None, report_unknown_status=False
):
    """
    Detach a role from a user after asking the operator.

    Unexpected status codes fail without a message unless
    report_unknown_status is set.

    Returns:
        OperationResult: APPLIED on 202, CANCELLED if declined, else FAILED
    """
    return _mutate(
        connection,
        Method.DELETE,
        lambda: user_role_path(user, role),
        f'Remove role "{role}" from user "{user}"? ',
        _REMOVE_ROLE,
        prompt,
        reporter,
        report_unknown_status=report_unknown_status,
    )


def delete_user(connection, user, prompt=None, reporter=None):
    """
    Delete a user from the device after asking the operator.

    Returns:
        OperationResult: APPLIED on 202, CANCELLED if declined, else FAILED
    """
    return _mutate(
        connection,
        Method.DELETE,
        lambda: user_path(user),
        f'Delete user "{user}"? ',
        _DELETE_USER,
        prompt,
        reporter,
    )
