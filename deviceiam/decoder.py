"""
Classification of IAM responses into outcomes.
"""

import enum
import io
from dataclasses import dataclass

import cbor2

STATUS_CREATED = 201
STATUS_DELETED = 202
STATUS_CONTENT = 205
STATUS_FORBIDDEN = 403
STATUS_INTERNAL_ERROR = 500


class PayloadError(ValueError):
    """Raised when a listing payload is not a CBOR array of strings."""


class OutcomeKind(enum.Enum):
    SUCCESS = "success"
    ACCESS_DENIED = "access-denied"
    SEMANTIC_ERROR = "semantic-error"
    UNKNOWN_STATUS = "unknown-status"
    DECODE_FAILURE = "decode-failure"
    TRANSPORT_FAILURE = "transport-failure"
    INVALID_REQUEST = "invalid-request"


@dataclass(frozen=True)
class Outcome:
    """
    Result of one request/response exchange.

    Only SUCCESS carries a value. Status-based kinds carry the status code;
    the three failure kinds raised locally carry the exception instead.
    """

    kind: OutcomeKind
    status_code: int = None
    value: object = None
    error: Exception = None

    @property
    def ok(self):
        return self.kind is OutcomeKind.SUCCESS

    @classmethod
    def success(cls, status_code, value=None):
        return cls(OutcomeKind.SUCCESS, status_code=status_code, value=value)

    @classmethod
    def failure(cls, kind, error):
        return cls(kind, error=error)


def decode_string_list(payload):
    """
    Decode a CBOR payload holding an array of text strings.

    Args:
        payload: Raw CBOR bytes from the response

    Returns:
        list: The decoded strings, in payload order

    Raises:
        PayloadError: If the payload is missing, malformed, or not an array
            of strings
    """
    if not payload:
        raise PayloadError("Response payload is empty")

    fp = io.BytesIO(payload)
    try:
        decoded = cbor2.CBORDecoder(fp).decode()
    except (cbor2.CBORDecodeError, ValueError) as e:
        raise PayloadError(f"Response payload is not valid CBOR: {e}") from e

    trailing = len(payload) - fp.tell()
    if trailing:
        raise PayloadError(f"Response payload has {trailing} unexpected trailing bytes")

    if not isinstance(decoded, list):
        raise PayloadError(f"Expected a CBOR array, got {type(decoded).__name__}")

    for item in decoded:
        if not isinstance(item, str):
            raise PayloadError(f"Expected only strings in the array, got {item!r}")

    return decoded


def decode_response(response, success_code, listing=False, semantic_codes=()):
    """
    Map a response onto an Outcome.

    Args:
        response: IamResponse from the device
        success_code: The status code that means the operation worked
        listing: If True, a successful response must carry a CBOR string list
        semantic_codes: Status codes the service uses for bad identifiers

    Returns:
        Outcome: The classified result
    """
    code = response.status_code

    if code == success_code:
        if not listing:
            return Outcome.success(code)
        try:
            items = decode_string_list(response.payload)
        except PayloadError as e:
            return Outcome(OutcomeKind.DECODE_FAILURE, status_code=code, error=e)
        return Outcome.success(code, items)

    if code == STATUS_FORBIDDEN:
        return Outcome(OutcomeKind.ACCESS_DENIED, status_code=code)

    if code in semantic_codes:
        return Outcome(OutcomeKind.SEMANTIC_ERROR, status_code=code)

    return Outcome(OutcomeKind.UNKNOWN_STATUS, status_code=code)
