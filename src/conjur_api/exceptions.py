"""
Exception classes for the Conjur API client.
"""

from enum import Enum
from typing import Dict, Optional, Type


class ErrorKind(str, Enum):
    """Classification of a failed call."""
    BAD_REQUEST = "bad_request"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    CLIENT_ERROR = "client_error"
    SERVER_ERROR = "server_error"
    TRANSPORT_ERROR = "transport_error"
    DECODE_ERROR = "decode_error"


class ConjurError(Exception):
    """Base exception for the Conjur API client."""

    kind: Optional[ErrorKind] = None

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body


class BadRequestError(ConjurError):
    """The service rejected the request parameters (400)."""
    kind = ErrorKind.BAD_REQUEST


class UnauthorizedError(ConjurError):
    """Authentication failed or the token was rejected (401)."""
    kind = ErrorKind.UNAUTHORIZED


class ForbiddenError(ConjurError):
    """Authorization failed (insufficient permissions)."""
    kind = ErrorKind.FORBIDDEN


class NotFoundError(ConjurError):
    """Resource not found."""
    kind = ErrorKind.NOT_FOUND


class ConflictError(ConjurError):
    """Resource already exists (409)."""
    kind = ErrorKind.CONFLICT


class ClientError(ConjurError):
    """Any other 4xx response."""
    kind = ErrorKind.CLIENT_ERROR


class ServerError(ConjurError):
    """The service failed to handle the request (5xx)."""
    kind = ErrorKind.SERVER_ERROR


class TransportError(ConjurError):
    """No response was received (connection failure, timeout)."""
    kind = ErrorKind.TRANSPORT_ERROR


class DecodeError(ConjurError):
    """A response body could not be decoded into the expected record."""
    kind = ErrorKind.DECODE_ERROR


class ConfigurationError(ConjurError):
    """Configuration error."""
    pass


_STATUS_ERRORS: Dict[int, Type[ConjurError]] = {
    400: BadRequestError,
    401: UnauthorizedError,
    403: ForbiddenError,
    404: NotFoundError,
    409: ConflictError,
}


def error_for_status(status_code: int, body: Optional[str] = None) -> ConjurError:
    """Build the exception matching a failed HTTP status."""
    if status_code in _STATUS_ERRORS:
        error_class = _STATUS_ERRORS[status_code]
    elif status_code >= 500:
        error_class = ServerError
    else:
        error_class = ClientError

    message = f"Error code: {status_code}, Error message: {body or ''}"
    return error_class(message, status_code=status_code, body=body)
