"""Custom exception classes for the JSON-RPC HTTP transport."""
from typing import Any, Dict, Optional

from .formatting import format_error


class JSONRPCTransportError(Exception):
    """Base exception for transport errors.

    ``payload`` keeps the original error value (an exception, a string, the
    server's error object...) so callers can read more than the message.
    """

    code: Optional[int] = None

    def __init__(self, payload: Any = None, code: Optional[int] = None):
        self.payload = payload
        if code is not None:
            self.code = code
        self.message = format_error(payload)["message"]
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Error object as carried in a response envelope."""
        return {"code": self.code, "message": self.message}


class ConfigurationError(JSONRPCTransportError):
    """Invalid transport configuration."""

    pass


class ListenError(JSONRPCTransportError):
    """The owned HTTP listener could not be started."""

    pass


class ProtocolError(JSONRPCTransportError):
    """Request does not speak JSON-RPC 2.0."""

    code = -32600


class ApplicationError(JSONRPCTransportError):
    """Failure reported by the dispatch callback.

    Raise it from a dispatch callback to fail a request with a value that is
    not an exception, e.g. ``raise ApplicationError({"message": "not found"})``.
    """

    code = -32000


class RemoteError(JSONRPCTransportError):
    """Error object returned by the server under a code with no dedicated class."""

    pass


class TransportError(JSONRPCTransportError):
    """Client-side connection failure (refused, reset, DNS...)."""

    pass


class MalformedResponseError(JSONRPCTransportError):
    """Response body was not JSON. ``payload`` is the raw response text."""

    pass


def error_from_response(error: Any) -> JSONRPCTransportError:
    """Build the exception matching an ``error`` member of a response envelope."""
    code = error.get("code") if isinstance(error, dict) else None
    if code == ProtocolError.code:
        return ProtocolError(error)
    if code == ApplicationError.code:
        return ApplicationError(error)
    return RemoteError(error, code=code if isinstance(code, int) else None)
