"""Error types and normalization helpers."""
from .errors import (
    JSONRPCTransportError,
    ConfigurationError,
    ListenError,
    ProtocolError,
    ApplicationError,
    RemoteError,
    TransportError,
    MalformedResponseError,
    error_from_response,
)
from .formatting import format_error

__all__ = [
    "JSONRPCTransportError",
    "ConfigurationError",
    "ListenError",
    "ProtocolError",
    "ApplicationError",
    "RemoteError",
    "TransportError",
    "MalformedResponseError",
    "error_from_response",
    "format_error",
]
