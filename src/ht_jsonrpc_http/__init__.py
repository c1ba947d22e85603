"""JSON-RPC 2.0 transport over HTTP(S)."""
from .config import DEFAULT_PATH, SSLOptions, TransportConfig, load_config
from .client import JSONRPCClient
from .interfaces import ClientTransport, ServerTransport
from .server import JSONRPCServer
from .transport import HTTPTransport, create_transport
from .utils.errors import (
    JSONRPCTransportError,
    ConfigurationError,
    ListenError,
    ProtocolError,
    ApplicationError,
    RemoteError,
    TransportError,
    MalformedResponseError,
)
from .utils.formatting import format_error

__version__ = "1.0.0"

__all__ = [
    "DEFAULT_PATH",
    "SSLOptions",
    "TransportConfig",
    "load_config",
    "JSONRPCClient",
    "JSONRPCServer",
    "ClientTransport",
    "ServerTransport",
    "HTTPTransport",
    "create_transport",
    "JSONRPCTransportError",
    "ConfigurationError",
    "ListenError",
    "ProtocolError",
    "ApplicationError",
    "RemoteError",
    "TransportError",
    "MalformedResponseError",
    "format_error",
]
