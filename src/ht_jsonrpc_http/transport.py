"""Transport factory: one config, bound Server and Client constructors."""
import functools
import logging
from typing import Any, Callable

from .client import JSONRPCClient
from .config import TransportConfig
from .server import JSONRPCServer

logger = logging.getLogger(__name__)


class HTTPTransport:
    """JSON-RPC over HTTP(S) transport bound to one immutable config.

    ``Server`` and ``Client`` build the two sides; both share ``config``.
    """

    name = "jsonrpc-http"

    def __init__(self, config: TransportConfig):
        self.config = config
        self.Server: Callable[..., JSONRPCServer] = functools.partial(JSONRPCServer, config)
        self.Client: Callable[[], JSONRPCClient] = functools.partial(JSONRPCClient, config)

    def __repr__(self) -> str:
        target = "app" if self.config.shared_app else f"{self.config.host}:{self.config.port}"
        return f"<HTTPTransport {target}{self.config.path}>"


def create_transport(config: Any = None, **fields: Any) -> HTTPTransport:
    """Validate configuration and build the transport.

    Args:
        config: A ``TransportConfig`` or a mapping of its fields
        fields: Fields given as keywords, overriding ``config``

    Returns:
        HTTPTransport sharing one frozen config between Server and Client

    Raises:
        ConfigurationError: If neither ``app`` nor ``host`` and ``port`` are given

    Example:
        >>> transport = create_transport(host="127.0.0.1", port=8080)
        >>> server = transport.Server(lambda method, params: params)
        >>> client = transport.Client()
    """
    transport = HTTPTransport(TransportConfig.build(config, **fields))
    logger.debug(f"Created {transport!r}")
    return transport
