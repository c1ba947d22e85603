"""JSON-RPC 2.0 over HTTP(S): server side."""
import logging
from typing import Optional, Union

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware.cors import CORSMiddleware

from .config import SSLOptions, TransportConfig
from .jsonrpc.handler import DispatchCallback, JSONRPCHandler
from .listener import Listener
from .utils.errors import ConfigurationError

logger = logging.getLogger(__name__)


class JSONRPCServer:
    """Serves one JSON-RPC route and hands every request to ``dispatch``.

    In exclusive-app mode the server owns a FastAPI app and its listener,
    started with ``listen()`` and stopped with ``stop()``. In shared-app mode
    (``config.app`` set) the route is mounted on the caller's router and
    ``listen()``/``stop()`` do nothing: the caller runs that router.

    Args:
        config: Transport configuration, shared with the client
        dispatch: ``dispatch(method, params)`` returning the result (or an
            awaitable of it) and raising to report a failure
    """

    def __init__(self, config: TransportConfig, dispatch: Optional[DispatchCallback] = None):
        self.config = config
        self.handler = JSONRPCHandler(dispatch)
        self.listening = False
        self.custom_app = config.shared_app
        self._listener: Optional[Listener] = None

        if self.custom_app:
            self.app: Union[FastAPI, APIRouter] = config.app
        else:
            if config.ssl is True:
                raise ConfigurationError(
                    "Serving HTTPS needs SSLOptions with a certfile and keyfile, not ssl=True"
                )
            if isinstance(config.ssl, SSLOptions) and not (config.ssl.certfile and config.ssl.keyfile):
                raise ConfigurationError(
                    "Serving HTTPS needs both ssl.certfile and ssl.keyfile"
                )
            self.app = FastAPI(docs_url=None, redoc_url=None, openapi_url=None)
            # Needed to call the transport from a browser
            if config.cors:
                self.app.add_middleware(
                    CORSMiddleware,
                    allow_origins=["*"],
                    allow_methods=["*"],
                    allow_headers=["*"],
                )

        self.app.add_api_route(
            config.path,
            self.handle_http_request,
            methods=["POST"],
            include_in_schema=False,
        )
        logger.info(f"Registered JSON-RPC route: POST {config.path}")

    @property
    def dispatch(self) -> Optional[DispatchCallback]:
        return self.handler.dispatch

    async def handle_http_request(self, request: Request) -> JSONResponse:
        """Route handler: decode the body, dispatch, encode the reply."""
        body = {}
        if "json" in request.headers.get("content-type", ""):
            try:
                body = await request.json()
            except ValueError:
                logger.warning(f"Rejected unparseable request body on {self.config.path}")
                return JSONResponse(self.handler.parse_error().to_envelope(), status_code=400)

        status, response = await self.handler.handle_request(body)
        return JSONResponse(response.to_envelope(), status_code=status)

    async def listen(self) -> None:
        """Start the owned listener. No-op when listening or in shared-app mode."""
        if self.listening:
            return
        if self.custom_app:
            return

        ssl = self.config.ssl if isinstance(self.config.ssl, SSLOptions) else None
        listener = Listener(self.app, self.config.host, self.config.port, ssl=ssl)
        await listener.start()
        self._listener = listener
        self.listening = True

    async def stop(self) -> None:
        """Stop the owned listener. No-op when idle or in shared-app mode."""
        if not self.listening:
            return
        if self.custom_app:
            return

        try:
            await self._listener.stop()
        finally:
            self._listener = None
            self.listening = False
