"""Owned HTTP(S) listener backed by uvicorn."""
import asyncio
import contextlib
import logging
import socket
from typing import Any, Iterator, Optional

import uvicorn

from .config import SSLOptions
from .utils.errors import ListenError

logger = logging.getLogger(__name__)


class EmbeddedServer(uvicorn.Server):
    """uvicorn server that leaves the host process's signal handlers alone."""

    def install_signal_handlers(self) -> None:
        pass

    @contextlib.contextmanager
    def capture_signals(self) -> Iterator[None]:
        yield


class Listener:
    """Runs an ASGI app on ``host:port`` inside the current event loop.

    The socket is bound here rather than by uvicorn so that a busy port
    surfaces as ``ListenError`` instead of terminating the process.
    """

    def __init__(self, app: Any, host: str, port: int, ssl: Optional[SSLOptions] = None):
        self.app = app
        self.host = host
        self.port = port
        self.ssl = ssl
        self._server: Optional[EmbeddedServer] = None
        self._task: Optional[asyncio.Task] = None
        self._socket: Optional[socket.socket] = None

    @property
    def running(self) -> bool:
        return self._server is not None and self._server.started

    def _config(self) -> uvicorn.Config:
        options = {}
        if self.ssl is not None:
            options = {
                "ssl_certfile": self.ssl.certfile,
                "ssl_keyfile": self.ssl.keyfile,
                "ssl_keyfile_password": self.ssl.password,
                "ssl_ca_certs": self.ssl.ca_certs,
            }
        return uvicorn.Config(
            self.app,
            host=self.host,
            port=self.port,
            log_config=None,
            access_log=False,
            lifespan="off",
            **options,
        )

    def _bind(self) -> socket.socket:
        try:
            infos = socket.getaddrinfo(self.host, self.port, type=socket.SOCK_STREAM)
            family, _, _, _, address = infos[0]
            sock = socket.socket(family, socket.SOCK_STREAM)
        except OSError as e:
            raise ListenError(e) from e

        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind(address)
        except OSError as e:
            sock.close()
            raise ListenError(e) from e
        sock.set_inheritable(True)
        return sock

    async def start(self) -> None:
        """Bind and serve; returns once the listener accepts connections."""
        config = self._config()
        self._socket = self._bind()
        self._server = EmbeddedServer(config)
        self._task = asyncio.create_task(self._server.serve(sockets=[self._socket]))

        while not self._server.started:
            if self._task.done():
                error = self._task.exception() if not self._task.cancelled() else None
                self._close_socket()
                self._server = None
                self._task = None
                raise ListenError(error or "listener exited during startup")
            await asyncio.sleep(0.01)

        scheme = "https" if self.ssl is not None else "http"
        logger.info(f"Listening on {scheme}://{self.host}:{self.port}")

    async def stop(self) -> None:
        """Stop accepting connections and wait for the server to shut down."""
        if self._server is None or self._task is None:
            return

        self._server.should_exit = True
        try:
            await self._task
        finally:
            self._close_socket()
            self._server = None
            self._task = None
        logger.info(f"Stopped listening on {self.host}:{self.port}")

    def _close_socket(self) -> None:
        if self._socket is not None:
            self._socket.close()
            self._socket = None
