"""JSON-RPC 2.0 over HTTP(S): client side."""
import inspect
import json
import logging
import ssl
from typing import Any, Callable, Optional, Tuple, Union

import httpx

from .config import SSLOptions, TransportConfig
from .jsonrpc.models import JSONRPCRequest
from .utils.errors import (
    JSONRPCTransportError,
    MalformedResponseError,
    TransportError,
    error_from_response,
)
from .utils.formatting import format_error

logger = logging.getLogger(__name__)

CompletionCallback = Callable[[Any, Any], Any]

# Bodies treated as a valid response without a result
EMPTY_BODIES = ("", "undefined")


class JSONRPCClient:
    """Stateless client: one POST per ``call``, no pooling, retries or timeouts.

    Args:
        config: Transport configuration, shared with the server
    """

    def __init__(self, config: TransportConfig):
        self.config = config

    async def connect(self) -> None:
        """No-op: HTTP needs no session."""

    async def disconnect(self) -> None:
        """No-op: HTTP needs no session."""

    @property
    def url(self) -> httpx.URL:
        return httpx.URL(
            scheme=self.config.scheme,
            host=self.config.host,
            port=self.config.port,
            path=self.config.path,
        )

    def _verify(self) -> Union[bool, ssl.SSLContext]:
        if isinstance(self.config.ssl, SSLOptions):
            return self.config.ssl.client_context()
        return True

    async def call(
        self,
        method: str,
        params: Any = None,
        callback: Optional[CompletionCallback] = None,
    ) -> Any:
        """Call ``method`` on the server.

        Without ``callback`` the result is returned and failures are raised as
        ``JSONRPCTransportError`` subclasses. With ``callback`` every outcome
        is delivered as ``callback(err, result)`` instead, where ``err`` is the
        raw error value: the server's error object, the normalized
        ``{"message": ...}`` of a connection failure, or the raw response text
        when the body is not JSON.

        Args:
            method: Remote method name
            params: Any JSON-serializable value
            callback: Optional completion callback, sync or async

        Returns:
            The ``result`` member of the response, or whatever ``callback``
            returns when one is given
        """
        error, result = await self._exchange(method, params)

        # Nothing below may catch what the callback raises
        if callback is not None:
            outcome = callback(
                None if error is None else error.payload,
                result,
            )
            if inspect.isawaitable(outcome):
                outcome = await outcome
            return outcome

        if error is not None:
            raise error
        return result

    async def _exchange(
        self, method: str, params: Any
    ) -> Tuple[Optional[JSONRPCTransportError], Any]:
        if not self.config.host or not self.config.port:
            return TransportError({"message": "client needs a host and port to call"}), None

        request = JSONRPCRequest.outbound(method, params)
        try:
            body = json.dumps(request.to_envelope(), ensure_ascii=False).encode("utf-8")
        except (TypeError, ValueError) as e:
            return TransportError(format_error(e)), None
        headers = {
            "Content-Type": "application/json",
            "Content-Length": str(len(body)),
        }

        try:
            verify = self._verify()
        except (OSError, ssl.SSLError) as e:
            logger.warning(f"Could not load TLS settings for {self.url}: {e}")
            return TransportError(format_error(e)), None

        try:
            async with httpx.AsyncClient(verify=verify, timeout=None) as http:
                response = await http.post(self.url, content=body, headers=headers)
                text = response.text
        except httpx.HTTPError as e:
            logger.warning(f"JSON-RPC request {method!r} to {self.url} failed: {e}")
            return TransportError(format_error(e)), None

        return self.parse_response(text)

    @staticmethod
    def parse_response(text: str) -> Tuple[Optional[JSONRPCTransportError], Any]:
        """Interpret a full response body as ``(error, result)``."""
        if text in EMPTY_BODIES:
            return None, None

        try:
            parsed = json.loads(text)
        except ValueError:
            return MalformedResponseError(text), None

        if not isinstance(parsed, dict):
            return None, None

        if parsed.get("error"):
            return error_from_response(parsed["error"]), None

        return None, parsed.get("result")
