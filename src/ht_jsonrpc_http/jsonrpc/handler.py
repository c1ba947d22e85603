"""JSON-RPC 2.0 request handler."""
import inspect
import json
import logging
from typing import Any, Awaitable, Callable, Optional, Tuple, Union

from fastapi.encoders import jsonable_encoder
from starlette.concurrency import run_in_threadpool

from ..utils.errors import ApplicationError, JSONRPCTransportError, ProtocolError
from ..utils.formatting import format_error
from .models import ErrorCode, JSONRPCError, JSONRPCRequest, JSONRPCResponse

logger = logging.getLogger(__name__)

DispatchCallback = Callable[[Optional[str], Any], Union[Any, Awaitable[Any]]]

VERSION_MESSAGE = "require version 2.0"
NO_DISPATCH_MESSAGE = "no dispatch handler configured"


class JSONRPCHandler:
    """Runs the dispatch callback for one decoded request body.

    Every outcome becomes a ``(status, JSONRPCResponse)`` pair; nothing raised
    by the dispatch callback escapes ``handle_request``.
    """

    def __init__(self, dispatch: Optional[DispatchCallback] = None):
        self.dispatch = dispatch

    async def handle_request(self, body: Any) -> Tuple[int, JSONRPCResponse]:
        """Handle an already-decoded request body.

        Args:
            body: Decoded JSON value of the HTTP request body

        Returns:
            HTTP status and the response envelope
        """
        if not isinstance(body, dict):
            logger.warning("Rejected request: body is not a JSON object")
            return 400, self.protocol_error(None)

        request = JSONRPCRequest.model_validate(body)
        if not request.is_supported_version():
            logger.warning(f"Rejected request with jsonrpc={request.jsonrpc!r}")
            return 400, self.protocol_error(request.id)

        try:
            result = await self._dispatch(request)
            result = jsonable_encoder(result)
            # Same constraint as JSONResponse.render: NaN and infinities are not JSON
            json.dumps(result, allow_nan=False)
            return 200, JSONRPCResponse(id=request.id, result=result)
        except JSONRPCTransportError as e:
            logger.warning(f"Dispatch of {request.method!r} failed: {e.message}")
            return 500, self.application_error(request.id, e)
        except Exception as e:
            logger.error(f"Dispatch of {request.method!r} raised: {e}", exc_info=True)
            return 500, self.application_error(request.id, e)

    async def _dispatch(self, request: JSONRPCRequest) -> Any:
        if self.dispatch is None:
            raise ApplicationError(NO_DISPATCH_MESSAGE)

        if inspect.iscoroutinefunction(self.dispatch):
            result = await self.dispatch(request.method, request.params)
        else:
            # Plain callables run in the threadpool so a slow one only stalls
            # its own request
            result = await run_in_threadpool(self.dispatch, request.method, request.params)

        if inspect.isawaitable(result):
            result = await result
        return result

    @staticmethod
    def protocol_error(request_id: Any) -> JSONRPCResponse:
        return JSONRPCResponse(
            id=request_id,
            error=JSONRPCError(code=ProtocolError.code, message=VERSION_MESSAGE),
        )

    @staticmethod
    def application_error(request_id: Any, error: Any) -> JSONRPCResponse:
        return JSONRPCResponse(
            id=request_id,
            error=JSONRPCError(
                code=ErrorCode.APPLICATION_ERROR,
                message=format_error(error)["message"],
            ),
        )

    @staticmethod
    def parse_error() -> JSONRPCResponse:
        return JSONRPCResponse(
            id=None,
            error=JSONRPCError(code=ErrorCode.PARSE_ERROR, message="parse error"),
        )
