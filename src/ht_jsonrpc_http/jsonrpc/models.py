"""JSON-RPC 2.0 request/response models."""
import random
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict

JSONRPC_VERSION = "2.0"

# Client request ids are drawn from [0, MAX_REQUEST_ID)
MAX_REQUEST_ID = 100000


def generate_request_id() -> int:
    """Pseudo-unique request id for an outbound call."""
    return random.randrange(MAX_REQUEST_ID)


class JSONRPCRequest(BaseModel):
    """JSON-RPC 2.0 request model.

    Fields are deliberately loose so that a request with a wrong version or a
    missing method can still be decoded and answered.
    """

    model_config = ConfigDict(extra="allow")

    jsonrpc: Optional[Any] = None
    method: Optional[Any] = None
    params: Optional[Any] = None
    id: Optional[Any] = None

    @classmethod
    def outbound(cls, method: str, params: Any = None) -> "JSONRPCRequest":
        """Build a request for the client side, with a fresh id."""
        return cls(
            jsonrpc=JSONRPC_VERSION,
            method=method,
            params=params,
            id=generate_request_id(),
        )

    def is_supported_version(self) -> bool:
        return self.jsonrpc == JSONRPC_VERSION

    def to_envelope(self) -> Dict[str, Any]:
        return {
            "jsonrpc": self.jsonrpc,
            "method": self.method,
            "params": self.params,
            "id": self.id,
        }


class JSONRPCError(BaseModel):
    """JSON-RPC 2.0 error model."""

    code: int
    message: str
    data: Optional[Any] = None


class JSONRPCResponse(BaseModel):
    """JSON-RPC 2.0 response model."""

    jsonrpc: str = JSONRPC_VERSION
    id: Optional[Any] = None
    result: Optional[Any] = None
    error: Optional[JSONRPCError] = None

    def to_envelope(self) -> Dict[str, Any]:
        """Wire form: exactly one of ``result``/``error``, plus the echoed id."""
        envelope: Dict[str, Any] = {"jsonrpc": self.jsonrpc}
        if self.error is not None:
            envelope["error"] = self.error.model_dump(exclude_none=True)
        else:
            envelope["result"] = self.result
        envelope["id"] = self.id
        return envelope


class ErrorCode:
    """JSON-RPC 2.0 error codes used by the transport."""

    # Standard JSON-RPC 2.0 error codes
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600

    # Implementation-defined server error: dispatch failure
    APPLICATION_ERROR = -32000
