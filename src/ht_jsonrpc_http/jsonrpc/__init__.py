"""JSON-RPC 2.0 envelopes and request handling."""
from .models import (
    JSONRPC_VERSION,
    JSONRPCRequest,
    JSONRPCResponse,
    JSONRPCError,
    ErrorCode,
    generate_request_id,
)
from .handler import JSONRPCHandler, DispatchCallback

__all__ = [
    "JSONRPC_VERSION",
    "JSONRPCRequest",
    "JSONRPCResponse",
    "JSONRPCError",
    "ErrorCode",
    "generate_request_id",
    "JSONRPCHandler",
    "DispatchCallback",
]
