"""Error normalization to a uniform ``{"message": str}`` shape."""
import json
from typing import Any, Dict

UNKNOWN_ERROR = "unknown error"


def format_error(error: Any) -> Dict[str, str]:
    """Normalize an arbitrary error value.

    Exceptions use their string form (or class name when empty), strings are
    kept as-is, mappings contribute their ``message`` or nested ``error``
    member, anything else is rendered as JSON.
    """
    if error is None:
        return {"message": UNKNOWN_ERROR}

    if isinstance(error, BaseException):
        message = getattr(error, "message", None)
        if not isinstance(message, str):
            message = str(error) or type(error).__name__
        return {"message": message}

    if isinstance(error, str):
        return {"message": error}

    if isinstance(error, bytes):
        return {"message": error.decode("utf-8", errors="replace")}

    if isinstance(error, dict):
        if "message" in error and error["message"] is not None:
            return {"message": str(error["message"])}
        if "error" in error and error["error"] is not None:
            return format_error(error["error"])

    try:
        return {"message": json.dumps(error, default=str)}
    except (TypeError, ValueError):
        return {"message": str(error)}
