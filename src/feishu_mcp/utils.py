"""Small formatting helpers shared across modules."""

import json
import traceback
from typing import Any

from .errors import ApiError, TransportError

_MASK_VISIBLE_CHARS = 4


def mask_secret(value: str) -> str:
    """Mask a secret, keeping only the last four characters visible."""
    if len(value) <= _MASK_VISIBLE_CHARS:
        return "****"
    return f"****{value[-_MASK_VISIBLE_CHARS:]}"


def safe_json_dumps(value: Any, fallback: str = "Unknown error") -> str:
    """Serialize ``value`` to JSON, falling back to ``str`` for odd objects."""
    try:
        return json.dumps(value, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        return fallback


def format_error(error: object, *, structured: bool = False, include_stack: bool = False) -> str | dict[str, Any]:
    """Format an exception (or anything raised) for logging.

    Args:
        error: The error to format.
        structured: Return a dictionary instead of a string.
        include_stack: Include the traceback for ordinary exceptions.

    Returns:
        A one-line description or a JSON-serialisable dictionary.

    """
    if isinstance(error, TransportError):
        info = error.to_dict()
        return info if structured else safe_json_dumps(info)

    if isinstance(error, ApiError):
        info = {"type": type(error).__name__, "code": error.code, "message": error.msg}
        return info if structured else f"{type(error).__name__}: [{error.code}] {error.msg}"

    if isinstance(error, BaseException):
        text = f"{type(error).__name__}: {error}"
        stack = None
        if include_stack and error.__traceback__ is not None:
            stack = "".join(traceback.format_exception(error))
        if structured:
            return {"type": type(error).__name__, "message": str(error), "stack": stack}
        return stack or text

    if isinstance(error, str):
        return {"type": "String", "message": error} if structured else error

    return {"type": "Unknown", "data": error or "Unknown error"} if structured else safe_json_dumps(error)


__all__ = ["format_error", "mask_secret", "safe_json_dumps"]
