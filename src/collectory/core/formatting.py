#!/usr/bin/env python3
"""
Formatting helpers for Collectory.

- Stable, minimal one-line formatting for Pydantic v2 `ValidationError`.
- Error envelope rendering for callers that surface failures over a wire.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Sequence

from collectory.core.errors import CollectoryError
from collectory.core.utils import utc_now


# --- Public API --- #

def format_pydantic_errors_simple(exc: Exception) -> List[str]:
    """
    Return stable one-line messages from a Pydantic v2 ValidationError.

    Example:
        validation.minLength: Input should be a valid integer

    Falls back to the first line of str(exc) if `exc.errors()` isn't available.
    """
    errors: Sequence[dict[str, Any]] | None = None

    if callable(getattr(exc, "errors", None)):
        errors = exc.errors()  # type: ignore[attr-defined]

    if not errors:
        return [str(exc).splitlines()[0]]

    msgs: List[str] = []
    for err in errors:
        loc = err.get("loc", ())
        msg = err.get("msg", "Validation error")
        path = _format_error_loc(loc)
        msgs.append(f"{path}: {msg}")
    return msgs


def error_envelope(exc: Exception) -> Dict[str, Any]:
    """
    Render an exception as a failure envelope.

        {"success": False, "error": {"code": ..., "message": ...}, "timestamp": ...}

    Collectory errors keep their own code and message verbatim; anything else
    is reported as INTERNAL_ERROR.
    """
    if isinstance(exc, CollectoryError):
        code, message = exc.code, exc.message
    else:
        code, message = "INTERNAL_ERROR", str(exc) or type(exc).__name__
    return {
        "success": False,
        "error": {"code": code, "message": message},
        "timestamp": utc_now().isoformat(),
    }


# --- Internals --- #

def _format_error_loc(loc: Iterable[Any]) -> str:
    """
    Convert a Pydantic error `loc` tuple into a dotted path with index suffixes.

    Examples:
        ('validation', 'pattern') -> "validation.pattern"
        (0, 'items')              -> "[0].items"
        ()                        -> "<root>"
    """
    parts: List[str] = []
    for seg in loc:
        if isinstance(seg, int):
            if parts:
                parts[-1] = f"{parts[-1]}[{seg}]"
            else:
                parts.append(f"[{seg}]")
        else:
            parts.append(str(seg))
    return ".".join(parts) if parts else "<root>"
