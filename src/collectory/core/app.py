#!/usr/bin/env python3
"""
Purpose:
    Lazily built, process-wide `AppContext` for CLI entry points.
"""
from typing import Optional

from collectory.core.app_context import AppContext, build_context

_CTX: Optional[AppContext] = None


def get_context(*, force_reload: bool = False) -> AppContext:
    """Return the cached context, building it on first use or when `force_reload` is set."""
    global _CTX
    if _CTX is None or force_reload:
        _CTX = build_context()
    return _CTX


def reset_context() -> None:
    """Forget the cached context; the next `get_context()` rebuilds it."""
    global _CTX
    _CTX = None
