"""
Helpers for working with engine contexts and raw handles.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import z3

from .config import Settings, get_settings
from .errors import ContextMismatchError

logger = logging.getLogger(__name__)


def is_null(handle: Any) -> bool:
    """Return True if a raw engine handle is a null pointer."""
    if handle is None:
        return True
    # ctypes pointer wrappers carry the address in .value
    return getattr(handle, "value", handle) is None


def raw_context(ctx: z3.Context):
    """Return the raw engine context behind ``ctx``."""
    return ctx.ref()


def same_context(a: z3.Context, b: z3.Context) -> bool:
    """Return True if ``a`` and ``b`` name the same engine context."""
    if a is b:
        return True
    return raw_context(a).value == raw_context(b).value


def check_same_context(ctx: z3.Context, obj: Any, what: str) -> None:
    """Raise ContextMismatchError unless ``obj`` belongs to ``ctx``.

    Args:
        ctx: Context the query runs against
        obj: A z3 object carrying a ``ctx`` attribute
        what: Short description used in the error message
    """
    if not same_context(ctx, obj.ctx):
        raise ContextMismatchError(
            f"{what} belongs to a different context; translate it first"
        )


def new_context(settings: Optional[Settings] = None, **params: Any) -> z3.Context:
    """Create a fresh context.

    Parameters from ``settings`` (default: the environment) are applied
    first; keyword arguments override them.
    """
    if settings is None:
        settings = get_settings()
    merged = dict(settings.context_params)
    merged.update(params)
    logger.debug("Creating context with params %s", merged)
    return z3.Context(**merged)
