"""
Symbols: names for declared objects.

A symbol is either an unsigned integer id (``IntSymbol``) or a text name
(``StringSymbol``). Neither keeps an engine handle; every conversion to or
from the engine creates or reads a handle once and lets it go.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

import z3
from z3 import z3core
from z3.z3consts import Z3_INT_SYMBOL, Z3_STRING_SYMBOL

from .context import is_null, raw_context

# The engine takes ids as a C int and rejects negative ones
MAX_INT_SYMBOL = (1 << 31) - 1


class Symbol:
    """Base class of the two symbol variants. Not instantiable itself."""

    __slots__ = ()

    def __new__(cls, *args, **kwargs):
        if cls is Symbol:
            raise TypeError("Symbol is abstract; use IntSymbol or StringSymbol")
        return super().__new__(cls)

    @staticmethod
    def of(value: Union["Symbol", int, str]) -> "Symbol":
        """Build a symbol from a Python value without touching the engine."""
        if isinstance(value, Symbol):
            return value
        # bool is an int subclass but never a meaningful symbol id
        if isinstance(value, int) and not isinstance(value, bool):
            return IntSymbol(value)
        if isinstance(value, str):
            return StringSymbol(value)
        raise TypeError(f"Cannot build a symbol from {type(value).__name__}")

    def to_z3(self, ctx: z3.Context):
        """Create a fresh engine symbol handle in ``ctx``."""
        if isinstance(self, IntSymbol):
            return z3core.Z3_mk_int_symbol(raw_context(ctx), self.value)
        if isinstance(self, StringSymbol):
            return z3core.Z3_mk_string_symbol(raw_context(ctx), self.value.encode("utf-8"))
        raise TypeError(f"Unknown symbol variant: {type(self).__name__}")

    @staticmethod
    def from_z3(ctx: z3.Context, handle) -> "Symbol":
        """Decode an engine symbol handle.

        String payloads that are not valid UTF-8 are decoded with
        replacement characters.
        """
        ref = raw_context(ctx)
        kind = z3core.Z3_get_symbol_kind(ref, handle)
        if kind == Z3_INT_SYMBOL:
            return IntSymbol(z3core.Z3_get_symbol_int(ref, handle))
        if kind == Z3_STRING_SYMBOL:
            # Raw call so the bytes can be decoded lossily
            raw = z3core._lib.Z3_get_symbol_string(ref, handle)
            return StringSymbol((raw or b"").decode("utf-8", errors="replace"))
        raise ValueError(f"Unknown symbol kind: {kind}")


@dataclass(frozen=True)
class IntSymbol(Symbol):
    """Symbol named by a non-negative id no larger than MAX_INT_SYMBOL."""
    value: int

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"IntSymbol value must be int, got {type(self.value).__name__}")
        if not 0 <= self.value <= MAX_INT_SYMBOL:
            raise ValueError(
                f"IntSymbol value out of range: {self.value} (must be in 0..{MAX_INT_SYMBOL})"
            )

    def __str__(self) -> str:
        return f"k!{self.value}"


@dataclass(frozen=True)
class StringSymbol(Symbol):
    """Symbol named by text."""
    value: str

    def __post_init__(self):
        if not isinstance(self.value, str):
            raise TypeError(f"StringSymbol value must be str, got {type(self.value).__name__}")
        if "\0" in self.value:
            raise ValueError("StringSymbol value must not contain NUL characters")

    def __str__(self) -> str:
        return self.value


def to_engine_handle(symbol: Union[Symbol, int, str], ctx: z3.Context):
    """Encode ``symbol`` (or a plain int/str) as an engine symbol handle."""
    return Symbol.of(symbol).to_z3(ctx)


def from_engine_handle(ctx: z3.Context, handle) -> Symbol:
    """Decode an engine symbol handle into a Symbol."""
    if is_null(handle):
        raise ValueError("Cannot decode a null symbol handle")
    return Symbol.from_z3(ctx, handle)


def symbol_of_decl(decl: z3.FuncDeclRef) -> Symbol:
    """Return the symbol naming a function or constant declaration."""
    return Symbol.from_z3(decl.ctx, z3core.Z3_get_decl_name(decl.ctx_ref(), decl.ast))
