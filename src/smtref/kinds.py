"""
Expression kinds: how a raw expression handle becomes a typed z3 object.

Every kind can wrap a raw handle in its expression class and can tell
whether a sort belongs to it. Values keep their own ``sort()``. Where a
kind has a dedicated value class (``IntNumRef``, ``BitVecNumRef``, ...)
numerals are wrapped in it so callers get ``as_long()`` and friends.
"""
from __future__ import annotations

from typing import Any, Dict, FrozenSet, Optional, Type, Union

import z3
from z3 import z3core
from z3.z3consts import (
    Z3_ARRAY_SORT,
    Z3_BOOL_SORT,
    Z3_BV_SORT,
    Z3_DATATYPE_SORT,
    Z3_FLOATING_POINT_SORT,
    Z3_INT_SORT,
    Z3_REAL_SORT,
    Z3_SEQ_SORT,
)


class ExprKind:
    """Descriptor for one family of expressions.

    Attributes:
        name: Display name of the kind
        sort_kinds: Engine sort kinds this kind accepts; empty accepts all
        ref_class: z3 class used to wrap non-numeral handles
        value_classes: Sort kind -> z3 class used to wrap numerals
    """

    def __init__(self, name: str, sort_kinds=(), ref_class: Type[z3.ExprRef] = z3.ExprRef,
                 value_classes: Optional[Dict[int, Type[z3.ExprRef]]] = None):
        self.name = name
        self.sort_kinds: FrozenSet[int] = frozenset(sort_kinds)
        self.ref_class = ref_class
        self.value_classes = dict(value_classes or {})

    def accepts(self, sort: z3.SortRef) -> bool:
        """Return True if values of ``sort`` belong to this kind."""
        return not self.sort_kinds or sort.kind() in self.sort_kinds

    def wrap(self, ctx: z3.Context, raw) -> z3.ExprRef:
        """Wrap a raw expression handle owned by ``ctx``.

        The z3 object takes its own reference on the handle.
        """
        cls = self.ref_class
        if self.value_classes:
            ref = ctx.ref()
            if z3core.Z3_is_numeral_ast(ref, raw):
                sort_kind = z3core.Z3_get_sort_kind(ref, z3core.Z3_get_sort(ref, raw))
                cls = self.value_classes.get(sort_kind, cls)
        return cls(raw, ctx)

    def __repr__(self) -> str:
        return f"ExprKind({self.name})"


BOOL = ExprKind("Bool", (Z3_BOOL_SORT,), z3.BoolRef)
INT = ExprKind("Int", (Z3_INT_SORT,), z3.ArithRef, {Z3_INT_SORT: z3.IntNumRef})
REAL = ExprKind("Real", (Z3_REAL_SORT,), z3.ArithRef, {Z3_REAL_SORT: z3.RatNumRef})
ARITH = ExprKind("Arith", (Z3_INT_SORT, Z3_REAL_SORT), z3.ArithRef,
                 {Z3_INT_SORT: z3.IntNumRef, Z3_REAL_SORT: z3.RatNumRef})
BITVEC = ExprKind("BitVec", (Z3_BV_SORT,), z3.BitVecRef, {Z3_BV_SORT: z3.BitVecNumRef})
ARRAY = ExprKind("Array", (Z3_ARRAY_SORT,), z3.ArrayRef)
STRING = ExprKind("Seq", (Z3_SEQ_SORT,), z3.SeqRef)
DATATYPE = ExprKind("Datatype", (Z3_DATATYPE_SORT,), z3.DatatypeRef)
FP = ExprKind("FP", (Z3_FLOATING_POINT_SORT,), z3.FPRef)
ANY = ExprKind("Any")

_BY_SORT_KIND = {
    Z3_BOOL_SORT: BOOL,
    Z3_INT_SORT: INT,
    Z3_REAL_SORT: REAL,
    Z3_BV_SORT: BITVEC,
    Z3_ARRAY_SORT: ARRAY,
    Z3_SEQ_SORT: STRING,
    Z3_DATATYPE_SORT: DATATYPE,
    Z3_FLOATING_POINT_SORT: FP,
}

# Most specific classes first; resolved with issubclass
_BY_CLASS = (
    (z3.BoolRef, BOOL),
    (z3.IntNumRef, INT),
    (z3.RatNumRef, REAL),
    (z3.ArithRef, ARITH),
    (z3.BitVecRef, BITVEC),
    (z3.ArrayRef, ARRAY),
    (z3.SeqRef, STRING),
    (z3.DatatypeRef, DATATYPE),
    (z3.FPRef, FP),
    (z3.ExprRef, ANY),
)

KindLike = Union[ExprKind, Type[z3.ExprRef]]


def kind_for_sort(sort: z3.SortRef) -> ExprKind:
    """Return the kind matching ``sort``, or ANY for sorts without one."""
    return _BY_SORT_KIND.get(sort.kind(), ANY)


def kind_of(expr: z3.ExprRef) -> ExprKind:
    """Return the kind matching an expression's sort."""
    return kind_for_sort(expr.sort())


def resolve_kind(kind: Any) -> ExprKind:
    """Accept an ExprKind or a z3 expression class and return an ExprKind."""
    if isinstance(kind, ExprKind):
        return kind
    if isinstance(kind, type):
        for cls, resolved in _BY_CLASS:
            if issubclass(kind, cls):
                return resolved
    raise TypeError(f"Not an expression kind: {kind!r}")
