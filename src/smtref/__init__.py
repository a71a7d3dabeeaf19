"""
Safe access to Z3 models and symbols.

Wraps the engine's reference-counted model handles so that each wrapper
owns exactly one reference, and converts symbols between integer ids,
text names and engine handles.
"""

import logging

__version__ = "0.1.0"

from .errors import (
    SmtRefError,
    SortMismatchError,
    ModelFormatError,
    ContextMismatchError,
    ModelReleasedError,
)
from .config import Settings, get_settings
from .context import new_context, same_context
from .kinds import (
    ExprKind,
    ANY,
    ARITH,
    ARRAY,
    BITVEC,
    BOOL,
    DATATYPE,
    FP,
    INT,
    REAL,
    STRING,
    kind_for_sort,
    kind_of,
    resolve_kind,
)
from .symbol import (
    MAX_INT_SYMBOL,
    Symbol,
    IntSymbol,
    StringSymbol,
    to_engine_handle,
    from_engine_handle,
    symbol_of_decl,
)
from .model import Model
from .solver import CheckResult, SolverResult, Z3Optimize, Z3Solver, model_values
from .logging_config import setup_logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "SmtRefError",
    "SortMismatchError",
    "ModelFormatError",
    "ContextMismatchError",
    "ModelReleasedError",
    "Settings",
    "get_settings",
    "new_context",
    "same_context",
    "ExprKind",
    "ANY",
    "ARITH",
    "ARRAY",
    "BITVEC",
    "BOOL",
    "DATATYPE",
    "FP",
    "INT",
    "REAL",
    "STRING",
    "kind_for_sort",
    "kind_of",
    "resolve_kind",
    "MAX_INT_SYMBOL",
    "Symbol",
    "IntSymbol",
    "StringSymbol",
    "to_engine_handle",
    "from_engine_handle",
    "symbol_of_decl",
    "Model",
    "CheckResult",
    "SolverResult",
    "Z3Solver",
    "Z3Optimize",
    "model_values",
    "setup_logging",
]
