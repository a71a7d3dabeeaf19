"""Solver adapters that produce model handles."""

from .base import ModelSource
from .result import CheckResult, SolverResult
from .z3_solver import Z3Optimize, Z3Solver, model_values

__all__ = [
    "ModelSource",
    "CheckResult",
    "SolverResult",
    "Z3Solver",
    "Z3Optimize",
    "model_values",
]
