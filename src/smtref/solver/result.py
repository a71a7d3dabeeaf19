"""
Solver check results.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Dict, Any

import z3


class SolverResult(Enum):
    """Result from SMT solver check."""
    SAT = "sat"
    UNSAT = "unsat"
    UNKNOWN = "unknown"

    @classmethod
    def from_z3(cls, result: z3.CheckSatResult) -> "SolverResult":
        """Map a z3 check result onto SolverResult."""
        if result == z3.sat:
            return cls.SAT
        if result == z3.unsat:
            return cls.UNSAT
        return cls.UNKNOWN


@dataclass
class CheckResult:
    """Outcome of a satisfiability check.
    
    Attributes:
        result: Raw solver result (SAT/UNSAT/UNKNOWN)
        model: Constant assignments as Python values (sat case only)
        solver_time_ms: Time taken by solver in milliseconds
        solver_name: Name of the solver backend used
    """
    result: SolverResult = SolverResult.UNKNOWN
    model: Optional[Dict[str, Any]] = None
    solver_time_ms: float = 0.0
    solver_name: str = "unknown"

    @property
    def is_sat(self) -> bool:
        return self.result == SolverResult.SAT

    def __str__(self) -> str:
        if self.is_sat:
            assignment = ", ".join(f"{k}={v}" for k, v in sorted((self.model or {}).items()))
            return f"sat: {assignment} ({self.solver_name}, {self.solver_time_ms:.2f}ms)"
        return f"{self.result.value} ({self.solver_name}, {self.solver_time_ms:.2f}ms)"
