"""
Interface shared by the solver adapters.
"""
from typing import Protocol, Any, Optional, Dict

from .result import CheckResult
from ..model import Model


class ModelSource(Protocol):
    """Something that checks constraints and hands out model handles.
    
    Implemented by the Z3 solver and optimizer adapters.
    """
    
    def add_constraint(self, constraint: Any) -> None:
        """Add a constraint.
        
        Args:
            constraint: z3 boolean expression
        """
        ...
    
    def check_sat(self) -> CheckResult:
        """Check satisfiability of added constraints.
        
        Returns:
            CheckResult with sat/unsat status and, when sat, the assignment
        """
        ...
    
    def model(self) -> Optional[Model]:
        """Return a handle on the current model, or None if there is none."""
        ...
    
    def get_model(self) -> Optional[Dict[str, Any]]:
        """Return the current model as a name -> value dict, or None."""
        ...
    
    def push(self) -> None:
        """Push a new assertion scope."""
        ...
    
    def pop(self) -> None:
        """Pop the most recent assertion scope."""
        ...
    
    def reset(self) -> None:
        """Reset the solver state, clearing all constraints."""
        ...
