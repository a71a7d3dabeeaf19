"""
Z3 solver and optimizer adapters.
"""
from abc import ABC, abstractmethod
import logging
import time
from typing import Any, Optional, Dict
import z3

from ..kinds import kind_for_sort
from ..model import Model
from .result import CheckResult, SolverResult

logger = logging.getLogger(__name__)


def model_values(model: Model) -> Dict[str, Any]:
    """Convert a model's constant assignments to Python values.
    
    Args:
        model: Open model handle
        
    Returns:
        Dictionary mapping constant names to ints, bools or strings
    """
    result = {}
    
    for decl in model.decls():
        name = decl.name()
        value = model.get_const_interp(decl, kind_for_sort(decl.range()))
        if value is None:
            continue
        
        # Convert Z3 values to Python types
        if z3.is_int_value(value):
            result[name] = value.as_long()
        elif z3.is_bv_value(value):
            result[name] = value.as_long()
        elif z3.is_true(value):
            result[name] = True
        elif z3.is_false(value):
            result[name] = False
        else:
            result[name] = str(value)
    
    return result


class _Z3Backend(ABC):
    """Shared check/model plumbing for the solver and optimizer adapters."""

    solver_name = "z3"

    def __init__(self, engine):
        self._engine = engine

    @property
    def ctx(self) -> z3.Context:
        return self._engine.ctx

    def add_constraint(self, constraint: Any) -> None:
        """Add a Z3 constraint.
        
        Args:
            constraint: Z3 boolean expression
        """
        self._engine.add(constraint)

    def check_sat(self) -> CheckResult:
        """Check satisfiability of constraints.
        
        Returns:
            CheckResult with status and, if sat, the assignment
        """
        start_time = time.time()
        result = SolverResult.from_z3(self._engine.check())
        elapsed_ms = (time.time() - start_time) * 1000
        logger.debug("%s check: %s in %.2fms", self.solver_name, result.value, elapsed_ms)

        values = None
        if result == SolverResult.SAT:
            values = self.get_model()

        return CheckResult(
            result=result,
            model=values,
            solver_time_ms=elapsed_ms,
            solver_name=self.solver_name,
        )

    @abstractmethod
    def model(self) -> Optional[Model]:
        """Return the current model, or None if there is none."""

    def get_model(self) -> Optional[Dict[str, Any]]:
        """Return the current model as a name -> value dict.
        
        Returns:
            Dictionary mapping variable names to their values, or None
            if the last check did not produce a model
        """
        model = self.model()
        if model is None:
            return None
        with model:
            return model_values(model)

    def push(self) -> None:
        """Push a new assertion scope."""
        self._engine.push()

    def pop(self) -> None:
        """Pop the most recent assertion scope."""
        self._engine.pop()


class Z3Solver(_Z3Backend):
    """Adapter over ``z3.Solver`` handing out ``Model`` handles."""

    def __init__(self, ctx: Optional[z3.Context] = None):
        """Create a solver in ``ctx`` (the default context if None)."""
        self.solver = z3.Solver(ctx=ctx)
        super().__init__(self.solver)

    def model(self) -> Optional[Model]:
        """Return the current model, or None if the last check was not sat."""
        return Model.of_solver(self.solver)

    def reset(self) -> None:
        """Reset solver state."""
        self.solver.reset()


class Z3Optimize(_Z3Backend):
    """Adapter over ``z3.Optimize`` handing out ``Model`` handles."""

    solver_name = "z3-opt"

    def __init__(self, ctx: Optional[z3.Context] = None):
        """Create an optimizer in ``ctx`` (the default context if None)."""
        self.optimize = z3.Optimize(ctx=ctx)
        super().__init__(self.optimize)

    def minimize(self, expr: Any):
        """Add a minimization objective."""
        return self.optimize.minimize(expr)

    def maximize(self, expr: Any):
        """Add a maximization objective."""
        return self.optimize.maximize(expr)

    def model(self) -> Optional[Model]:
        """Return the current model, or None if there is none."""
        return Model.of_optimize(self.optimize)

    def reset(self) -> None:
        """Replace the optimizer with a fresh one in the same context."""
        self.optimize = z3.Optimize(ctx=self.ctx)
        self._engine = self.optimize
