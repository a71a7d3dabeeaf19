"""
Pytest configuration and fixtures for smtref tests.
"""
import gc
import sys
from pathlib import Path

import pytest
import z3

# Add src to path for imports
src_path = Path(__file__).parent.parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))


@pytest.fixture
def ctx():
    """A fresh context, independent of z3's main context."""
    return z3.Context()


@pytest.fixture
def other_ctx():
    """A second fresh context for translation tests."""
    return z3.Context()


@pytest.fixture
def sat_solver(ctx):
    """A checked solver over x, y with x + y == 10 and x > 5."""
    x = z3.Int('x', ctx)
    y = z3.Int('y', ctx)
    solver = z3.Solver(ctx=ctx)
    solver.add(x + y == 10, x > 5)
    assert solver.check() == z3.sat
    return solver


class RefLedger:
    """Model reference increments and decrements, by handle address."""

    def __init__(self):
        self.events = []

    def counts(self, address=None):
        events = [e for e in self.events if address is None or e[1] == address]
        return {
            "inc": sum(1 for op, _ in events if op == "inc"),
            "dec": sum(1 for op, _ in events if op == "dec"),
        }

    @property
    def first_handle(self):
        return self.events[0][1]


@pytest.fixture
def refcounts(monkeypatch):
    """Record model reference increments and decrements."""
    from z3 import z3core

    # Drop leftover models from earlier tests before counting
    gc.collect()
    ledger = RefLedger()
    inc = z3core.Z3_model_inc_ref
    dec = z3core.Z3_model_dec_ref

    def counting_inc(c, m):
        ledger.events.append(("inc", m.value))
        return inc(c, m)

    def counting_dec(c, m):
        ledger.events.append(("dec", m.value))
        return dec(c, m)

    monkeypatch.setattr(z3core, "Z3_model_inc_ref", counting_inc)
    monkeypatch.setattr(z3core, "Z3_model_dec_ref", counting_dec)
    return ledger
