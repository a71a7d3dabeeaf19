"""
Exception types raised by the model and symbol layer.

Absence (no model, no interpretation, index out of range) is never an
exception; queries return ``None`` for it.
"""


class SmtRefError(Exception):
    """Base class for all smtref errors."""


class SortMismatchError(SmtRefError, AssertionError):
    """The interpretation's sort disagrees with the requested kind.

    This is a contract violation on the caller's side. It derives from
    AssertionError so generic error handling does not mistake it for a
    recoverable condition.
    """

    def __init__(self, decl_name: str, expected: str, actual: str):
        self.decl_name = decl_name
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Interpretation of '{decl_name}' has sort {actual}, "
            f"which is not accepted by kind {expected}"
        )


class ModelFormatError(SmtRefError, ValueError):
    """The engine could not render a model as text."""


class ContextMismatchError(SmtRefError, ValueError):
    """A handle from one context was passed to a query on another."""


class ModelReleasedError(SmtRefError, RuntimeError):
    """A model handle was used after it was released."""
