"""
Reference-counted model handles.

A ``Model`` owns exactly one reference on an engine model: it is taken when
the wrapper is built and given back by ``close()`` (or when the wrapper is
garbage collected). Queries never take further references on the model;
completing evaluation works on a private copy that it releases itself.
"""
from __future__ import annotations

import logging
from typing import Iterator, Optional

import z3
from z3 import z3core
from z3.z3types import Ast

from .context import check_same_context, is_null
from .errors import ModelFormatError, ModelReleasedError, SortMismatchError
from .kinds import ANY, KindLike, kind_of, resolve_kind

logger = logging.getLogger(__name__)


class Model:
    """A satisfying assignment produced by a solver or optimizer.

    Obtain one with ``Model.of_solver``, ``Model.of_optimize`` or
    ``translate``. The wrapper keeps its context alive and must only be
    used with objects from that same context.

    Example:
        >>> s = z3.Solver()
        >>> x = z3.Int('x')
        >>> s.add(x > 3)
        >>> s.check()
        sat
        >>> with Model.of_solver(s) as m:
        ...     m.eval(x, model_completion=True).as_long() > 3
        True
    """

    def __init__(self, ctx: z3.Context, handle):
        """Wrap a raw model handle owned by ``ctx``, taking one reference."""
        if is_null(handle):
            raise ValueError("Cannot wrap a null model handle")
        z3core.Z3_model_inc_ref(ctx.ref(), handle)
        self._ctx = ctx
        self._handle = handle
        self._released = False
        logger.debug("Acquired model handle %#x", handle.value)

    @classmethod
    def of_solver(cls, solver: z3.Solver) -> Optional["Model"]:
        """Return the solver's current model, or None if it has none.

        A solver has no model before its first check and after a check
        that was not sat.
        """
        try:
            handle = z3core.Z3_solver_get_model(solver.ctx.ref(), solver.solver)
        except z3.Z3Exception as exc:
            logger.debug("Solver has no current model: %s", exc)
            return None
        if is_null(handle):
            return None
        return cls(solver.ctx, handle)

    @classmethod
    def of_optimize(cls, optimize: z3.Optimize) -> Optional["Model"]:
        """Return the optimizer's current model, or None if it has none."""
        try:
            handle = z3core.Z3_optimize_get_model(optimize.ctx.ref(), optimize.optimize)
        except z3.Z3Exception as exc:
            logger.debug("Optimizer has no current model: %s", exc)
            return None
        if is_null(handle):
            return None
        return cls(optimize.ctx, handle)

    @property
    def ctx(self) -> z3.Context:
        return self._ctx

    @property
    def released(self) -> bool:
        return self._released

    def _ref(self):
        if self._released:
            raise ModelReleasedError("Model handle has already been released")
        return self._ctx.ref()

    def translate(self, dest: z3.Context) -> "Model":
        """Copy this model into context ``dest``.

        The copy holds its own reference and is released independently;
        this model is left untouched.
        """
        handle = z3core.Z3_model_translate(self._ref(), self._handle, dest.ref())
        logger.debug("Translated model %#x into context %#x", self._handle.value, dest.ref().value)
        return Model(dest, handle)

    def eval(self, expr: z3.ExprRef, model_completion: bool = False) -> Optional[z3.ExprRef]:
        """Evaluate ``expr`` in this model.

        With ``model_completion`` set, constants the model leaves unassigned
        get a default value chosen by the engine. Returns None if the engine
        reports that evaluation failed. The result has the same kind as
        ``expr``.
        """
        ref = self._ref()
        check_same_context(self._ctx, expr, "Expression")
        out = (Ast * 1)()
        if not model_completion:
            if not z3core.Z3_model_eval(ref, self._handle, expr.as_ast(), False, out):
                return None
            return kind_of(expr).wrap(self._ctx, out[0])

        # Completion writes the chosen defaults into the model it runs on,
        # so it runs on a private copy
        scratch = z3core.Z3_model_translate(ref, self._handle, ref)
        z3core.Z3_model_inc_ref(ref, scratch)
        try:
            if not z3core.Z3_model_eval(ref, scratch, expr.as_ast(), True, out):
                return None
            return kind_of(expr).wrap(self._ctx, out[0])
        finally:
            z3core.Z3_model_dec_ref(ref, scratch)

    def get_num_consts(self) -> int:
        """Return the number of constants the model interprets."""
        return z3core.Z3_model_get_num_consts(self._ref(), self._handle)

    def get_const_decl(self, index: int) -> Optional[z3.FuncDeclRef]:
        """Return the ``index``-th constant declaration, or None if there is none."""
        if index < 0 or index >= self.get_num_consts():
            return None
        handle = z3core.Z3_model_get_const_decl(self._ref(), self._handle, index)
        return z3.FuncDeclRef(handle, self._ctx)

    def decls(self) -> Iterator[z3.FuncDeclRef]:
        """Iterate over the constant declarations in index order."""
        for i in range(self.get_num_consts()):
            yield self.get_const_decl(i)

    def _const_interp(self, decl):
        ref = self._ref()
        if isinstance(decl, z3.ExprRef) and z3.is_const(decl):
            decl = decl.decl()
        check_same_context(self._ctx, decl, "Declaration")
        handle = z3core.Z3_model_get_const_interp(ref, self._handle, decl.ast)
        if is_null(handle):
            return None, decl
        return handle, decl

    def get_const_interp(self, decl, kind: KindLike = ANY) -> Optional[z3.ExprRef]:
        """Return the value the model assigns to constant ``decl``.

        ``decl`` is a FuncDeclRef or a constant expression. None means the
        model leaves the constant unconstrained. A present value whose sort
        is not accepted by ``kind`` raises SortMismatchError; that is a bug
        in the caller, not a condition to recover from.
        """
        kind = resolve_kind(kind)
        handle, decl = self._const_interp(decl)
        if handle is None:
            return None

        actual = z3.SortRef(z3core.Z3_get_sort(self._ctx.ref(), handle), self._ctx)
        value = kind.wrap(self._ctx, handle)
        if not (kind.accepts(actual) and value.sort() == actual):
            raise SortMismatchError(decl.name(), kind.name, str(actual))
        return value

    def get_const_interp_unchecked(self, decl, kind: KindLike = ANY) -> Optional[z3.ExprRef]:
        """Like ``get_const_interp`` but without the sort check.

        The caller guarantees that ``kind`` matches the interpretation's
        sort. If it does not, the returned object is meaningless.
        """
        kind = resolve_kind(kind)
        handle, _ = self._const_interp(decl)
        if handle is None:
            return None
        return kind.wrap(self._ctx, handle)

    def to_string(self) -> str:
        """Render the model in the engine's textual format.

        Raises:
            ModelFormatError: If the engine produces no text or bytes that
                are not valid UTF-8
        """
        # Raw call: the checked binding maps a null result to "" and
        # decodes strictly, hiding both failure modes
        raw = z3core._lib.Z3_model_to_string(self._ref(), self._handle)
        if raw is None:
            raise ModelFormatError("Engine returned no text for the model")
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ModelFormatError(f"Model text is not valid UTF-8: {exc}") from exc

    def close(self) -> None:
        """Release the model handle. Calling it again does nothing."""
        if self._released:
            return
        self._released = True
        handle, self._handle = self._handle, None
        logger.debug("Releasing model handle %#x", handle.value)
        z3core.Z3_model_dec_ref(self._ctx.ref(), handle)

    def __enter__(self) -> "Model":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __del__(self):
        if getattr(self, "_released", True):
            return
        # Modules may already be torn down at interpreter exit
        if z3core is None or z3core.Z3_model_dec_ref is None or self._ctx.ref() is None:
            return
        self._released = True
        z3core.Z3_model_dec_ref(self._ctx.ref(), self._handle)
        self._handle = None

    def __copy__(self) -> "Model":
        self._ref()
        return Model(self._ctx, self._handle)

    def __deepcopy__(self, memo=None) -> "Model":
        return self.translate(self._ctx)

    def __len__(self) -> int:
        return self.get_num_consts()

    def __iter__(self) -> Iterator[z3.FuncDeclRef]:
        return self.decls()

    def __contains__(self, decl) -> bool:
        handle, _ = self._const_interp(decl)
        return handle is not None

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        if self._released:
            return "<Model (released)>"
        try:
            return self.to_string()
        except ModelFormatError:
            return "<Model (unrenderable)>"
