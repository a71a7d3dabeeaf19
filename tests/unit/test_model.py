"""
Tests for reference-counted model handles.
"""
import copy
import gc

import pytest
import z3

from smtref import (
    ANY,
    BOOL,
    INT,
    REAL,
    ContextMismatchError,
    Model,
    ModelFormatError,
    ModelReleasedError,
    SortMismatchError,
)


def test_unsat_solver_has_no_model(ctx):
    """Asserting false on a fresh solver leaves no model to fetch."""
    solver = z3.Solver(ctx=ctx)
    solver.add(z3.BoolVal(False, ctx))
    assert solver.check() == z3.unsat
    assert Model.of_solver(solver) is None


def test_contradiction_has_no_model(ctx):
    x = z3.Int('x', ctx)
    solver = z3.Solver(ctx=ctx)
    solver.add(x > 10, x < 5)
    assert solver.check() == z3.unsat
    assert Model.of_solver(solver) is None


def test_unchecked_solver_has_no_model(ctx):
    """Before any check there is no model."""
    solver = z3.Solver(ctx=ctx)
    assert Model.of_solver(solver) is None


def test_eval_is_consistent_with_constraints(ctx, sat_solver):
    x = z3.Int('x', ctx)
    y = z3.Int('y', ctx)
    with Model.of_solver(sat_solver) as m:
        total = m.eval(x + y, model_completion=True)
        assert isinstance(total, z3.IntNumRef)
        assert total.as_long() == 10
        assert m.eval(x, True).as_long() > 5
        assert z3.is_true(m.eval(x > 5, True))


def test_eval_bool_result_kind(ctx, sat_solver):
    x = z3.Int('x', ctx)
    with Model.of_solver(sat_solver) as m:
        result = m.eval(x > 5, True)
        assert isinstance(result, z3.BoolRef)


def test_eval_model_completion(ctx, sat_solver):
    """Completion assigns a value to a constant the model does not mention."""
    z = z3.Int('z', ctx)
    with Model.of_solver(sat_solver) as m:
        completed = m.eval(z, model_completion=True)
        assert z3.is_int_value(completed)


def test_eval_without_completion_returns_unassigned_constant(ctx, sat_solver):
    z = z3.Int('z', ctx)
    with Model.of_solver(sat_solver) as m:
        partial = m.eval(z, model_completion=False)
        assert partial is not None
        assert partial.eq(z)


def test_completing_eval_does_not_mutate_model(ctx, sat_solver):
    """The model looks the same before and after a completing eval."""
    z = z3.Int('z', ctx)
    with Model.of_solver(sat_solver) as m:
        consts_before = m.get_num_consts()
        text_before = m.to_string()

        assert z3.is_int_value(m.eval(z + 1, model_completion=True))

        assert m.get_num_consts() == consts_before
        assert m.to_string() == text_before
        assert m.get_const_interp(z.decl(), INT) is None
        assert m.eval(z, model_completion=False).eq(z)


def test_eval_rejects_foreign_expression(sat_solver, other_ctx):
    with Model.of_solver(sat_solver) as m:
        with pytest.raises(ContextMismatchError):
            m.eval(z3.Int('x', other_ctx), True)


def test_const_decls(sat_solver):
    with Model.of_solver(sat_solver) as m:
        assert m.get_num_consts() == 2
        assert len(m) == 2
        names = {m.get_const_decl(i).name() for i in range(m.get_num_consts())}
        assert names == {'x', 'y'}
        assert {d.name() for d in m} == {'x', 'y'}


def test_const_decl_out_of_range(sat_solver):
    """Indexes at or past the count are absent, not errors."""
    with Model.of_solver(sat_solver) as m:
        n = m.get_num_consts()
        for i in range(n, n + 5):
            assert m.get_const_decl(i) is None
        assert m.get_const_decl(-1) is None


def test_empty_model_has_no_decls(ctx):
    solver = z3.Solver(ctx=ctx)
    assert solver.check() == z3.sat
    with Model.of_solver(solver) as m:
        assert m.get_num_consts() == 0
        assert m.get_const_decl(0) is None
        assert list(m) == []


def test_const_interp(ctx, sat_solver):
    x = z3.Int('x', ctx)
    y = z3.Int('y', ctx)
    with Model.of_solver(sat_solver) as m:
        xv = m.get_const_interp(x.decl(), INT)
        yv = m.get_const_interp(y, z3.ArithRef)
        assert isinstance(xv, z3.IntNumRef)
        assert xv.as_long() + yv.as_long() == 10
        assert m.get_const_interp(x.decl()).sort() == z3.IntSort(ctx)


def test_const_interp_absent(ctx, sat_solver):
    """A constant the model does not mention has no interpretation."""
    z = z3.Int('z', ctx)
    with Model.of_solver(sat_solver) as m:
        assert m.get_const_interp(z.decl(), INT) is None
        assert m.get_const_interp_unchecked(z.decl(), INT) is None
        assert z.decl() not in m
        assert z3.Int('x', ctx).decl() in m


def test_const_interp_sort_mismatch(ctx):
    b = z3.Bool('b', ctx)
    r = z3.Real('r', ctx)
    solver = z3.Solver(ctx=ctx)
    solver.add(b, r > 1)
    assert solver.check() == z3.sat

    with Model.of_solver(solver) as m:
        with pytest.raises(SortMismatchError):
            m.get_const_interp(b.decl(), INT)
        with pytest.raises(AssertionError):
            m.get_const_interp(r.decl(), INT)
        assert z3.is_true(m.get_const_interp(b.decl(), BOOL))
        assert m.get_const_interp(r.decl(), REAL) is not None


def test_const_interp_unchecked_skips_sort_check(ctx):
    b = z3.Bool('b', ctx)
    solver = z3.Solver(ctx=ctx)
    solver.add(b)
    assert solver.check() == z3.sat

    with Model.of_solver(solver) as m:
        assert m.get_const_interp_unchecked(b.decl(), INT) is not None
        assert z3.is_true(m.get_const_interp_unchecked(b.decl(), BOOL))


def test_const_interp_rejects_foreign_decl(sat_solver, other_ctx):
    with Model.of_solver(sat_solver) as m:
        with pytest.raises(ContextMismatchError):
            m.get_const_interp(z3.Int('x', other_ctx).decl(), INT)


def test_translate_is_independent(ctx, other_ctx, sat_solver):
    """The source model survives queries on, and release of, its translation."""
    x = z3.Int('x', ctx)
    src = Model.of_solver(sat_solver)
    dst = src.translate(other_ctx)

    assert dst.ctx is other_ctx
    assert dst.get_num_consts() == src.get_num_consts()
    x_dst = x.translate(other_ctx)
    assert dst.eval(x_dst, True).as_long() == src.eval(x, True).as_long()
    with pytest.raises(ContextMismatchError):
        dst.eval(x, True)

    dst.close()
    assert src.get_num_consts() == 2
    assert src.eval(x, True).as_long() > 5

    other = src.translate(other_ctx)
    src.close()
    assert other.eval(x_dst, True).as_long() > 5
    other.close()


def test_released_model_refuses_queries(sat_solver):
    m = Model.of_solver(sat_solver)
    m.close()
    assert m.released
    m.close()
    with pytest.raises(ModelReleasedError):
        m.get_num_consts()
    with pytest.raises(ModelReleasedError):
        m.to_string()
    assert repr(m) == "<Model (released)>"


def test_context_manager_releases(sat_solver):
    with Model.of_solver(sat_solver) as m:
        assert not m.released
    assert m.released


def test_to_string(sat_solver):
    with Model.of_solver(sat_solver) as m:
        text = m.to_string()
        assert 'x' in text and 'y' in text
        assert str(m) == text
        assert repr(m) == text


class _FakeLib:
    """Engine library whose model rendering returns a fixed result."""

    def __init__(self, real, result):
        self.real = real
        self.result = result

    def __getattr__(self, name):
        return getattr(self.real, name)

    def Z3_model_to_string(self, ctx, model):
        return self.result


@pytest.mark.parametrize("raw", [None, b"\xff\xfe broken"])
def test_to_string_failure(monkeypatch, sat_solver, raw):
    """A null or undecodable rendering is a format error."""
    from z3 import z3core

    with Model.of_solver(sat_solver) as m:
        monkeypatch.setattr(z3core, "_lib", _FakeLib(z3core._lib, raw))
        with pytest.raises(ModelFormatError):
            m.to_string()
        with pytest.raises(ModelFormatError):
            str(m)
        assert repr(m) == "<Model (unrenderable)>"


def test_one_reference_per_wrapper(refcounts, sat_solver):
    """Queries take no references on the model; release gives back exactly one."""
    x = z3.Int('x', sat_solver.ctx)
    m = Model.of_solver(sat_solver)
    assert refcounts.counts() == {"inc": 1, "dec": 0}
    own = refcounts.first_handle

    for _ in range(3):
        m.eval(x, True)
        m.eval(x, False)
        m.get_num_consts()
        m.get_const_decl(0)
        m.get_const_interp(x.decl(), INT)
        m.to_string()
    assert refcounts.counts(own) == {"inc": 1, "dec": 0}
    # Copies made for completing evals are all given back
    totals = refcounts.counts()
    assert totals["inc"] - totals["dec"] == 1

    m.close()
    m.close()
    assert refcounts.counts(own) == {"inc": 1, "dec": 1}
    totals = refcounts.counts()
    assert totals["inc"] == totals["dec"]


def test_no_reference_for_missing_model(refcounts, ctx):
    solver = z3.Solver(ctx=ctx)
    solver.add(z3.BoolVal(False, ctx))
    solver.check()
    assert Model.of_solver(solver) is None
    assert refcounts.counts() == {"inc": 0, "dec": 0}


def test_translate_and_copy_take_own_reference(refcounts, other_ctx, sat_solver):
    m = Model.of_solver(sat_solver)
    t = m.translate(other_ctx)
    c = copy.copy(m)
    d = copy.deepcopy(m)
    assert refcounts.counts() == {"inc": 4, "dec": 0}

    m.close()
    assert c.get_num_consts() == 2
    for other in (t, c, d):
        other.close()
    assert refcounts.counts() == {"inc": 4, "dec": 4}


def test_garbage_collection_releases(refcounts, sat_solver):
    m = Model.of_solver(sat_solver)
    del m
    gc.collect()
    assert refcounts.counts() == {"inc": 1, "dec": 1}


def test_of_optimize(ctx):
    x = z3.Int('x', ctx)
    opt = z3.Optimize(ctx=ctx)
    opt.add(x >= 0, x <= 10)
    opt.maximize(x)
    assert opt.check() == z3.sat

    with Model.of_optimize(opt) as m:
        assert m.eval(x, True).as_long() == 10
        assert m.get_const_interp(x, INT).as_long() == 10
        assert m.get_const_interp(x, ANY).eq(z3.IntVal(10, ctx))
