"""Tests for Result monad implementation.

Validates:
- Functor laws
- Monad laws
- Failure pass-through identity
- Functional forms
"""

from __future__ import annotations

from typing import Callable

import pytest

from airesponse.foundation.errors import (
    Err,
    Ok,
    Result,
    chain,
    failure,
    is_failure,
    is_success,
    map_result,
    match_result,
    success,
    try_fn,
    unwrap_or,
)


# ═════════════════════════════════════════════════════════════════════════════
# Property Tests - Functor Laws
# ═════════════════════════════════════════════════════════════════════════════


def test_functor_identity() -> None:
    """Functor law: fmap id = id"""
    result: Result[int, str] = Ok(42)
    assert result.map(lambda x: x) == result

    err_result: Result[int, str] = Err("fail")
    assert err_result.map(lambda x: x) == err_result


def test_functor_composition() -> None:
    """Functor law: fmap (f . g) = fmap f . fmap g"""
    f: Callable[[int], int] = lambda x: x + 1
    g: Callable[[int], int] = lambda x: x * 2

    result: Result[int, str] = Ok(5)
    assert result.map(lambda x: f(g(x))) == result.map(g).map(f)


# ═════════════════════════════════════════════════════════════════════════════
# Property Tests - Monad Laws
# ═════════════════════════════════════════════════════════════════════════════


def test_monad_left_identity() -> None:
    """Monad law: return a >>= f = f a"""
    f: Callable[[int], Result[int, str]] = lambda x: Ok(x * 2)
    assert Ok(42).flat_map(f) == f(42)


def test_monad_right_identity() -> None:
    """Monad law: m >>= return = m"""
    m: Result[int, str] = Ok(42)
    assert m.flat_map(lambda x: Ok(x)) == m


def test_monad_associativity() -> None:
    """Monad law: (m >>= f) >>= g = m >>= (\\x -> f x >>= g)"""
    m: Result[int, str] = Ok(5)
    f: Callable[[int], Result[int, str]] = lambda x: Ok(x + 1)
    g: Callable[[int], Result[int, str]] = lambda x: Ok(x * 2)

    assert m.flat_map(f).flat_map(g) == m.flat_map(lambda x: f(x).flat_map(g))


# ═════════════════════════════════════════════════════════════════════════════
# Operational Tests
# ═════════════════════════════════════════════════════════════════════════════


def test_ok_construction() -> None:
    result: Result[int, str] = Ok(42)

    assert result.is_ok()
    assert not result.is_err()
    assert result.unwrap() == 42
    assert result.ok() == 42
    assert result.err() is None
    assert bool(result)


def test_err_construction() -> None:
    result: Result[int, str] = Err("failed")

    assert not result.is_ok()
    assert result.is_err()
    assert result.unwrap_err() == "failed"
    assert result.ok() is None
    assert result.err() == "failed"
    assert not result


def test_map_on_ok_applies_function() -> None:
    assert Ok(5).map(lambda x: x * 2) == Ok(10)


def test_map_on_err_returns_same_object() -> None:
    """The failure variant passes through untouched, not rebuilt."""
    calls: list[int] = []
    result: Result[int, str] = Err("fail")
    mapped = result.map(lambda x: calls.append(x) or x)

    assert mapped is result
    assert calls == []


def test_flat_map_on_err_returns_same_object() -> None:
    result: Result[int, str] = Err("fail")
    assert result.flat_map(lambda x: Ok(x + 1)) is result
    assert result.chain(lambda x: Ok(x + 1)) is result


def test_flat_map_short_circuits() -> None:
    def validate_positive(n: int) -> Result[int, str]:
        return Ok(n) if n > 0 else Err("must be positive")

    assert Ok(-1).flat_map(validate_positive).map(lambda x: x * 2) == Err("must be positive")
    assert Ok(3).and_then(validate_positive).map(lambda x: x * 2) == Ok(6)


def test_map_err() -> None:
    assert Err("fail").map_err(lambda e: f"Error: {e}") == Err("Error: fail")
    ok: Result[int, str] = Ok(42)
    assert ok.map_err(lambda e: f"Error: {e}") is ok


def test_or_else_recovers() -> None:
    assert Err("fail").or_else(lambda e: Ok(len(e))) == Ok(4)
    assert Ok(1).or_else(lambda e: Ok(0)) == Ok(1)


def test_unwrap_variants() -> None:
    assert Ok(1).unwrap_or(0) == 1
    assert Err("x").unwrap_or(0) == 0
    assert Err("abc").unwrap_or_else(len) == 3

    with pytest.raises(RuntimeError, match="unwrap"):
        Err("boom").unwrap()
    with pytest.raises(RuntimeError, match="unwrap_err"):
        Ok(1).unwrap_err()


def test_inspect_runs_side_effect_for_matching_variant() -> None:
    seen: list[object] = []

    Ok(1).inspect(seen.append).inspect_err(seen.append)
    Err("e").inspect(seen.append).inspect_err(seen.append)

    assert seen == [1, "e"]


def test_match_dispatches_exhaustively() -> None:
    assert Ok(2).match(ok=lambda v: f"ok:{v}", err=lambda e: f"err:{e}") == "ok:2"
    assert Err("x").match(ok=lambda v: f"ok:{v}", err=lambda e: f"err:{e}") == "err:x"


@pytest.mark.parametrize(("result", "expected"), [(Ok(4), "ok:4"), (Err("x"), "err:x")])
def test_structural_pattern_matching(result: Result[int, str], expected: str) -> None:
    match result:
        case Ok(value):
            outcome = f"ok:{value}"
        case Err(error):
            outcome = f"err:{error}"
    assert outcome == expected
    assert isinstance(result, Result)


def test_repr_eq_hash_iter() -> None:
    assert repr(Ok(1)) == "Ok(1)"
    assert repr(Err("e")) == "Err('e')"
    assert Ok(1) != Err(1)
    assert len({Ok(1), Ok(1), Err(1)}) == 2
    assert list(Ok(3)) == [3]
    assert list(Err(3)) == []


def test_try_fn() -> None:
    assert try_fn(lambda: int("7"), ValueError, on_error=str) == Ok(7)
    assert try_fn(lambda: int("x"), ValueError, on_error=lambda e: "bad").unwrap_err() == "bad"
    with pytest.raises(ZeroDivisionError):
        try_fn(lambda: 1 // 0, ValueError, on_error=str)


# ═════════════════════════════════════════════════════════════════════════════
# Functional Forms
# ═════════════════════════════════════════════════════════════════════════════


def test_functional_forms_follow_laws() -> None:
    f: Callable[[int], int] = lambda v: v + 1
    g: Callable[[int], Result[int, str]] = lambda v: Ok(v * 10)
    err: Result[int, str] = failure("e")

    assert is_success(success(1)) and not is_failure(success(1))
    assert is_failure(err) and not is_success(err)
    assert map_result(success(1), f) == success(f(1))
    assert map_result(err, f) == failure("e")
    assert chain(success(2), g) == g(2)
    assert chain(err, g) == failure("e")
    assert unwrap_or(success(5), 0) == 5
    assert unwrap_or(err, 0) == 0


def test_match_result() -> None:
    handlers = {"success": lambda v: v * 2, "failure": lambda e: -1}
    assert match_result(success(4), **handlers) == 8
    assert match_result(failure("x"), **handlers) == -1
