"""Result type: every fallible pipeline step returns one instead of raising.

A Result is exactly one of two concrete classes:

    Ok(value)   success
    Err(error)  failure

Both are immutable. Operations that do not apply to a variant hand back the
very same object, so an Err travels through a chain of map/flat_map calls
untouched. The variants support structural pattern matching:

    >>> match parse_json('{"a": 1}'):
    ...     case Ok(value):
    ...         print(value)
    ...     case Err(error):
    ...         print(error.code)
    {'a': 1}

Railway-oriented composition:

    >>> def positive(x: int) -> Result[int, str]:
    ...     return Ok(x) if x > 0 else Err("must be positive")
    >>> Ok(5).flat_map(positive).map(lambda x: x * 2)
    Ok(10)
    >>> Ok(-1).flat_map(positive).map(lambda x: x * 2)
    Err('must be positive')
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Generic, TypeVar, cast

if TYPE_CHECKING:
    from collections.abc import Iterator

T = TypeVar("T")  # success
E = TypeVar("E")  # error
U = TypeVar("U")
F = TypeVar("F")
X = TypeVar("X", bound=BaseException)


class Result(ABC, Generic[T, E]):
    """Common interface of Ok and Err. Not instantiated directly."""

    __slots__ = ("_inner",)

    def __init__(self, inner: Any) -> None:
        self._inner = inner

    # ── Variant checks ───────────────────────────────────────────────

    @abstractmethod
    def is_ok(self) -> bool: ...

    def is_err(self) -> bool:
        return not self.is_ok()

    def __bool__(self) -> bool:
        return self.is_ok()

    # ── Extraction ───────────────────────────────────────────────────

    @abstractmethod
    def unwrap(self) -> T:
        """Success value; RuntimeError on Err."""

    @abstractmethod
    def unwrap_err(self) -> E:
        """Failure value; RuntimeError on Ok."""

    @abstractmethod
    def unwrap_or(self, default: T) -> T: ...

    @abstractmethod
    def unwrap_or_else(self, f: Callable[[E], T]) -> T: ...

    @abstractmethod
    def ok(self) -> T | None: ...

    @abstractmethod
    def err(self) -> E | None: ...

    # ── Transformation ───────────────────────────────────────────────

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> Result[U, E]: ...

    @abstractmethod
    def map_err(self, f: Callable[[E], F]) -> Result[T, F]: ...

    @abstractmethod
    def flat_map(self, f: Callable[[T], Result[U, E]]) -> Result[U, E]:
        """Monadic bind: continue with f on Ok, short-circuit on Err."""

    def chain(self, f: Callable[[T], Result[U, E]]) -> Result[U, E]:
        return self.flat_map(f)

    def and_then(self, f: Callable[[T], Result[U, E]]) -> Result[U, E]:
        return self.flat_map(f)

    @abstractmethod
    def or_else(self, f: Callable[[E], Result[T, F]]) -> Result[T, F]:
        """Recover from Err with f; Ok passes through."""

    @abstractmethod
    def inspect(self, f: Callable[[T], None]) -> Result[T, E]: ...

    @abstractmethod
    def inspect_err(self, f: Callable[[E], None]) -> Result[T, E]: ...

    @abstractmethod
    def match(self, *, ok: Callable[[T], U], err: Callable[[E], U]) -> U:
        """Exhaustive dispatch; both handlers are required."""

    # ── Dunder ───────────────────────────────────────────────────────

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._inner!r})"

    __str__ = __repr__

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Result):
            return NotImplemented
        return type(self) is type(other) and self._inner == other._inner

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._inner))

    def __iter__(self) -> Iterator[T]:
        """Zero or one success values."""
        if self.is_ok():
            yield self.unwrap()


class Ok(Result[T, E]):
    """Success variant."""

    __slots__ = ()
    __match_args__ = ("value",)

    def __init__(self, value: T) -> None:
        super().__init__(value)

    @property
    def value(self) -> T:
        return cast(T, self._inner)

    def is_ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value

    def unwrap_err(self) -> E:
        raise RuntimeError(f"Called unwrap_err() on Ok value: {self._inner!r}")

    def unwrap_or(self, default: T) -> T:
        return self.value

    def unwrap_or_else(self, f: Callable[[E], T]) -> T:
        return self.value

    def ok(self) -> T | None:
        return self.value

    def err(self) -> E | None:
        return None

    def map(self, f: Callable[[T], U]) -> Result[U, E]:
        return Ok(f(self.value))

    def map_err(self, f: Callable[[E], F]) -> Result[T, F]:
        return cast(Result[T, F], self)

    def flat_map(self, f: Callable[[T], Result[U, E]]) -> Result[U, E]:
        return f(self.value)

    def or_else(self, f: Callable[[E], Result[T, F]]) -> Result[T, F]:
        return cast(Result[T, F], self)

    def inspect(self, f: Callable[[T], None]) -> Result[T, E]:
        f(self.value)
        return self

    def inspect_err(self, f: Callable[[E], None]) -> Result[T, E]:
        return self

    def match(self, *, ok: Callable[[T], U], err: Callable[[E], U]) -> U:
        return ok(self.value)


class Err(Result[T, E]):
    """Failure variant."""

    __slots__ = ()
    __match_args__ = ("error",)

    def __init__(self, error: E) -> None:
        super().__init__(error)

    @property
    def error(self) -> E:
        return cast(E, self._inner)

    def is_ok(self) -> bool:
        return False

    def unwrap(self) -> T:
        raise RuntimeError(f"Called unwrap() on Err value: {self._inner!r}")

    def unwrap_err(self) -> E:
        return self.error

    def unwrap_or(self, default: T) -> T:
        return default

    def unwrap_or_else(self, f: Callable[[E], T]) -> T:
        return f(self.error)

    def ok(self) -> T | None:
        return None

    def err(self) -> E | None:
        return self.error

    def map(self, f: Callable[[T], U]) -> Result[U, E]:
        return cast(Result[U, E], self)

    def map_err(self, f: Callable[[E], F]) -> Result[T, F]:
        return Err(f(self.error))

    def flat_map(self, f: Callable[[T], Result[U, E]]) -> Result[U, E]:
        return cast(Result[U, E], self)

    def or_else(self, f: Callable[[E], Result[T, F]]) -> Result[T, F]:
        return f(self.error)

    def inspect(self, f: Callable[[T], None]) -> Result[T, E]:
        return self

    def inspect_err(self, f: Callable[[E], None]) -> Result[T, E]:
        f(self.error)
        return self

    def match(self, *, ok: Callable[[T], U], err: Callable[[E], U]) -> U:
        return err(self.error)


def try_fn(
    fn: Callable[[], T],
    *catch: type[X],
    on_error: Callable[[X], E],
) -> Result[T, E]:
    """Run fn; the listed exception types become Err(on_error(exc)).

    Anything not listed propagates.

        >>> try_fn(lambda: int("x"), ValueError, on_error=str).is_err()
        True
    """
    try:
        return Ok(fn())
    except catch as e:  # type: ignore[misc]
        return Err(on_error(e))


# ═════════════════════════════════════════════════════════════════════════════
# Functional Forms
# ═════════════════════════════════════════════════════════════════════════════

# Free-function spellings for plain function pipelines.

success = Ok
failure = Err


def is_success(result: Result[T, E]) -> bool:
    return result.is_ok()


def is_failure(result: Result[T, E]) -> bool:
    return result.is_err()


def map_result(result: Result[T, E], f: Callable[[T], U]) -> Result[U, E]:
    return result.map(f)


def chain(result: Result[T, E], f: Callable[[T], Result[U, E]]) -> Result[U, E]:
    return result.flat_map(f)


def unwrap_or(result: Result[T, E], default: T) -> T:
    return result.unwrap_or(default)


def match_result(
    result: Result[T, E],
    *,
    success: Callable[[T], U],
    failure: Callable[[E], U],
) -> U:
    return result.match(ok=success, err=failure)
