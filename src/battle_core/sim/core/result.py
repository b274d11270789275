"""Explicit success/failure values for recoverable errors.

Operations whose failures are expected and user-triggerable (an illegal
menu transition, a corrupt save) return a :data:`Result` instead of
raising, so callers branch on ``result.ok``::

    result = machine.transition_to(GameFlowState.BATTLE)
    if not result.ok:
        show_error(result.error)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar, Union

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")
F = TypeVar("F")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err(Generic[E]):
    error: E

    @property
    def ok(self) -> bool:
        return False


Result = Union[Ok[T], Err[E]]


def unwrap(result: Result[T, E]) -> T:
    """Return the success value or raise ``ValueError`` carrying the error."""
    if isinstance(result, Err):
        raise ValueError(f"Called unwrap on Err result: {result.error}")
    return result.value


def unwrap_or(result: Result[T, E], default: T) -> T:
    return result.value if isinstance(result, Ok) else default


def map_result(result: Result[T, E], fn: Callable[[T], U]) -> Result[U, E]:
    return Ok(fn(result.value)) if isinstance(result, Ok) else result


def map_err(result: Result[T, E], fn: Callable[[E], F]) -> Result[T, F]:
    return Err(fn(result.error)) if isinstance(result, Err) else result


def and_then(result: Result[T, E], fn: Callable[[T], Result[U, E]]) -> Result[U, E]:
    return fn(result.value) if isinstance(result, Ok) else result
