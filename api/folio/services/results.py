"""Tagged results for operations that must not raise past a service boundary."""

import asyncio
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful outcome carrying a value."""

    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err(Generic[E]):
    """Failed outcome carrying the reason."""

    reason: E

    @property
    def ok(self) -> bool:
        return False


Result = Ok[T] | Err[E]


def unwrap_or(result: Result[T, Any], default: T) -> T:
    """Return the value of an Ok, or ``default`` for an Err."""
    if isinstance(result, Ok):
        return result.value
    return default


async def settle(*aws: Awaitable[Any]) -> list[Result[Any, BaseException]]:
    """
    Await all awaitables concurrently and never short-circuit.

    Each outcome becomes an Ok with its value or an Err with the raised
    exception, in the order the awaitables were given.
    """
    outcomes = await asyncio.gather(*aws, return_exceptions=True)
    results: list[Result[Any, BaseException]] = []
    for outcome in outcomes:
        if isinstance(outcome, BaseException):
            if isinstance(outcome, asyncio.CancelledError):
                raise outcome
            results.append(Err(outcome))
        else:
            results.append(Ok(outcome))
    return results
