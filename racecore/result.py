"""Result type for explicit success/failure handling.

Operations whose failure is an expected outcome (a shop purchase without
enough coins, an invalid state transition attempt) return ``Ok`` or
``Err`` instead of raising.

Usage:
------
    result = engine.purchase_power_up(PowerUpType.MACHINE_GUN)
    if result.is_ok():
        bought = result.unwrap()
    else:
        logger.info("Purchase refused: %s", result.error)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar, Union

T = TypeVar("T")  # Success value type
E = TypeVar("E")  # Error type
U = TypeVar("U")  # Transformed value type


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Represents a successful operation result."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Get the success value."""
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    @property
    def error(self) -> None:
        """Ok has no error, returns None."""
        return None

    def map(self, f: Callable[[T], U]) -> "Ok[U]":
        """Transform the success value."""
        return Ok(f(self.value))

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True)
class Err(Generic[E]):
    """Represents a failed operation result."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self):
        """Raise, since there is no success value.

        Raises:
            ValueError: Always, carrying the error
        """
        raise ValueError(f"Called unwrap() on Err: {self.error!r}")

    def unwrap_or(self, default: T) -> T:
        return default

    def map(self, f: Callable) -> "Err[E]":
        """Transform success value (no-op for Err)."""
        return self

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result = Union[Ok[T], Err[E]]
