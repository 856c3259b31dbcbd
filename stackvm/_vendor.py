"""
Result type returned by a run, and the frozen mapping used for labels.

A run never raises a machine error; it hands back ``Ok(output)`` or
``Err(error)``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, NoReturn, TypeVar

from frozendict import frozendict

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


class Result(Generic[T_co]):
    """Either ``Ok(value)`` or ``Err(error)``."""

    __slots__ = ()

    def is_ok(self) -> bool:
        return isinstance(self, Ok)

    def is_err(self) -> bool:
        return isinstance(self, Err)

    def err(self) -> Exception | None:
        """The stored error, or ``None`` for ``Ok``."""

        if isinstance(self, Err):
            return self.error
        return None

    def unwrap(self) -> T_co:
        """The stored value; an ``Err`` raises its error instead."""

        if isinstance(self, Ok):
            return self.value
        raise self.error

    def __bool__(self) -> bool:
        return self.is_ok()


@dataclass(frozen=True)
class Ok(Result[T], Generic[T]):
    value: T


@dataclass(frozen=True)
class Err(Result[NoReturn]):
    error: Exception


FrozenDict = frozendict

__all__ = ["Err", "FrozenDict", "Ok", "Result"]
