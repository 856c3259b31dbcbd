"""
Deferred output records.

A run never writes anything itself. Each executed ``Print`` appends an
``Emit`` record, and the finished sequence is handed back to the caller,
who decides whether and where to flush it.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from beartype import beartype


@beartype
@dataclass(frozen=True)
class Emit:
    """Request to emit one integer."""

    value: int

    def __str__(self) -> str:
        return str(self.value)


OutputSequence = tuple[Emit, ...]

EMPTY_OUTPUT: OutputSequence = ()


def append_emit(output: OutputSequence, value: int) -> OutputSequence:
    """Return ``output`` extended with an emission of ``value``."""

    return (*output, Emit(value))


def emitted_values(output: Iterable[Emit]) -> list[int]:
    return [emit.value for emit in output]


def flush(output: Iterable[Emit], write: Callable[[int], Any] = print) -> int:
    """Perform every emission in order and return how many were written."""

    count = 0
    for emit in output:
        write(emit.value)
        count += 1
    return count


__all__ = [
    "EMPTY_OUTPUT",
    "Emit",
    "OutputSequence",
    "append_emit",
    "emitted_values",
    "flush",
]
