"""
Instruction set of the stack machine.

Instructions are immutable values supplied already decoded by the caller.
Variants carrying an operand are checked by beartype when constructed, and
push operands must fit a signed 64-bit word, so a malformed program is
rejected before it ever reaches the interpreter.

Example:
    >>> program = [Push(2), Push(3), Add(), Print(), Halt()]
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from beartype import beartype

from stackvm.word import in_word_range


class InstructionBase:
    """Marker base shared by every instruction variant."""

    __slots__ = ()

    @property
    def tag(self) -> str:
        return type(self).__name__.lower()


@beartype
@dataclass(frozen=True)
class Push(InstructionBase):
    """Push ``value`` onto the stack."""

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool):
            raise TypeError("Push value must be an int, not bool")
        if not in_word_range(self.value):
            raise ValueError(f"Push value {self.value} does not fit in a signed 64-bit word")


@dataclass(frozen=True)
class Pop(InstructionBase):
    """Pop and discard the top of the stack."""


@dataclass(frozen=True)
class Print(InstructionBase):
    """Pop the top of the stack and record an output emission for it."""


@dataclass(frozen=True)
class Add(InstructionBase):
    pass


@dataclass(frozen=True)
class Sub(InstructionBase):
    pass


@dataclass(frozen=True)
class Mul(InstructionBase):
    pass


@dataclass(frozen=True)
class Div(InstructionBase):
    """Floor division of the second-from-top value by the top value."""


@dataclass(frozen=True)
class Mod(InstructionBase):
    """Modulo matching :class:`Div` (result takes the divisor's sign)."""


@beartype
@dataclass(frozen=True)
class Jump(InstructionBase):
    """Transfer control to the instruction index bound to ``label``."""

    label: str


@dataclass(frozen=True)
class Halt(InstructionBase):
    pass


@dataclass(frozen=True)
class Dup(InstructionBase):
    """Duplicate the top of the stack."""


Instruction = Union[Push, Pop, Print, Add, Sub, Mul, Div, Mod, Jump, Halt, Dup]


__all__ = [
    "Add",
    "Div",
    "Dup",
    "Halt",
    "Instruction",
    "InstructionBase",
    "Jump",
    "Mod",
    "Mul",
    "Pop",
    "Print",
    "Push",
    "Sub",
]
