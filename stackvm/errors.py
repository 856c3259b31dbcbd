from __future__ import annotations

from typing import ClassVar


class MachineError(Exception):
    """A fault that aborts a run.

    Errors carry no payload beyond their kind, so two instances of the same
    class are interchangeable.
    """

    kind: ClassVar[str] = "machine-error"
    message: ClassVar[str] = "machine error"

    def __init__(self) -> None:
        super().__init__(self.message)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, MachineError):
            return type(self) is type(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(type(self))

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class StackUnderflowError(MachineError):
    """Raised when a value is popped from an empty stack."""

    kind = "stack-underflow"
    message = "pop from empty stack"


class StackOverflowError(MachineError):
    """Raised when a value is pushed onto a full stack."""

    kind = "stack-overflow"
    message = "push onto full stack"


class DivideByZeroError(MachineError, ArithmeticError):
    kind = "divide-by-zero"
    message = "integer division or modulo by zero"


class IllegalInstructionAccessError(MachineError):
    """Raised when the instruction pointer leaves the program."""

    kind = "illegal-instruction-access"
    message = "instruction pointer out of range"


class LabelNotFoundError(MachineError, LookupError):
    kind = "label-not-found"
    message = "jump to unknown label"


__all__ = [
    "DivideByZeroError",
    "IllegalInstructionAccessError",
    "LabelNotFoundError",
    "MachineError",
    "StackOverflowError",
    "StackUnderflowError",
]
