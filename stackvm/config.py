"""Machine limits and their validation."""

from __future__ import annotations

from dataclasses import dataclass

STACK_CAPACITY = 1024
EXECUTION_LIMIT = 10 ** 2


@dataclass(frozen=True)
class MachineConfig:
    """Resource limits applied to a single run.

    Attributes:
        stack_capacity: Maximum number of values the stack may hold.
        execution_limit: A run stops silently once the number of executed
            instructions exceeds this value.
    """

    stack_capacity: int = STACK_CAPACITY
    execution_limit: int = EXECUTION_LIMIT

    def __post_init__(self) -> None:
        if isinstance(self.stack_capacity, bool) or not isinstance(self.stack_capacity, int):
            raise TypeError("stack_capacity must be an int")
        if isinstance(self.execution_limit, bool) or not isinstance(self.execution_limit, int):
            raise TypeError("execution_limit must be an int")
        if self.stack_capacity < 1:
            raise ValueError("stack_capacity must be >= 1")
        if self.execution_limit < 0:
            raise ValueError("execution_limit must be >= 0")


__all__ = ["EXECUTION_LIMIT", "STACK_CAPACITY", "MachineConfig"]
