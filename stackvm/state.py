"""
Machine state model.

``MachineState`` is an immutable snapshot. Actions never mutate it; they
build a replacement with :func:`dataclasses.replace` and install it with
``put``. The stack is a fixed-size buffer sized to the configured capacity
with an explicit depth counter, so overflow happens exactly at capacity.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field, replace

from stackvm._vendor import FrozenDict
from stackvm.config import STACK_CAPACITY
from stackvm.instructions import InstructionBase
from stackvm.output import EMPTY_OUTPUT, OutputSequence, append_emit

Labels = Mapping[str, int] | Iterable[tuple[str, int]]


@dataclass(frozen=True)
class StackBuffer:
    """Pre-sized stack storage.

    ``cells`` always holds ``capacity`` slots; only the first ``depth`` of
    them are live.
    """

    cells: tuple[int, ...]
    depth: int = 0

    @classmethod
    def empty(cls, capacity: int = STACK_CAPACITY) -> StackBuffer:
        if capacity < 1:
            raise ValueError("stack capacity must be >= 1")
        return cls(cells=(0,) * capacity)

    @classmethod
    def of(cls, values: Iterable[int], capacity: int = STACK_CAPACITY) -> StackBuffer:
        """Build a buffer holding ``values`` bottom first."""

        items = tuple(values)
        if len(items) > capacity:
            raise ValueError(f"{len(items)} values exceed stack capacity {capacity}")
        return cls(cells=items + (0,) * (capacity - len(items)), depth=len(items))

    @property
    def capacity(self) -> int:
        return len(self.cells)

    def is_empty(self) -> bool:
        return self.depth == 0

    def is_full(self) -> bool:
        return self.depth == self.capacity

    def push(self, value: int) -> StackBuffer:
        # callers check is_full first
        if self.is_full():
            raise IndexError("push onto full StackBuffer")
        cells = self.cells[: self.depth] + (value,) + self.cells[self.depth + 1 :]
        return StackBuffer(cells=cells, depth=self.depth + 1)

    def pop(self) -> tuple[int, StackBuffer]:
        """Return the top value and the buffer without it."""

        if self.is_empty():
            raise IndexError("pop from empty StackBuffer")
        top = self.depth - 1
        cells = self.cells[:top] + (0,) + self.cells[top + 1 :]
        return self.cells[top], StackBuffer(cells=cells, depth=top)

    def values(self) -> tuple[int, ...]:
        """Live values, bottom first."""

        return self.cells[: self.depth]

    def __len__(self) -> int:
        return self.depth

    def __repr__(self) -> str:
        return f"StackBuffer({list(self.values())!r}, capacity={self.capacity})"


def freeze_labels(labels: Labels | None) -> FrozenDict:
    """Normalise a label table into an immutable name -> index mapping.

    Accepts either a mapping or a sequence of ``(name, index)`` pairs. For
    pairs, the first binding of a name wins. Names must be ``str`` and
    indices ``int``; anything else raises ``TypeError`` here rather than in
    the middle of a run.
    """

    if labels is None:
        return FrozenDict()
    pairs = labels.items() if isinstance(labels, Mapping) else labels
    table: dict[str, int] = {}
    for name, index in pairs:
        if not isinstance(name, str):
            raise TypeError(f"label name must be a str; got {type(name).__name__}")
        if isinstance(index, bool) or not isinstance(index, int):
            raise TypeError(
                f"label {name!r} must map to an int index; got {type(index).__name__}"
            )
        table.setdefault(name, index)
    return FrozenDict(table)


@dataclass(frozen=True)
class MachineState:
    stack: StackBuffer
    program: tuple[InstructionBase, ...]
    labels: FrozenDict = field(default_factory=FrozenDict)
    instruction_pointer: int = 0
    halted: bool = False
    instructions_executed: int = 0
    pending_output: OutputSequence = EMPTY_OUTPUT

    def with_stack(self, stack: StackBuffer) -> MachineState:
        return replace(self, stack=stack)

    def with_output(self, value: int) -> MachineState:
        return replace(self, pending_output=append_emit(self.pending_output, value))

    def pointer_in_range(self) -> bool:
        return 0 <= self.instruction_pointer < len(self.program)


def initial_state(
    program: Sequence[InstructionBase],
    labels: Labels | None = None,
    stack_capacity: int = STACK_CAPACITY,
) -> MachineState:
    """Fresh state for one run: empty stack, pointer at zero, nothing emitted."""

    instructions = tuple(program)
    for index, instruction in enumerate(instructions):
        if not isinstance(instruction, InstructionBase):
            raise TypeError(
                f"program[{index}] is not an instruction; got {type(instruction).__name__}"
            )
    return MachineState(
        stack=StackBuffer.empty(stack_capacity),
        program=instructions,
        labels=freeze_labels(labels),
    )


__all__ = [
    "Labels",
    "MachineState",
    "StackBuffer",
    "freeze_labels",
    "initial_state",
]
