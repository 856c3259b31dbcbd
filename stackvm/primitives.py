"""Machine primitives expressed as actions over the machine state."""

from __future__ import annotations

from dataclasses import replace

from stackvm.action import Action, ActionGenerator, fail, get, modify, put
from stackvm.do import do
from stackvm.errors import (
    IllegalInstructionAccessError,
    StackOverflowError,
    StackUnderflowError,
)
from stackvm.instructions import InstructionBase


@do
def fetch_instruction() -> ActionGenerator[InstructionBase]:
    """Read the instruction under the pointer and count it as executed."""

    state = yield get()
    if not state.pointer_in_range():
        return (yield fail(IllegalInstructionAccessError()))
    yield put(replace(state, instructions_executed=state.instructions_executed + 1))
    return state.program[state.instruction_pointer]


def advance() -> Action[None]:
    return modify(lambda s: replace(s, instruction_pointer=s.instruction_pointer + 1))


def jump_to(index: int) -> Action[None]:
    """Move the pointer to ``index``. The target is validated by the next fetch."""

    return modify(lambda s: replace(s, instruction_pointer=index))


def halt() -> Action[None]:
    return modify(lambda s: replace(s, halted=True))


@do
def push_value(value: int) -> ActionGenerator[None]:
    state = yield get()
    if state.stack.is_full():
        return (yield fail(StackOverflowError()))
    yield put(state.with_stack(state.stack.push(value)))


@do
def pop_value() -> ActionGenerator[int]:
    """Remove and return the top of the stack."""

    state = yield get()
    if state.stack.is_empty():
        return (yield fail(StackUnderflowError()))
    value, rest = state.stack.pop()
    yield put(state.with_stack(rest))
    return value


def append_output(value: int) -> Action[None]:
    """Record an emission of ``value`` after everything already pending."""

    return modify(lambda s: s.with_output(value))


__all__ = [
    "advance",
    "append_output",
    "fetch_instruction",
    "halt",
    "jump_to",
    "pop_value",
    "push_value",
]
