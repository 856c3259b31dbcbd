"""
Instruction dispatcher.

Each instruction variant maps to one rule built from the machine
primitives. Every rule except ``Jump`` and ``Halt`` finishes by advancing
the instruction pointer. Binary operators pop the right operand first, so
``[..., x, y]`` becomes ``[..., x OP y]``. Results wrap to
signed 64 bits.
"""

from __future__ import annotations

import operator
from collections.abc import Callable
from typing import Any

from stackvm.action import Action, ActionGenerator, fail, get
from stackvm.do import do
from stackvm.errors import DivideByZeroError, LabelNotFoundError
from stackvm.instructions import (
    Add,
    Div,
    Dup,
    Halt,
    InstructionBase,
    Jump,
    Mod,
    Mul,
    Pop,
    Print,
    Push,
    Sub,
)
from stackvm.primitives import (
    advance,
    append_output,
    halt,
    jump_to,
    pop_value,
    push_value,
)
from stackvm.word import s64

Rule = Callable[[Any], Action[None]]


@do
def _push(instruction: Push) -> ActionGenerator[None]:
    yield push_value(instruction.value)
    yield advance()


@do
def _pop(_: Pop) -> ActionGenerator[None]:
    yield pop_value()
    yield advance()


@do
def _print(_: Print) -> ActionGenerator[None]:
    value = yield pop_value()
    yield append_output(value)
    yield advance()


@do
def _dup(_: Dup) -> ActionGenerator[None]:
    value = yield pop_value()
    yield push_value(value)
    yield push_value(value)
    yield advance()


def _binary(op: Callable[[int, int], int]) -> Rule:
    @do
    def rule(_: InstructionBase) -> ActionGenerator[None]:
        y = yield pop_value()
        x = yield pop_value()
        yield push_value(s64(op(x, y)))
        yield advance()

    return rule


def _checked_division(op: Callable[[int, int], int]) -> Rule:
    # the divisor is consumed before it is checked
    @do
    def rule(_: InstructionBase) -> ActionGenerator[None]:
        y = yield pop_value()
        if y == 0:
            return (yield fail(DivideByZeroError()))
        x = yield pop_value()
        yield push_value(s64(op(x, y)))
        yield advance()

    return rule


@do
def _jump(instruction: Jump) -> ActionGenerator[None]:
    state = yield get()
    target = state.labels.get(instruction.label)
    if target is None:
        return (yield fail(LabelNotFoundError()))
    yield jump_to(target)


def _halt(_: Halt) -> Action[None]:
    return halt()


DISPATCH_TABLE: dict[type[InstructionBase], Rule] = {
    Push: _push,
    Pop: _pop,
    Print: _print,
    Add: _binary(operator.add),
    Sub: _binary(operator.sub),
    Mul: _binary(operator.mul),
    Div: _checked_division(operator.floordiv),
    Mod: _checked_division(operator.mod),
    Jump: _jump,
    Halt: _halt,
    Dup: _dup,
}


def execute(instruction: InstructionBase) -> Action[None]:
    """Build the action carrying out ``instruction``."""

    rule = DISPATCH_TABLE.get(type(instruction))
    if rule is None:
        raise TypeError(f"No dispatch rule for {type(instruction).__name__}")
    return rule(instruction)


__all__ = ["DISPATCH_TABLE", "execute"]
