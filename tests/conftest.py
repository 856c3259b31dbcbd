"""
Pytest configuration for stackvm tests.

Provides a default interpreter and a helper for building machine states with
a pre-filled stack.
"""

from collections.abc import Callable, Sequence

import pytest

from stackvm import MachineInterpreter, MachineState, StackBuffer, initial_state
from stackvm.config import STACK_CAPACITY


@pytest.fixture
def interpreter() -> MachineInterpreter:
    return MachineInterpreter()


@pytest.fixture
def make_state() -> Callable[..., MachineState]:
    """Build a state for the given program with ``stack`` pushed bottom first."""

    def factory(
        program: Sequence = (),
        labels=None,
        stack: Sequence[int] = (),
        capacity: int = STACK_CAPACITY,
    ) -> MachineState:
        state = initial_state(program, labels, stack_capacity=capacity)
        return state.with_stack(StackBuffer.of(stack, capacity=capacity))

    return factory
