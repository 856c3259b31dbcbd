"""
Execution loop for the stack machine.

This module contains the ``MachineInterpreter`` that repeatedly fetches and
dispatches instructions until the program halts, the execution limit is
passed, or a machine error aborts the run.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import cast

from stackvm._vendor import Err, Ok, Result
from stackvm.action import ActionGenerator, get, run_action
from stackvm.config import EXECUTION_LIMIT, MachineConfig
from stackvm.dispatch import execute
from stackvm.do import do
from stackvm.errors import MachineError
from stackvm.instructions import InstructionBase
from stackvm.output import OutputSequence
from stackvm.primitives import fetch_instruction
from stackvm.state import Labels, MachineState, initial_state

logger = logging.getLogger(__name__)


class RunStatus(Enum):
    RUNNING = "running"
    HALTED = "halted"
    LIMIT_EXCEEDED = "limit-exceeded"
    ERRORED = "errored"


@do
def step() -> ActionGenerator[InstructionBase]:
    """Fetch one instruction and carry it out."""

    instruction = yield fetch_instruction()
    yield execute(instruction)
    return instruction


@do
def run_machine(execution_limit: int = EXECUTION_LIMIT) -> ActionGenerator[RunStatus]:
    """Cycle until the machine halts or executes more than ``execution_limit`` instructions."""

    while True:
        yield step()
        state = yield get()
        if state.halted:
            return RunStatus.HALTED
        if state.instructions_executed > execution_limit:
            return RunStatus.LIMIT_EXCEEDED


@dataclass(frozen=True)
class RunResult:
    """Outcome of one run.

    ``result`` holds the pending output on success or the first machine
    error. ``instructions_executed`` is ``None`` for errored runs because
    their state is discarded.
    """

    result: Result[OutputSequence]
    status: RunStatus
    instructions_executed: int | None = None

    @property
    def is_ok(self) -> bool:
        return self.result.is_ok()

    @property
    def is_err(self) -> bool:
        return self.result.is_err()

    @property
    def output(self) -> OutputSequence:
        """The pending output; raises the machine error for failed runs."""

        return self.result.unwrap()

    @property
    def error(self) -> MachineError | None:
        return cast(MachineError | None, self.result.err())


class MachineInterpreter:
    """
    Runs programs against a fresh machine state each time.

    Each call to :meth:`execute` owns its state for the whole run and shares
    nothing with other runs, so one interpreter may be reused freely.
    """

    def __init__(
        self,
        config: MachineConfig | None = None,
        *,
        stack_capacity: int | None = None,
        execution_limit: int | None = None,
    ):
        """Initialize machine limits.

        Args:
            config: Base limits. Defaults to ``MachineConfig()``.
            stack_capacity: Optional override of ``config.stack_capacity``.
            execution_limit: Optional override of ``config.execution_limit``.
        """
        base = config if config is not None else MachineConfig()
        self.config = MachineConfig(
            stack_capacity=base.stack_capacity if stack_capacity is None else stack_capacity,
            execution_limit=base.execution_limit if execution_limit is None else execution_limit,
        )

    @property
    def stack_capacity(self) -> int:
        return self.config.stack_capacity

    @property
    def execution_limit(self) -> int:
        return self.config.execution_limit

    def initial_state(
        self, program: Sequence[InstructionBase], labels: Labels | None = None
    ) -> MachineState:
        return initial_state(program, labels, stack_capacity=self.stack_capacity)

    def execute(
        self, program: Sequence[InstructionBase], labels: Labels | None = None
    ) -> RunResult:
        """Run ``program`` to completion and report how it ended."""

        state = self.initial_state(program, labels)
        logger.debug(
            "Starting run: %d instructions, %d labels, limit=%d",
            len(state.program),
            len(state.labels),
            self.execution_limit,
        )

        outcome = run_action(run_machine(self.execution_limit), state)
        if isinstance(outcome, Err):
            logger.debug("Run aborted: %s", outcome.error)
            return RunResult(result=outcome, status=RunStatus.ERRORED)

        final_state, status = outcome.value
        logger.debug(
            "Run finished: status=%s, executed=%d, emitted=%d",
            status.value,
            final_state.instructions_executed,
            len(final_state.pending_output),
        )
        return RunResult(
            result=Ok(final_state.pending_output),
            status=status,
            instructions_executed=final_state.instructions_executed,
        )

    def run(
        self, program: Sequence[InstructionBase], labels: Labels | None = None
    ) -> Result[OutputSequence]:
        """Run ``program`` and return its pending output or its first error."""

        return self.execute(program, labels).result


def run(
    program: Sequence[InstructionBase],
    labels: Labels | None = None,
) -> Result[OutputSequence]:
    """Run ``program`` with the default limits."""

    return MachineInterpreter().run(program, labels)


__all__ = [
    "MachineInterpreter",
    "RunResult",
    "RunStatus",
    "run",
    "run_machine",
    "step",
]
