"""End-to-end tests for the execution loop."""

import logging

import pytest

from stackvm import (
    Add,
    Div,
    Dup,
    Err,
    Halt,
    Jump,
    MachineConfig,
    MachineInterpreter,
    Mod,
    Mul,
    Ok,
    Pop,
    Print,
    Push,
    RunStatus,
    Sub,
    emitted_values,
    run,
)
from stackvm.errors import (
    DivideByZeroError,
    IllegalInstructionAccessError,
    LabelNotFoundError,
    StackOverflowError,
    StackUnderflowError,
)
from stackvm.output import Emit


class TestScenarios:
    def test_add_and_print(self):
        result = run([Push(2), Push(3), Add(), Print(), Halt()])
        assert result == Ok((Emit(5),))

    def test_divide_by_zero(self):
        assert run([Push(10), Push(0), Div(), Halt()]) == Err(DivideByZeroError())

    def test_pop_empty_stack(self):
        assert run([Pop(), Halt()]) == Err(StackUnderflowError())

    def test_dup_then_prints_pop_tail(self):
        result = run([Push(1), Push(2), Dup(), Print(), Print(), Print(), Halt()])
        assert emitted_values(result.unwrap()) == [2, 2, 1]

    def test_doubling_wraps_at_64_bits(self):
        result = run([Push(2**62), Dup(), Add(), Print(), Halt()])
        assert emitted_values(result.unwrap()) == [-9223372036854775808]

    def test_min_word_divided_by_minus_one_wraps(self):
        result = run([Push(-(2**63)), Push(-1), Div(), Print(), Halt()])
        assert emitted_values(result.unwrap()) == [-(2**63)]

    def test_unknown_label(self):
        assert run([Jump("L"), Halt()], []) == Err(LabelNotFoundError())

    def test_no_halt_hits_limit_silently(self, interpreter):
        outcome = interpreter.execute([Push(1)] * 200)

        assert outcome.status is RunStatus.LIMIT_EXCEEDED
        assert outcome.result == Ok(())
        assert outcome.instructions_executed == 101


class TestHalting:
    def test_output_only_from_before_halt(self):
        program = [Push(1), Print(), Halt(), Push(2), Print()]
        assert emitted_values(run(program).unwrap()) == [1]

    def test_halt_status_and_count(self, interpreter):
        outcome = interpreter.execute([Push(1), Pop(), Halt()])
        assert outcome.status is RunStatus.HALTED
        assert outcome.instructions_executed == 3
        assert outcome.is_ok
        assert outcome.output == ()

    def test_halt_wins_over_limit_on_same_cycle(self):
        program = [Push(1), Pop()] * 49 + [Push(7), Print(), Halt()]
        assert len(program) == 101
        result = MachineInterpreter().execute(program)
        assert result.status is RunStatus.HALTED
        assert result.instructions_executed == 101
        assert result.output == (Emit(7),)

    def test_limit_cuts_off_before_halt(self):
        program = [Push(1), Pop()] * 50 + [Push(7), Print(), Halt()]
        result = MachineInterpreter().execute(program)
        assert result.status is RunStatus.LIMIT_EXCEEDED
        assert result.instructions_executed == 101
        assert result.output == ()

    def test_halt_reached_at_limit(self, interpreter):
        program = [Push(1), Pop()] * 49 + [Push(7), Halt()]
        outcome = interpreter.execute(program)
        assert outcome.status is RunStatus.HALTED
        assert outcome.instructions_executed == 100


class TestErrors:
    def test_falling_off_the_end(self):
        assert run([Push(1)]) == Err(IllegalInstructionAccessError())

    def test_empty_program(self):
        assert run([]) == Err(IllegalInstructionAccessError())

    def test_jump_outside_program_fails_on_next_fetch(self, interpreter):
        outcome = interpreter.execute([Jump("far"), Halt()], {"far": 10})
        assert outcome.status is RunStatus.ERRORED
        assert outcome.error == IllegalInstructionAccessError()
        assert outcome.instructions_executed is None

    def test_error_discards_output(self):
        result = run([Push(1), Print(), Pop(), Halt()])
        assert result == Err(StackUnderflowError())

    def test_output_raises_for_failed_run(self, interpreter):
        outcome = interpreter.execute([Pop()])
        assert outcome.is_err
        with pytest.raises(StackUnderflowError):
            _ = outcome.output

    @pytest.mark.parametrize("instruction", [Div(), Mod()])
    def test_zero_divisor_regardless_of_dividend(self, instruction):
        for dividend in (-3, 0, 8):
            assert run([Push(dividend), Push(0), instruction, Halt()]) == Err(DivideByZeroError())

    def test_stack_overflow_with_small_capacity(self):
        interpreter = MachineInterpreter(stack_capacity=2)
        outcome = interpreter.execute([Push(1), Push(2), Push(3), Halt()])
        assert outcome.error == StackOverflowError()

    def test_stack_overflow_at_default_capacity(self):
        interpreter = MachineInterpreter(execution_limit=2000)
        assert interpreter.run([Push(0)] * 1025 + [Halt()]) == Err(StackOverflowError())

    def test_full_stack_without_overflow(self):
        interpreter = MachineInterpreter(execution_limit=2000)
        outcome = interpreter.execute([Push(0)] * 1024 + [Halt()])
        assert outcome.status is RunStatus.HALTED


class TestLoops:
    def test_countdown_loop_until_limit(self):
        # print 3 forever; loop is cut off by the execution limit
        program = [Push(3), Print(), Jump("top")]
        result = run(program, {"top": 0})
        # 101 instructions executed: 33 full iterations plus two more
        assert emitted_values(result.unwrap()) == [3] * 34

    def test_arithmetic_program(self):
        program = [
            Push(6), Push(7), Mul(),
            Push(2), Sub(),
            Push(3), Mod(),
            Print(),
            Jump("end"),
            Push(99), Print(),
            Halt(),
        ]
        result = run(program, {"end": 11})
        assert emitted_values(result.unwrap()) == [40 % 3]


class TestConfiguration:
    def test_defaults(self, interpreter):
        assert interpreter.stack_capacity == 1024
        assert interpreter.execution_limit == 100

    def test_overrides_on_top_of_config(self):
        interpreter = MachineInterpreter(MachineConfig(stack_capacity=8), execution_limit=5)
        assert interpreter.config == MachineConfig(stack_capacity=8, execution_limit=5)

    def test_zero_limit_stops_after_first_instruction(self):
        outcome = MachineInterpreter(execution_limit=0).execute([Push(1), Print(), Halt()])
        assert outcome.status is RunStatus.LIMIT_EXCEEDED
        assert outcome.instructions_executed == 1

    @pytest.mark.parametrize(
        "kwargs",
        [{"stack_capacity": 0}, {"execution_limit": -1}],
    )
    def test_invalid_limits(self, kwargs):
        with pytest.raises(ValueError):
            MachineInterpreter(**kwargs)

    def test_non_int_limits(self):
        with pytest.raises(TypeError):
            MachineConfig(stack_capacity="big")  # type: ignore[arg-type]


class TestIsolation:
    def test_runs_share_no_state(self, interpreter):
        program = [Push(1), Print(), Halt()]
        first = interpreter.run(program)
        second = interpreter.run(program)
        assert first == second == Ok((Emit(1),))

    def test_label_pairs_accepted(self):
        assert run([Jump("x"), Halt()], [("x", 1)]) == Ok(())

    def test_malformed_label_index_rejected_before_running(self):
        with pytest.raises(TypeError, match="int index"):
            run([Jump("L"), Halt()], {"L": "1"})


def test_logs_run_lifecycle(interpreter, caplog):
    with caplog.at_level(logging.DEBUG, logger="stackvm.interpreter"):
        interpreter.execute([Halt()])
        interpreter.execute([Pop()])

    messages = [record.getMessage() for record in caplog.records]
    assert any("Starting run" in message for message in messages)
    assert any("status=halted" in message for message in messages)
    assert any("Run aborted" in message for message in messages)
