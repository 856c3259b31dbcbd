"""
stackvm - a small stack-based bytecode virtual machine.

Programs are sequences of already-decoded instructions plus a label table.
A run threads an immutable machine state through composable actions and
returns either the deferred output records or the first machine error.

Example:
    >>> from stackvm import Add, Halt, Print, Push, run, emitted_values
    >>>
    >>> result = run([Push(2), Push(3), Add(), Print(), Halt()])
    >>> emitted_values(result.unwrap())
    [5]
"""

from stackvm._vendor import Err, FrozenDict, Ok, Result
from stackvm.action import Action, fail, get, gets, modify, put, run_action
from stackvm.config import EXECUTION_LIMIT, STACK_CAPACITY, MachineConfig
from stackvm.dispatch import execute
from stackvm.do import do
from stackvm.errors import (
    DivideByZeroError,
    IllegalInstructionAccessError,
    LabelNotFoundError,
    MachineError,
    StackOverflowError,
    StackUnderflowError,
)
from stackvm.instructions import (
    Add,
    Div,
    Dup,
    Halt,
    Instruction,
    InstructionBase,
    Jump,
    Mod,
    Mul,
    Pop,
    Print,
    Push,
    Sub,
)
from stackvm.interpreter import MachineInterpreter, RunResult, RunStatus, run
from stackvm.output import Emit, OutputSequence, emitted_values, flush
from stackvm.state import MachineState, StackBuffer, initial_state

__all__ = [
    "EXECUTION_LIMIT",
    "STACK_CAPACITY",
    "Action",
    "Add",
    "Div",
    "DivideByZeroError",
    "Dup",
    "Emit",
    "Err",
    "FrozenDict",
    "Halt",
    "IllegalInstructionAccessError",
    "Instruction",
    "InstructionBase",
    "Jump",
    "LabelNotFoundError",
    "MachineConfig",
    "MachineError",
    "MachineInterpreter",
    "MachineState",
    "Mod",
    "Mul",
    "Ok",
    "OutputSequence",
    "Pop",
    "Print",
    "Push",
    "Result",
    "RunResult",
    "RunStatus",
    "StackBuffer",
    "StackOverflowError",
    "StackUnderflowError",
    "Sub",
    "do",
    "emitted_values",
    "execute",
    "fail",
    "flush",
    "get",
    "gets",
    "initial_state",
    "modify",
    "put",
    "run",
    "run_action",
]
