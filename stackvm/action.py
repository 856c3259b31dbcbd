"""
State transformer for the stack machine.

An ``Action[T]`` is a lazy description of a computation that reads and
replaces the current ``MachineState``, produces a value of type ``T`` and
may abort with a ``MachineError``. Running it yields
``Result[tuple[MachineState, T]]``.

Actions are built from four primitives (``pure``, ``get``, ``put`` and
``fail``) and composed with ``flat_map`` or the ``@do`` decorator. The
interpreter in :func:`run_action` is iterative, so arbitrarily long
compositions never grow the Python call stack.
"""

from __future__ import annotations

from abc import ABC
from collections.abc import Callable, Generator
from dataclasses import dataclass
from typing import Any, Generic, NoReturn, TypeVar

from stackvm._vendor import Err, Ok, Result
from stackvm.errors import MachineError
from stackvm.state import MachineState

T = TypeVar("T")
U = TypeVar("U")

ActionGenerator = Generator["Action[Any]", Any, T]


class Action(ABC, Generic[T]):
    """Base class for every state transformer."""

    __slots__ = ()

    def map(self, f: Callable[[T], U]) -> Action[U]:
        """Map a function over this action's result."""

        if not callable(f):
            raise TypeError("mapper must be callable")

        def factory() -> ActionGenerator[U]:
            value = yield self
            return f(value)

        return GeneratorAction(factory)

    def flat_map(self, f: Callable[[T], Action[U]]) -> Action[U]:
        """Monadic bind: run this action, feed its value to ``f`` and run the result.

        ``f`` is never called when this action fails.
        """

        if not callable(f):
            raise TypeError("binder must be callable returning an Action")

        def factory() -> ActionGenerator[U]:
            value = yield self
            next_action = f(value)
            if not isinstance(next_action, Action):
                raise TypeError(
                    "binder must return an Action; got "
                    f"{type(next_action).__name__}"
                )
            return (yield next_action)

        return GeneratorAction(factory)

    def then(self, following: Action[U]) -> Action[U]:
        """Sequence ``following`` after this action, discarding this value."""

        return self.flat_map(lambda _: following)

    def __rshift__(self, following: Action[U]) -> Action[U]:
        return self.then(following)

    def run(self, state: MachineState) -> Result[tuple[MachineState, T]]:
        return run_action(self, state)

    @staticmethod
    def pure(value: T) -> Action[T]:
        return PureAction(value)


@dataclass(frozen=True)
class PureAction(Action[T]):
    """Produces ``value`` without touching the state."""

    value: T


@dataclass(frozen=True)
class GetState(Action[MachineState]):
    """Produces the current state unchanged."""


@dataclass(frozen=True)
class PutState(Action[None]):
    """Replaces the whole state."""

    state: MachineState


@dataclass(frozen=True)
class FailAction(Action[NoReturn]):
    """Aborts the enclosing computation with ``error``."""

    error: MachineError


@dataclass(frozen=True)
class GeneratorAction(Action[T]):
    """Action backed by a generator factory.

    The factory is invoked afresh on every run, so the action is reusable
    even though generators are single-use.
    """

    factory: Callable[[], ActionGenerator[T]]


def get() -> Action[MachineState]:
    return GetState()


def put(state: MachineState) -> Action[None]:
    if not isinstance(state, MachineState):
        raise TypeError(f"put expects a MachineState; got {type(state).__name__}")
    return PutState(state)


def modify(f: Callable[[MachineState], MachineState]) -> Action[None]:
    """Replace the state with ``f(state)``."""

    return get().flat_map(lambda state: put(f(state)))


def gets(f: Callable[[MachineState], T]) -> Action[T]:
    """Project a value out of the current state."""

    return get().map(f)


def fail(error: MachineError) -> Action[NoReturn]:
    if not isinstance(error, MachineError):
        raise TypeError(f"fail expects a MachineError; got {type(error).__name__}")
    return FailAction(error)


def _close_frames(frames: list[Generator[Any, Any, Any]]) -> None:
    while frames:
        frames.pop().close()


def run_action(action: Action[T], state: MachineState) -> Result[tuple[MachineState, T]]:
    """Run ``action`` against ``state``.

    Returns ``Ok((final_state, value))`` or ``Err(error)`` for the first
    ``fail`` reached. Nothing after a failure is executed and the partially
    updated state is dropped.
    """

    frames: list[Generator[Any, Any, Any]] = []
    control: Action[Any] | None = action
    value: Any = None

    while True:
        if control is not None:
            current, control = control, None
            if isinstance(current, GeneratorAction):
                gen = current.factory()
                if not isinstance(gen, Generator):
                    raise TypeError(
                        f"action factory did not return a generator, got {type(gen).__name__}"
                    )
                frames.append(gen)
                value = None
            elif isinstance(current, PureAction):
                value = current.value
            elif isinstance(current, GetState):
                value = state
            elif isinstance(current, PutState):
                state = current.state
                value = None
            elif isinstance(current, FailAction):
                _close_frames(frames)
                return Err(current.error)
            else:
                _close_frames(frames)
                raise TypeError(f"Cannot run {type(current).__name__} as an Action")

        if not frames:
            return Ok((state, value))

        try:
            yielded = frames[-1].send(value)
        except StopIteration as stop:
            frames.pop()
            value = stop.value
            continue

        if not isinstance(yielded, Action):
            _close_frames(frames)
            raise TypeError(
                f"do-block yielded {type(yielded).__name__}; only Actions may be yielded"
            )
        control = yielded


__all__ = [
    "Action",
    "ActionGenerator",
    "FailAction",
    "GeneratorAction",
    "GetState",
    "PureAction",
    "PutState",
    "fail",
    "get",
    "gets",
    "modify",
    "put",
    "run_action",
]
