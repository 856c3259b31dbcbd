"""
The do decorator for machine actions.

This module provides the ``@do`` decorator that converts generator functions
into action factories, giving do-notation over the state transformer::

    @do
    def swap():
        y = yield pop_value()
        x = yield pop_value()
        yield push_value(y)
        yield push_value(x)

Calling ``swap()`` builds an ``Action``; nothing runs until the action is
handed to ``run_action``.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from functools import wraps
from typing import ParamSpec, TypeVar

from stackvm.action import Action, ActionGenerator, GeneratorAction

P = ParamSpec("P")
T = TypeVar("T")


def do(func: Callable[P, ActionGenerator[T]]) -> Callable[P, Action[T]]:
    """
    Decorator that converts a generator function into an action factory.

    Each ``yield`` hands an ``Action`` to the interpreter and receives its
    value back. The generator's ``return`` value becomes the value of the
    whole action. A ``fail`` anywhere inside stops the generator for good;
    code after the failing ``yield`` never runs.

    Do not wrap a ``yield`` in ``try``/``except`` hoping to catch machine
    errors: failures are not raised into the generator, they end the run.
    """

    if not inspect.isgeneratorfunction(func):
        raise TypeError(f"@do expects a generator function; got {func!r}")

    @wraps(func)
    def build(*args: P.args, **kwargs: P.kwargs) -> Action[T]:
        def factory() -> ActionGenerator[T]:
            return func(*args, **kwargs)

        return GeneratorAction(factory)

    build.original_generator = func  # type: ignore[attr-defined]
    return build


__all__ = ["do"]
