"""Dispatch context — the one object every mutator and action sees.

    context.state      raw state tree (mutators write the subscribables in it)
    context.getters    the getter facade
    context.commit     run a mutator synchronously
    context.dispatch   run an action; the result comes back as a Deferred

A store builds exactly one Context and passes that same object into every
action, so actions can commit and dispatch recursively.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Mapping
from typing import Any, Callable

from fluxbridge._graph import transaction
from fluxbridge.errors import UnknownAction, UnknownMutator


class Deferred:
    """Awaitable result of dispatch().

    Awaiting yields the action's return value, unwrapping awaitables (and
    nested Deferreds) it returned. Plain return values are settled already:
    done() is True and result() returns them without an event loop.
    """

    __slots__ = ("_value",)

    def __init__(self, value: Any) -> None:
        if inspect.iscoroutine(value):
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                loop = None
            if loop is not None:
                # start the action body now instead of on first await
                value = loop.create_task(value)
        self._value = value

    def __await__(self):
        if inspect.iscoroutine(self._value):
            # a coroutine can be driven once; a task can be awaited repeatedly
            self._value = asyncio.ensure_future(self._value)
        value = self._value
        while inspect.isawaitable(value):
            value = yield from value.__await__()
        self._value = value
        return value

    def done(self) -> bool:
        value = self._value
        if isinstance(value, Deferred):
            return value.done()
        if isinstance(value, asyncio.Future):
            return value.done()
        return not inspect.isawaitable(value)

    def result(self) -> Any:
        """The settled value. Raises InvalidStateError while still pending."""
        value = self._value
        if isinstance(value, Deferred):
            return value.result()
        if isinstance(value, asyncio.Future):
            return value.result()
        if inspect.isawaitable(value):
            raise asyncio.InvalidStateError("Action result is not settled yet")
        return value

    def __repr__(self) -> str:
        state = "done" if self.done() else "pending"
        return f"Deferred({state})"


class Context:
    """Shared state/getters/commit/dispatch for one store."""

    __slots__ = ("state", "getters", "_mutators", "_actions")

    def __init__(
        self,
        state: Any = None,
        getters: Mapping | None = None,
        mutators: Mapping[str, Callable] | None = None,
        actions: Mapping[str, Callable] | None = None,
    ) -> None:
        self.state = state
        self.getters = getters
        self._mutators: dict[str, Callable] = dict(mutators or {})
        self._actions: dict[str, Callable] = dict(actions or {})

    def commit(self, name: str, payload: Any = None) -> Any:
        mutator = self._mutators.get(name)
        if not callable(mutator):
            raise UnknownMutator(name)
        with transaction():
            return mutator(self.state, payload)

    def dispatch(self, name: str, payload: Any = None) -> Deferred:
        action = self._actions.get(name)
        if not callable(action):
            raise UnknownAction(name)
        return Deferred(action(self, payload))

    def __repr__(self) -> str:
        return (
            f"Context(mutators={sorted(self._mutators)}, "
            f"actions={sorted(self._actions)})"
        )
