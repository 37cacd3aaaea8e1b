"""Reactions — side effects driven by observable reads.

- autorun(fn): runs fn now and again whenever anything it read changes.
- reaction(data_fn, effect_fn): re-runs data_fn on change and calls effect_fn
  with the result only when the result differs from the last one.

Subscribable.subscribe() is built on reaction(..., fire_immediately=True), so
the handle returned here is also the subscription handle the store releases.
"""

from __future__ import annotations

from typing import Callable, TypeVar

from fluxbridge import _graph

T = TypeVar("T")


class Reaction:
    """A side effect that re-runs eagerly when its dependencies change."""

    __slots__ = ("_id",)

    def __init__(self, fn: Callable[[], None]) -> None:
        self._id = _graph.new_id()
        _graph.derivation_fns[self._id] = fn
        _graph.dependencies[self._id] = set()
        _graph.disposed[self._id] = False

    @property
    def _dependencies(self) -> set:
        return _graph.dependencies[self._id]

    @property
    def disposed(self) -> bool:
        return _graph.disposed[self._id]

    def _evaluate(self, fn: Callable):
        _graph.untrack_all(self._id, self)
        token = _graph.current_derivation.set(self)
        try:
            return fn()
        finally:
            _graph.current_derivation.reset(token)

    def _run(self) -> None:
        if _graph.disposed[self._id]:
            return
        self._evaluate(_graph.derivation_fns[self._id])

    def dispose(self) -> None:
        """Stop re-running. Safe to call more than once."""
        _graph.disposed[self._id] = True
        _graph.untrack_all(self._id, self)

    def __repr__(self) -> str:
        state = "disposed" if self.disposed else "active"
        fn = _graph.derivation_fns[self._id]
        return f"{type(self).__name__}({getattr(fn, '__name__', fn)!r}, {state})"


class DataReaction(Reaction):
    """reaction(data_fn, effect_fn) — effect fires only when the data changes."""

    __slots__ = ("_effect_fn", "_last_value", "_initialized")

    def __init__(self, data_fn: Callable[[], T], effect_fn: Callable[[T], None]) -> None:
        super().__init__(data_fn)
        self._effect_fn = effect_fn
        self._last_value = None
        self._initialized = False

    def _run(self) -> None:
        if _graph.disposed[self._id]:
            return
        new_value = self._evaluate(_graph.derivation_fns[self._id])
        if not self._initialized or new_value != self._last_value:
            self._last_value = new_value
            self._initialized = True
            self._effect_fn(new_value)


def autorun(fn: Callable[[], None]) -> Reaction:
    """Run fn immediately, then again whenever an observable it read changes.

    Usage:
        count = Observable(0)
        log = []
        handle = autorun(lambda: log.append(count.get()))
        count.set(1)       # log == [0, 1]
        handle.dispose()
    """
    r = Reaction(fn)
    r._run()
    return r


def reaction(
    data_fn: Callable[[], T],
    effect_fn: Callable[[T], None],
    *,
    fire_immediately: bool = False,
) -> DataReaction:
    """Track data_fn; call effect_fn with its result whenever the result changes.

    With fire_immediately=True effect_fn also receives the first result.
    """
    r = DataReaction(data_fn, effect_fn)
    if fire_immediately:
        r._run()
    else:
        # establish dependencies without firing the effect
        r._last_value = r._evaluate(data_fn)
        r._initialized = True
    return r
