"""Computed values — lazily cached derivations over observables.

A Computed tracks what its function reads and caches the result until one of
those reads changes; the next get() re-evaluates. Like Observable it is
subscribable, which is how a store getter stays live: the getter function
runs once and returns a Computed, and the derived snapshot follows it.
"""

from __future__ import annotations

from typing import Callable, Generic, TypeVar

from fluxbridge import _graph
from fluxbridge.reaction import DataReaction, reaction

T = TypeVar("T")
S = TypeVar("S")

_UNSET = object()


class Computed(Generic[T]):
    """A derived value that auto-tracks dependencies and caches the result."""

    __slots__ = ("_id",)

    def __init__(self, fn: Callable[[], T]) -> None:
        self._id = _graph.new_id()
        _graph.derivation_fns[self._id] = fn
        _graph.cached_values[self._id] = _UNSET
        _graph.dirty_flags[self._id] = True
        _graph.dependencies[self._id] = set()
        _graph.observers[self._id] = set()

    @property
    def _dependencies(self) -> set:
        return _graph.dependencies[self._id]

    def get(self) -> T:
        """Read the value, recomputing first if a dependency changed."""
        _graph.track(self._id, self)
        if _graph.dirty_flags[self._id]:
            self._recompute()
        return _graph.cached_values[self._id]

    def _recompute(self) -> None:
        _graph.untrack_all(self._id, self)
        token = _graph.current_derivation.set(self)
        try:
            _graph.cached_values[self._id] = _graph.derivation_fns[self._id]()
        finally:
            _graph.current_derivation.reset(token)
        _graph.dirty_flags[self._id] = False

    def _run(self) -> None:
        # Invalidate only; recomputation waits for the next get().
        if not _graph.dirty_flags[self._id]:
            _graph.dirty_flags[self._id] = True
            _graph.notify(self._id)

    def _remove_observer(self, observer) -> None:
        _graph.observers[self._id].discard(observer)

    def subscribe(self, callback: Callable[[T], None]) -> DataReaction:
        """Call callback with the current value now and whenever it changes."""
        return reaction(self.get, callback, fire_immediately=True)

    def __repr__(self) -> str:
        val = _graph.cached_values[self._id]
        state = "dirty" if _graph.dirty_flags[self._id] else f"cached={val!r}"
        fn = _graph.derivation_fns[self._id]
        return f"Computed({getattr(fn, '__name__', fn)}, {state})"


def derived(source, fn: Callable[[S], T]) -> Computed[T]:
    """Computed over one source: fn(source.get()).

    Usage (a store getter):
        getters = {
            "is_even": lambda state, getters: derived(state["num"], lambda v: v % 2 == 0),
            "is_odd": lambda state, getters: derived(getters["is_even"], lambda v: not v),
        }
    """
    return Computed(lambda: fn(source.get()))
