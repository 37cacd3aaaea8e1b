"""Reactive graph — shared tables, read tracking and notification batching.

Observable, ObservableDict, Computed and the reaction classes are thin handles
holding an _id; their data lives in the tables below.

The currently-evaluating derivation is held in a contextvar. Any tracked read
made while it is set registers the reader as an observer of the value.

Batching: mutations inside `with transaction()` (every store commit runs in
one) queue invalidations and flush them when the outermost scope exits.
"""

from __future__ import annotations

import contextvars
import itertools
from contextlib import contextmanager

# value_id -> current value (Observable, ObservableDict)
values: dict[int, object] = {}
# value_id -> derivations reading it
observers: dict[int, set] = {}

# derivation_id -> values it read on its last run
dependencies: dict[int, set] = {}
derivation_fns: dict[int, object] = {}
cached_values: dict[int, object] = {}
dirty_flags: dict[int, bool] = {}
disposed: dict[int, bool] = {}

_id_counter = itertools.count(1)

current_derivation: contextvars.ContextVar = contextvars.ContextVar(
    "current_derivation", default=None
)

_batch_depth: int = 0
_pending: set = set()


def new_id() -> int:
    return next(_id_counter)


def track(value_id: int, handle) -> None:
    """Register the running derivation, if any, as a reader of value_id."""
    derivation = current_derivation.get()
    if derivation is not None:
        observers[value_id].add(derivation)
        derivation._dependencies.add(handle)


def notify(value_id: int) -> None:
    for observer in list(observers[value_id]):
        schedule(observer)


def untrack_all(derivation_id: int, derivation) -> None:
    """Drop every dependency edge of a derivation before it re-runs."""
    for dep in dependencies[derivation_id]:
        dep._remove_observer(derivation)
    dependencies[derivation_id].clear()


def schedule(derivation) -> None:
    """Run a derivation now, or queue it when inside a transaction."""
    if _batch_depth > 0:
        _pending.add(derivation)
    else:
        derivation._run()


def _flush_pending() -> None:
    while _pending:
        # derivations may schedule more while running
        batch = list(_pending)
        _pending.clear()
        for derivation in batch:
            derivation._run()


@contextmanager
def transaction():
    """Batch notifications until the outermost transaction exits.

    Usage:
        with transaction():
            count.set(1)
            label.set("one")
            # subscribers see both writes at once, here
    """
    global _batch_depth
    _batch_depth += 1
    try:
        yield
    finally:
        _batch_depth -= 1
        if _batch_depth == 0:
            _flush_pending()


def get_pending_count() -> int:
    """Number of derivations waiting for the current transaction to close."""
    return len(_pending)
