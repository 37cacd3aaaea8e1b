"""Subscription bridge — state tree in, live snapshot out.

build_snapshot() walks a state tree once. Static values are copied,
subscribables are subscribed with a callback that writes each emission into
the snapshot, and nested mappings become nested snapshots. Because a
subscribable must emit synchronously on subscribe, the snapshot is fully
populated when build_snapshot() returns.

Every container is created by the `observe` callable (dict by default, the
host's observable() inside a store), and every write goes through item
assignment, so the host sees each update.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping
from typing import Callable

from fluxbridge.errors import InvalidStateShape

logger = logging.getLogger(__name__)

Observe = Callable[[dict], MutableMapping]


def is_subscribable(value) -> bool:
    return callable(getattr(value, "subscribe", None))


class Subscriptions:
    """Handles returned by subscribe(), released together on teardown.

    A handle may be an object with dispose() or unsubscribe(), a plain
    callable, or None.
    """

    __slots__ = ("_handles", "_released")

    def __init__(self) -> None:
        self._handles: list = []
        self._released = False

    def add(self, handle) -> None:
        if handle is not None:
            self._handles.append(handle)

    def extend(self, other: Subscriptions) -> None:
        """Take over every handle held by `other`."""
        self._handles.extend(other._handles)
        other._handles.clear()

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        """Dispose every handle. Later calls are no-ops.

        A handle that raises does not stop the others; the first error is
        re-raised once all are released, several as an ExceptionGroup.
        """
        if self._released:
            return
        self._released = True
        logger.debug("Releasing %d subscriptions", len(self._handles))
        handles, self._handles = self._handles, []
        errors = []
        for handle in handles:
            try:
                _dispose(handle)
            except Exception as exc:
                errors.append(exc)
        raise_collected(errors, "Failed to release subscriptions")

    def __len__(self) -> int:
        return len(self._handles)


def _dispose(handle) -> None:
    if hasattr(handle, "dispose"):
        handle.dispose()
    elif hasattr(handle, "unsubscribe"):
        handle.unsubscribe()
    elif callable(handle):
        handle()


def raise_collected(errors: list[Exception], message: str) -> None:
    if len(errors) == 1:
        raise errors[0]
    if errors:
        raise ExceptionGroup(message, errors)


def build_snapshot(
    tree,
    observe: Observe = dict,
    subscriptions: Subscriptions | None = None,
) -> MutableMapping:
    """Build a live snapshot of `tree`, keeping it current via subscriptions."""
    if tree is None or not isinstance(tree, Mapping):
        raise InvalidStateShape(
            f"Expecting a mapping for state, got {type(tree).__name__}"
        )
    snapshot = observe({})
    for name, value in tree.items():
        if is_subscribable(value):
            handle = value.subscribe(_writer(snapshot, name))
            if subscriptions is not None:
                subscriptions.add(handle)
        elif isinstance(value, Mapping):
            snapshot[name] = build_snapshot(value, observe, subscriptions)
        else:
            snapshot[name] = value
    return snapshot


def _writer(snapshot: MutableMapping, name) -> Callable:
    def write(value) -> None:
        snapshot[name] = value

    return write


def wrap_values(snapshot: Mapping) -> dict[str, Callable[[], object]]:
    """One accessor per key, reading the live value at call time.

    Selecting accessors rather than values keeps a selection current, and
    when the snapshot is host-observed each call is a tracked read.
    """
    return {name: _reader(snapshot, name) for name in list(snapshot.keys())}


def _reader(snapshot: Mapping, name) -> Callable[[], object]:
    def read():
        return snapshot[name]

    return read
