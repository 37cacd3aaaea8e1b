"""Observable values — store state that tracks its readers.

An Observable is a subscribable in the store's sense: subscribe(callback)
delivers the current value immediately and again on every change, and
returns a handle whose dispose() stops delivery.

ObservableDict is the host-side snapshot container: ReactiveHost.observable()
wraps snapshot values in one, so every per-key read inside a reaction or
computed is tracked and every write from a subscription callback notifies.
"""

from __future__ import annotations

from typing import Callable, Generic, Iterator, TypeVar

from fluxbridge import _graph
from fluxbridge.reaction import DataReaction, reaction

T = TypeVar("T")
KT = TypeVar("KT")
VT = TypeVar("VT")


class Observable(Generic[T]):
    """A single observable, subscribable value."""

    __slots__ = ("_id",)

    def __init__(self, value: T) -> None:
        self._id = _graph.new_id()
        _graph.values[self._id] = value
        _graph.observers[self._id] = set()

    def get(self) -> T:
        """Read the value. Inside a derivation, registers the dependency."""
        _graph.track(self._id, self)
        return _graph.values[self._id]

    def set(self, value: T) -> None:
        """Write a new value; observers are notified only if it changed."""
        old = _graph.values[self._id]
        if old is not value and old != value:
            _graph.values[self._id] = value
            _graph.notify(self._id)

    def update(self, fn: Callable[[T], T]) -> None:
        """Replace the value with fn(current). The read is not tracked."""
        self.set(fn(_graph.values[self._id]))

    @property
    def value(self) -> T:
        return self.get()

    @value.setter
    def value(self, value: T) -> None:
        self.set(value)

    def subscribe(self, callback: Callable[[T], None]) -> DataReaction:
        """Call callback with the current value now and after every change."""
        return reaction(self.get, callback, fire_immediately=True)

    def _remove_observer(self, observer) -> None:
        _graph.observers[self._id].discard(observer)

    def __repr__(self) -> str:
        return f"Observable({_graph.values[self._id]!r})"


class ObservableDict(Generic[KT, VT]):
    """A dict whose reads are tracked and whose writes notify observers."""

    __slots__ = ("_id",)

    def __init__(self, data: dict[KT, VT] | None = None) -> None:
        self._id = _graph.new_id()
        _graph.values[self._id] = dict(data) if data else {}
        _graph.observers[self._id] = set()

    @property
    def _data(self) -> dict[KT, VT]:
        return _graph.values[self._id]

    def _track(self) -> None:
        _graph.track(self._id, self)

    def _remove_observer(self, observer) -> None:
        _graph.observers[self._id].discard(observer)

    # --- reads (track) ---

    def __getitem__(self, key: KT) -> VT:
        self._track()
        return self._data[key]

    def get(self, key: KT, default: VT | None = None) -> VT | None:
        self._track()
        return self._data.get(key, default)

    def __contains__(self, key: object) -> bool:
        self._track()
        return key in self._data

    def __len__(self) -> int:
        self._track()
        return len(self._data)

    def __iter__(self) -> Iterator[KT]:
        self._track()
        return iter(self._data)

    def keys(self):
        self._track()
        return self._data.keys()

    def values(self):
        self._track()
        return self._data.values()

    def items(self):
        self._track()
        return self._data.items()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ObservableDict):
            other = other._data
        return self._data == other

    __hash__ = None

    # --- writes (notify) ---

    def __setitem__(self, key: KT, value: VT) -> None:
        self._data[key] = value
        _graph.notify(self._id)

    def __delitem__(self, key: KT) -> None:
        del self._data[key]
        _graph.notify(self._id)

    def to_dict(self) -> dict:
        """Untracked plain copy, nested ObservableDicts included."""
        return {
            key: value.to_dict() if isinstance(value, ObservableDict) else value
            for key, value in self._data.items()
        }

    def __repr__(self) -> str:
        return f"ObservableDict({self._data!r})"
