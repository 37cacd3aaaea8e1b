"""Derived graph — store getters resolved once, in first-access order.

Each getter is a function (state, getters) -> value. The facade handed to it
as `getters` computes a sibling on first read and serves the memo table after
that, so a getter may depend on one declared after it, and every getter
function runs exactly once no matter how many others read it.

Getters are not re-run when state changes. A getter that should stay live
returns a subscribable (a Computed, usually) and the store's derived snapshot
follows that.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Callable, Iterator

from fluxbridge.errors import CyclicGetterError

GetterFn = Callable[[object, "GetterFacade"], object]

_UNSET = object()


class GetterFacade(Mapping):
    """Read-only mapping of getter name -> resolved value (get-or-compute)."""

    def __init__(self, state, getter_defs: Mapping[str, GetterFn]) -> None:
        self._state = state
        self._defs = dict(getter_defs)
        self._memo: dict[str, object] = {name: _UNSET for name in self._defs}
        self._resolving: list[str] = []

    def __getitem__(self, name: str):
        value = self._memo.get(name, _UNSET)
        if value is not _UNSET:
            return value
        if name not in self._defs:
            raise KeyError(name)
        return self._compute(name)

    def _compute(self, name: str):
        if name in self._resolving:
            chain = self._resolving[self._resolving.index(name):] + [name]
            raise CyclicGetterError(chain)
        self._resolving.append(name)
        try:
            value = self._defs[name](self._state, self)
        finally:
            self._resolving.pop()
        self._memo[name] = value
        return value

    def is_resolved(self, name: str) -> bool:
        return self._memo.get(name, _UNSET) is not _UNSET

    def __contains__(self, name: object) -> bool:
        return name in self._defs

    def __iter__(self) -> Iterator[str]:
        return iter(self._defs)

    def __len__(self) -> int:
        return len(self._defs)

    def __repr__(self) -> str:
        resolved = sum(1 for name in self._defs if self.is_resolved(name))
        return f"GetterFacade({resolved}/{len(self._defs)} resolved)"


def resolve_getters(state, getter_defs: Mapping[str, GetterFn]) -> GetterFacade:
    """Build the facade and force every getter once."""
    facade = GetterFacade(state, getter_defs)
    for name in facade:
        facade[name]
    return facade
