"""Bound facades — invoking a mapped mutator commits it, invoking a mapped
action dispatches it.

    committers = bind_context(context, "commit", mutators)
    committers["inc"](2)    # same as context.commit("inc", 2)
    committers.inc(2)       # attribute access works too
"""

from __future__ import annotations

import functools
from collections.abc import Mapping
from typing import Callable, Iterator

CALL_TYPES = ("commit", "dispatch")


class BoundFacade(Mapping):
    """Mapping of name -> callable with the name pre-bound.

    A fresh partial is built on every read. Names outside `fns` still bind,
    so a typo surfaces as UnknownMutator/UnknownAction when called.

    Item access always binds. Attribute access does not reach names that
    are Mapping methods (get, keys, items, values) or start with "_".
    """

    __slots__ = ("_context", "_call_type", "_names")

    def __init__(self, context, call_type: str, fns: Mapping) -> None:
        if call_type not in CALL_TYPES:
            raise ValueError(f"call_type must be one of {CALL_TYPES}, got {call_type!r}")
        self._context = context
        self._call_type = call_type
        self._names = tuple(fns)

    def __getitem__(self, name: str) -> Callable:
        return functools.partial(getattr(self._context, self._call_type), name)

    def __getattr__(self, name: str) -> Callable:
        if name.startswith("_"):
            raise AttributeError(name)
        return self[name]

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __repr__(self) -> str:
        return f"BoundFacade({self._call_type}, {list(self._names)})"


def bind_context(context, call_type: str, fns: Mapping) -> BoundFacade:
    return BoundFacade(context, call_type, fns)
