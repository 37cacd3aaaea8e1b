"""Selectors — pick a subset of a named-value mapping.

Given the full set { a, b, c }, the returned function handles payloads like:

    ["a", "b"]                        -> { a, b }
    {"x": "a", "y": "b"}              -> { x: a, y: b }
    {"x": lambda t: t["a"] + t["b"]}  -> { x: a + b }

Map values of any other type are skipped. Names are not validated: a name
missing from the target selects None.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable

Selector = Callable[[Any], dict]


def make_selector(target: Mapping) -> Selector:
    def select(payload) -> dict:
        subset = {}
        if isinstance(payload, (list, tuple)):
            for name in payload:
                subset[name] = target.get(name)
        elif isinstance(payload, Mapping):
            for key, value in payload.items():
                if isinstance(value, str):
                    subset[key] = target.get(value)
                elif callable(value):
                    subset[key] = value(target)
        return subset

    return select
