"""Textual integration for fluxbridge. Opt-in — requires textual.

bind() connects a map_state/map_getters selection to a widget update: the
selection's accessors are read inside a reaction, and the push callback
receives a plain dict of current values whenever any of them changes.

Pushes are skipped while the app is not running or inside pause(app),
NoMatches from widget queries is ignored, and pushes from other threads are
marshaled with call_from_thread.
"""

from __future__ import annotations

import threading
from collections.abc import Mapping
from contextlib import contextmanager
from typing import Callable

from textual.css.query import NoMatches

from fluxbridge.reaction import DataReaction, reaction

# id(app) present <-> inside a pause() block for that app
_paused_apps: set[int] = set()


@contextmanager
def pause(app):
    """Suspend pushes while widgets are being replaced."""
    key = id(app)
    _paused_apps.add(key)
    try:
        yield
    finally:
        _paused_apps.discard(key)


def is_safe(app) -> bool:
    return app.is_running and id(app) not in _paused_apps


def read_selection(selection: Mapping[str, Callable[[], object]]) -> dict:
    """Call every accessor; non-callables (e.g. computed selections) pass through."""
    return {
        name: accessor() if callable(accessor) else accessor
        for name, accessor in selection.items()
    }


def bind(
    app,
    selection: Mapping[str, Callable[[], object]],
    push: Callable[[dict], None],
    *,
    fire_immediately: bool = True,
) -> DataReaction:
    """Push the selection's values to `push` now and whenever they change.

    Usage:
        counter = store.map_state(["num"])
        bind(app, counter, lambda v: app.query_one("#num", Label).update(str(v["num"])))

    Returns the reaction; dispose() disconnects.
    """
    main = threading.get_ident()

    def _safe(values: dict) -> None:
        try:
            push(values)
        except NoMatches:
            pass

    def _guarded(values: dict) -> None:
        if not is_safe(app):
            return
        if threading.get_ident() != main:
            app.call_from_thread(_safe, values)
        else:
            _safe(values)

    return reaction(
        lambda: read_selection(selection), _guarded, fire_immediately=fire_immediately
    )
