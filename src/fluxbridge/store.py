"""Store assembly — state, getters, mutators and actions in; four selectors out.

    state    --build_snapshot-->  live state snapshot    --> map_state
    getters  --resolve_getters--> derived values
             --build_snapshot-->  live derived snapshot  --> map_getters
    Context(state, getters, mutators, actions)
             --bind_context("commit")-->                  --> map_mutations
             --bind_context("dispatch")-->                --> map_actions

map_state and map_getters select zero-argument accessors over the live
snapshots; map_mutations and map_actions select pre-bound callables.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Callable, NamedTuple

from fluxbridge.binder import bind_context
from fluxbridge.bridge import Observe, Subscriptions, build_snapshot, wrap_values
from fluxbridge.context import Context
from fluxbridge.derived import resolve_getters
from fluxbridge.selector import Selector, make_selector

logger = logging.getLogger(__name__)


class StoreMaps(NamedTuple):
    map_state: Selector
    map_getters: Selector
    map_mutations: Selector
    map_actions: Selector


def assemble_store(
    observe: Observe,
    state: Mapping | None = None,
    getters: Mapping[str, Callable] | None = None,
    mutators: Mapping[str, Callable] | None = None,
    actions: Mapping[str, Callable] | None = None,
    subscriptions: Subscriptions | None = None,
) -> tuple[StoreMaps, Context]:
    """Build one store. Nothing is kept if any step raises."""
    state = {} if state is None else state
    getters = getters or {}
    mutators = mutators or {}
    actions = actions or {}
    # collect locally so a failed assembly leaves the caller's set untouched
    local = Subscriptions()

    try:
        state_values = build_snapshot(state, observe, local)
        map_state = make_selector(wrap_values(state_values))

        facade = resolve_getters(state, getters)
        derived_values = build_snapshot(dict(facade), observe, local)
        map_getters = make_selector(wrap_values(derived_values))
    except BaseException:
        local.release()
        raise

    context = Context(state=state, getters=facade, mutators=mutators, actions=actions)
    map_mutations = make_selector(bind_context(context, "commit", mutators))
    map_actions = make_selector(bind_context(context, "dispatch", actions))

    if subscriptions is not None:
        subscriptions.extend(local)
    logger.debug(
        "Assembled store: %d state keys, %d getters, %d mutators, %d actions, "
        "%d subscriptions",
        len(state), len(getters), len(mutators), len(actions), len(local),
    )
    return StoreMaps(map_state, map_getters, map_mutations, map_actions), context
