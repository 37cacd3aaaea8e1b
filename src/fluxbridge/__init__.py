"""fluxbridge: a Vuex-style store over push-based subscribable values."""

from importlib.metadata import version as _version

__version__ = _version("fluxbridge")

from fluxbridge._graph import get_pending_count, transaction
from fluxbridge.observable import Observable, ObservableDict
from fluxbridge.reaction import Reaction, autorun, reaction
from fluxbridge.errors import (
    FluxBridgeError,
    InvalidStateShape,
    UnknownMutator,
    UnknownAction,
    NotInstalled,
    StoreNotBuilt,
    CyclicGetterError,
)
from fluxbridge.selector import make_selector
from fluxbridge.bridge import Subscriptions, build_snapshot, wrap_values
from fluxbridge.derived import GetterFacade, resolve_getters
from fluxbridge.context import Context, Deferred
from fluxbridge.binder import BoundFacade, bind_context
from fluxbridge.store import StoreMaps, assemble_store
from fluxbridge.registry import Registry, ReactiveHost
# imported after the fluxbridge.derived submodule so `derived` names the function
from fluxbridge.computed import Computed, derived
# textual NOT auto-imported — opt-in only

__all__ = [
    "Observable",
    "ObservableDict",
    "Computed",
    "derived",
    "Reaction",
    "autorun",
    "reaction",
    "transaction",
    "get_pending_count",
    "FluxBridgeError",
    "InvalidStateShape",
    "UnknownMutator",
    "UnknownAction",
    "NotInstalled",
    "StoreNotBuilt",
    "CyclicGetterError",
    "make_selector",
    "Subscriptions",
    "build_snapshot",
    "wrap_values",
    "GetterFacade",
    "resolve_getters",
    "Context",
    "Deferred",
    "BoundFacade",
    "bind_context",
    "StoreMaps",
    "assemble_store",
    "Registry",
    "ReactiveHost",
]
