"""Registry — owns the host wiring and the stores built against it.

A host is any object with:
    observable(values) -> mutable mapping whose per-key reads it observes
    property           -> shared namespace (mapping or plain object)

install() publishes the registry on the host namespace as "$<name>", so
components reach the newest store's state/getters/commit/dispatch through
it. Stores can only be built after install(); teardown() releases every
subscription those stores opened.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, MutableMapping
from typing import Any, Callable

from fluxbridge.bridge import Subscriptions, raise_collected
from fluxbridge.context import Context, Deferred
from fluxbridge.errors import NotInstalled, StoreNotBuilt
from fluxbridge.observable import ObservableDict
from fluxbridge.store import StoreMaps, assemble_store

logger = logging.getLogger(__name__)


class ReactiveHost:
    """Default host: snapshots become ObservableDicts, tracked by
    autorun/reaction/Computed."""

    def __init__(self) -> None:
        self.property: dict[str, Any] = {}

    def observable(self, values: dict) -> ObservableDict:
        return ObservableDict(values)


class Registry:
    """Caller-owned store registry."""

    def __init__(self) -> None:
        self._host = None
        self._prop_name: str | None = None
        self._subscriptions: list[Subscriptions] = []
        self.context: Context | None = None

    @property
    def host(self):
        return self._host

    @property
    def installed(self) -> bool:
        return callable(getattr(self._host, "observable", None))

    def install(self, host, name: str = "store") -> None:
        """Register the host and publish this registry as host.property["$" + name]."""
        if self._host is not None:
            self._unpublish()
        self._host = host
        self._prop_name = f"${name or 'store'}"
        namespace = getattr(host, "property", None)
        if isinstance(namespace, MutableMapping):
            namespace[self._prop_name] = self
        elif namespace is not None:
            setattr(namespace, self._prop_name, self)
        logger.info("Installed store registry as %s on %r", self._prop_name, host)

    def observe(self, values: dict) -> MutableMapping:
        """The host's observable() capability. Raises NotInstalled without one."""
        if not self.installed:
            raise NotInstalled("Install a host with Registry.install() before building a store")
        return self._host.observable(values)

    def store(
        self,
        state: Mapping | None = None,
        getters: Mapping[str, Callable] | None = None,
        mutators: Mapping[str, Callable] | None = None,
        actions: Mapping[str, Callable] | None = None,
    ) -> StoreMaps:
        """Build a store; it becomes the registry's current context."""
        subscriptions = Subscriptions()
        maps, context = assemble_store(
            self.observe,
            state=state,
            getters=getters,
            mutators=mutators,
            actions=actions,
            subscriptions=subscriptions,
        )
        self._subscriptions.append(subscriptions)
        self.context = context
        return maps

    # --- pass-throughs to the current store ---

    def _current(self) -> Context:
        if self.context is None:
            raise StoreNotBuilt("No store has been built with this registry")
        return self.context

    @property
    def state(self):
        return self._current().state

    @property
    def getters(self):
        return self._current().getters

    def commit(self, name: str, payload: Any = None) -> Any:
        return self._current().commit(name, payload)

    def dispatch(self, name: str, payload: Any = None) -> Deferred:
        return self._current().dispatch(name, payload)

    # --- lifecycle ---

    def _unpublish(self) -> None:
        namespace = getattr(self._host, "property", None)
        if isinstance(namespace, MutableMapping):
            namespace.pop(self._prop_name, None)
        elif namespace is not None and hasattr(namespace, self._prop_name):
            delattr(namespace, self._prop_name)

    def teardown(self) -> None:
        """Release all store subscriptions and detach from the host."""
        stores, self._subscriptions = self._subscriptions, []
        errors = []
        try:
            for subscriptions in stores:
                try:
                    subscriptions.release()
                except Exception as exc:
                    errors.append(exc)
        finally:
            if self._host is not None:
                self._unpublish()
            self._host = None
            self._prop_name = None
            self.context = None
            logger.info("Tore down store registry (%d stores released)", len(stores))
        raise_collected(errors, "Failed to tear down store registry")

    def __repr__(self) -> str:
        state = "installed" if self.installed else "not installed"
        return f"Registry({state}, stores={len(self._subscriptions)})"
