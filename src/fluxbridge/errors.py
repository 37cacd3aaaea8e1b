"""Exception hierarchy for fluxbridge."""

from __future__ import annotations


class FluxBridgeError(Exception):
    """Base exception for all fluxbridge errors."""


class InvalidStateShape(FluxBridgeError, TypeError):
    """State tree is missing, not a mapping, or a sequence."""


class UnknownMutator(FluxBridgeError, LookupError):
    """commit() named a mutator the store does not have."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f'Unknown mutator "{name}"')


class UnknownAction(FluxBridgeError, LookupError):
    """dispatch() named an action the store does not have."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f'Unknown action "{name}"')


class NotInstalled(FluxBridgeError, RuntimeError):
    """A live snapshot was requested before a host was installed."""


class StoreNotBuilt(FluxBridgeError, LookupError):
    """Registry pass-through used before any store was built with it."""


class CyclicGetterError(FluxBridgeError, RecursionError):
    """A getter depends on itself, directly or through siblings."""

    def __init__(self, chain: list[str]) -> None:
        self.chain = list(chain)
        super().__init__("Cyclic getter dependency: " + " -> ".join(self.chain))
