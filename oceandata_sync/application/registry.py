"""
Registry of synchronization handlers, keyed by identifier.

Data source configuration names its handler by a string such as
``"oceandata"``; the registry turns that name into a handler instance once,
at startup.
"""

from typing import Callable, Dict, List

from .domain import Handler
from .exceptions import ConfigurationError

HandlerFactory = Callable[[], Handler]


class HandlerRegistry:
    """Maps handler identifiers to factories producing Handler instances."""

    def __init__(self, **factories: HandlerFactory):
        self._factories: Dict[str, HandlerFactory] = {}
        for identifier, factory in factories.items():
            self.register(identifier, factory)

    def register(self, identifier: str, factory: HandlerFactory):
        if identifier in self._factories:
            raise ConfigurationError(
                f"Handler {identifier!r} is already registered"
            )
        self._factories[identifier] = factory

    def identifiers(self) -> List[str]:
        return sorted(self._factories)

    def resolve(self, identifier: str) -> Handler:
        """
        Builds the handler registered under ``identifier``.

        Raises:
            ConfigurationError: If no handler has that identifier.
        """
        try:
            factory = self._factories[identifier]
        except KeyError:
            raise ConfigurationError(
                f"Unknown handler {identifier!r}; "
                f"expected one of {self.identifiers()}"
            ) from None
        return factory()
