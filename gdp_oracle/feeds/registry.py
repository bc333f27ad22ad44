"""
Backend registry: central catalog of available feed backends.

Backends register themselves here. The registry is config-driven: a priority
list of names determines which backends are tried, and in what order.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Union

from .base import FeedBackend

logger = logging.getLogger(__name__)

BackendFactory = Union[Callable[[], FeedBackend], FeedBackend]


class BackendRegistry:
    """
    Registry mapping backend names to factories or instances.

    Usage:
        registry = BackendRegistry()
        registry.register("primary", lambda: PrimaryChainBackend(client))
        registry.register("aggregator", HermesAggregatorBackend)

        chain = registry.build_chain(["primary", "aggregator"])
    """

    def __init__(self) -> None:
        self._factories: Dict[str, Any] = {}
        self._instances: Dict[str, FeedBackend] = {}

    def register(self, name: str, factory: BackendFactory) -> None:
        """Register a backend by name."""
        self._factories[name] = factory
        self._instances.pop(name, None)
        logger.debug("Registered feed backend: %s", name)

    def get(self, name: str) -> FeedBackend:
        """Get or instantiate a backend by name."""
        if name not in self._instances:
            factory = self._factories.get(name)
            if factory is None:
                raise KeyError(
                    f"Unknown feed backend '{name}'. "
                    f"Available: {list(self._factories)}"
                )
            if isinstance(factory, FeedBackend) and not isinstance(factory, type):
                self._instances[name] = factory
            else:
                self._instances[name] = factory()
        return self._instances[name]

    @property
    def names(self) -> List[str]:
        return list(self._factories)

    def build_chain(self, priority: Optional[List[str]] = None) -> List[FeedBackend]:
        """Build an ordered list of backends from a priority list."""
        names = priority or list(self._factories)
        unknown = [n for n in names if n not in self._factories]
        if unknown:
            logger.warning("Ignoring unknown backends in priority list: %s", unknown)
        return [self.get(n) for n in names if n in self._factories]
