"""REST aggregator backends."""
from __future__ import annotations

from .hermes import HermesAggregatorBackend

__all__ = ["HermesAggregatorBackend"]
