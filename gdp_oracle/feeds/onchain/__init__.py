"""On-chain account backends (primary and fallback networks)."""
from __future__ import annotations

from .fallback import FallbackChainBackend
from .primary import PrimaryChainBackend

__all__ = ["FallbackChainBackend", "PrimaryChainBackend"]
