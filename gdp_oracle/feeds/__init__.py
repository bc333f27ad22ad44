"""
Feed backends and multi-source resolution.

Each backend answers one feed lookup from one data source (primary network
account, fallback network account, Hermes REST aggregator). The resolver walks
a config-driven priority list of backends until one succeeds.
"""

from __future__ import annotations

from .base import (
    BackendKind,
    BackendResult,
    FeedBackend,
    FeedId,
    Reading,
    ResolutionFailure,
    ResolutionOutcome,
    ResultKind,
)
from .registry import BackendRegistry
from .resolver import FeedResolver

__all__ = [
    "BackendKind",
    "BackendRegistry",
    "BackendResult",
    "FeedBackend",
    "FeedId",
    "FeedResolver",
    "Reading",
    "ResolutionFailure",
    "ResolutionOutcome",
    "ResultKind",
]
