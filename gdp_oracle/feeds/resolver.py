"""
Feed resolution: ordered fallback across backends.

resolve_one tries each backend in priority order and stops at the first
success. Failures of any kind move straight to the next backend; no backend is
retried. resolve_batch applies resolve_one to every catalog entry, dropping
entries that fail, and raises only when nothing could be resolved.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional, Sequence, Tuple

from ..core.errors import BatchResolutionError
from .base import (
    BackendResult,
    FeedBackend,
    FeedId,
    Reading,
    ResolutionFailure,
    ResolutionOutcome,
)

logger = logging.getLogger(__name__)


class FeedResolver:
    """
    Ordered chain of feed backends with fallback.

    The chain holds no per-request state, so one resolver can serve
    concurrent requests.
    """

    def __init__(self, backends: Sequence[FeedBackend], max_workers: int = 1) -> None:
        if not backends:
            raise ValueError("FeedResolver needs at least one backend")
        self._backends: Tuple[FeedBackend, ...] = tuple(backends)
        self._max_workers = max(1, int(max_workers))

    @property
    def backend_names(self) -> List[str]:
        return [b.name for b in self._backends]

    def resolve_one(self, feed: FeedId) -> ResolutionOutcome:
        """Resolve one feed through the chain. Returns a Reading or a ResolutionFailure."""
        failures: List[BackendResult] = []
        for backend in self._backends:
            logger.info("Trying %s for %s", backend.name, feed.symbol)
            try:
                result = backend.fetch(feed)
            except Exception as exc:
                logger.exception("Backend %s raised for %s", backend.name, feed.symbol)
                result = BackendResult.transient(backend.name, f"{type(exc).__name__}: {exc}")

            if result.ok:
                logger.info("Fetched %s from %s", feed.symbol, backend.name)
                return result.reading  # type: ignore[return-value]

            logger.warning("%s failed for %s: %s", backend.name, feed.symbol, result.describe())
            failures.append(result)

        failure = ResolutionFailure(symbol=feed.symbol, attempts=tuple(failures))
        logger.error("All sources failed for %s: %s", feed.symbol, "; ".join(failure.reasons))
        return failure

    def resolve_batch(
        self,
        feeds: Iterable[FeedId],
        max_workers: Optional[int] = None,
    ) -> List[Reading]:
        """
        Resolve every feed, keeping catalog order among successes.

        Sequential by default. With max_workers > 1, entries run on a bounded
        thread pool and results are re-sorted by catalog index.
        """
        entries = list(feeds)
        workers = self._max_workers if max_workers is None else max(1, int(max_workers))

        if workers == 1 or len(entries) <= 1:
            outcomes = []
            for index, feed in enumerate(entries):
                logger.info("Fetching %s feed", feed.symbol)
                outcomes.append((index, feed, self.resolve_one(feed)))
        else:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                futures = [
                    (index, feed, pool.submit(self.resolve_one, feed))
                    for index, feed in enumerate(entries)
                ]
                outcomes = [(index, feed, fut.result()) for index, feed, fut in futures]
            outcomes.sort(key=lambda item: item[0])

        readings: List[Reading] = []
        for _, feed, outcome in outcomes:
            if isinstance(outcome, Reading):
                readings.append(outcome)
            else:
                logger.warning("Failed to fetch %s: %s", feed.symbol, "; ".join(outcome.reasons))

        if not readings:
            raise BatchResolutionError(
                f"No feeds could be fetched ({len(entries)} attempted)"
            )
        return readings
