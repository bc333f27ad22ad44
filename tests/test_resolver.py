"""
Tests for the feed resolution fallback logic.

Verifies that:
- The first backend is used when it succeeds, and later backends are never called
- Later backends are tried, once each, when earlier ones fail
- Exhausted chains report every attempt's reason in order
- Batch resolution drops failed entries, keeps catalog order, and fails only when all fail
- The bounded worker pool gives the same result as sequential resolution
"""
from __future__ import annotations

import threading
import time

import pytest

from gdp_oracle.core.errors import BatchResolutionError, ResolutionError
from gdp_oracle.feeds.base import (
    BackendResult,
    FeedId,
    Reading,
    ResolutionFailure,
    ResultKind,
)
from gdp_oracle.feeds.resolver import FeedResolver
from tests.fakes.backends import (
    FakeBackend,
    FakeBackendAlwaysFail,
    make_reading,
)


def _feed(n: int, symbol: str | None = None) -> FeedId:
    return FeedId.parse("0x" + f"{n:02x}" * 32, symbol or f"ECO.US.F{n}")


GDP = _feed(0xAA, "ECO.US.GDP")


class RaisingBackend:
    def __init__(self, name: str = "boom"):
        self._name = name
        self.call_count = 0

    @property
    def name(self) -> str:
        return self._name

    def fetch(self, feed: FeedId) -> BackendResult:
        self.call_count += 1
        raise RuntimeError("unexpected crash")


# ---------------------------------------------------------------------------
# resolve_one
# ---------------------------------------------------------------------------


class TestResolveOne:
    def test_first_backend_used_when_it_succeeds(self):
        primary = FakeBackend("primary", {"ECO.US.GDP": 2.4})
        aggregator = FakeBackend("aggregator", {"ECO.US.GDP": 9.9})
        resolver = FeedResolver([primary, aggregator])

        reading = resolver.resolve_one(GDP)
        assert isinstance(reading, Reading)
        assert reading.source_id == "primary"
        assert reading.value == 2.4
        assert primary.call_count == 1
        assert aggregator.call_count == 0

    @pytest.mark.parametrize(
        "kind",
        [ResultKind.NOT_FOUND, ResultKind.TRANSIENT_ERROR, ResultKind.MALFORMED_DATA],
    )
    def test_every_failure_kind_falls_through(self, kind):
        primary = FakeBackendAlwaysFail("primary", kind=kind)
        aggregator = FakeBackend("aggregator", {"ECO.US.GDP": 2.5})
        reading = FeedResolver([primary, aggregator]).resolve_one(GDP)
        assert reading.source_id == "aggregator"
        assert primary.call_count == 1
        assert aggregator.call_count == 1

    def test_reference_scenario_not_found_then_aggregator(self):
        primary = FakeBackend("primary", missing_symbols=["ECO.US.GDP"])
        aggregator = FakeBackend("aggregator", {"ECO.US.GDP": 250.0})
        reading = FeedResolver([primary, aggregator]).resolve_one(GDP)
        assert reading.value == 250.0
        assert reading.uncertainty == 1.0
        assert reading.observed_at == 1700000000
        assert reading.source_id == "aggregator"

    def test_all_fail_returns_reasons_in_attempt_order(self):
        primary = FakeBackendAlwaysFail("primary", kind=ResultKind.NOT_FOUND)
        aggregator = FakeBackendAlwaysFail("aggregator", kind=ResultKind.TRANSIENT_ERROR)
        outcome = FeedResolver([primary, aggregator]).resolve_one(GDP)

        assert isinstance(outcome, ResolutionFailure)
        assert outcome.symbol == "ECO.US.GDP"
        assert [a.backend for a in outcome.attempts] == ["primary", "aggregator"]
        assert [a.kind for a in outcome.attempts] == [ResultKind.NOT_FOUND, ResultKind.TRANSIENT_ERROR]
        assert len(outcome.reasons) == 2
        assert outcome.reasons[0].startswith("primary: NOT_FOUND")
        assert outcome.reasons[1].startswith("aggregator: TRANSIENT_ERROR")

    def test_failure_converts_to_error(self):
        outcome = FeedResolver([FakeBackendAlwaysFail("a"), FakeBackendAlwaysFail("b")]).resolve_one(GDP)
        with pytest.raises(ResolutionError, match="ECO.US.GDP") as info:
            outcome.raise_error()
        assert "a: TRANSIENT_ERROR" in str(info.value)
        assert "b: TRANSIENT_ERROR" in str(info.value)
        assert info.value.reasons == outcome.reasons

    def test_no_backend_retried(self):
        primary = FakeBackendAlwaysFail("primary")
        fallback = FakeBackendAlwaysFail("fallback")
        aggregator = FakeBackendAlwaysFail("aggregator")
        FeedResolver([primary, fallback, aggregator]).resolve_one(GDP)
        assert (primary.call_count, fallback.call_count, aggregator.call_count) == (1, 1, 1)

    def test_three_tier_chain_short_circuits_in_middle(self):
        primary = FakeBackendAlwaysFail("primary")
        fallback = FakeBackend("fallback")
        aggregator = FakeBackend("aggregator")
        reading = FeedResolver([primary, fallback, aggregator]).resolve_one(GDP)
        assert reading.source_id == "fallback"
        assert aggregator.call_count == 0

    def test_raising_backend_treated_as_transient(self):
        boom = RaisingBackend()
        aggregator = FakeBackend("aggregator")
        reading = FeedResolver([boom, aggregator]).resolve_one(GDP)
        assert reading.source_id == "aggregator"

        outcome = FeedResolver([RaisingBackend()]).resolve_one(GDP)
        assert outcome.attempts[0].kind is ResultKind.TRANSIENT_ERROR
        assert "unexpected crash" in outcome.attempts[0].cause

    def test_empty_chain_rejected(self):
        with pytest.raises(ValueError):
            FeedResolver([])

    def test_backend_names(self):
        resolver = FeedResolver([FakeBackend("primary"), FakeBackend("aggregator")])
        assert resolver.backend_names == ["primary", "aggregator"]


# ---------------------------------------------------------------------------
# resolve_batch
# ---------------------------------------------------------------------------


class TestResolveBatch:
    def _catalog(self, n: int) -> list[FeedId]:
        return [_feed(i + 1) for i in range(n)]

    def test_all_succeed_in_catalog_order(self):
        feeds = self._catalog(5)
        readings = FeedResolver([FakeBackend("primary")]).resolve_batch(feeds)
        assert [r.symbol for r in readings] == [f.symbol for f in feeds]

    def test_failed_entries_dropped_order_kept(self):
        feeds = self._catalog(6)
        failing = {feeds[0].symbol, feeds[3].symbol, feeds[5].symbol}
        primary = FakeBackend("primary", missing_symbols=failing)
        aggregator = FakeBackend("aggregator", missing_symbols=failing)
        readings = FeedResolver([primary, aggregator]).resolve_batch(feeds)

        assert len(readings) == 3
        assert [r.symbol for r in readings] == [feeds[1].symbol, feeds[2].symbol, feeds[4].symbol]

    def test_sequential_calls_follow_catalog_order(self):
        feeds = self._catalog(4)
        primary = FakeBackend("primary")
        FeedResolver([primary]).resolve_batch(feeds)
        assert primary.calls == [f.symbol for f in feeds]

    def test_all_fail_raises(self):
        feeds = self._catalog(3)
        with pytest.raises(BatchResolutionError, match="No feeds could be fetched"):
            FeedResolver([FakeBackendAlwaysFail("a"), FakeBackendAlwaysFail("b")]).resolve_batch(feeds)

    def test_single_success_is_enough(self):
        feeds = self._catalog(3)
        missing = {feeds[0].symbol, feeds[1].symbol}
        readings = FeedResolver([FakeBackend("a", missing_symbols=missing)]).resolve_batch(feeds)
        assert [r.symbol for r in readings] == [feeds[2].symbol]

    def test_each_entry_gets_its_own_chain(self):
        feeds = self._catalog(3)
        primary = FakeBackend("primary", missing_symbols={feeds[1].symbol})
        aggregator = FakeBackend("aggregator")
        readings = FeedResolver([primary, aggregator]).resolve_batch(feeds)
        assert [r.source_id for r in readings] == ["primary", "aggregator", "primary"]
        assert aggregator.calls == [feeds[1].symbol]


class SlowBackend:
    """Completes later for earlier catalog entries, so completion order is reversed."""

    def __init__(self, delays: dict[str, float], failing: set[str] = frozenset()):
        self._delays = delays
        self._failing = failing
        self._lock = threading.Lock()
        self.completed: list[str] = []

    @property
    def name(self) -> str:
        return "slow"

    def fetch(self, feed: FeedId) -> BackendResult:
        time.sleep(self._delays.get(feed.symbol, 0.0))
        with self._lock:
            self.completed.append(feed.symbol)
        if feed.symbol in self._failing:
            return BackendResult.not_found("slow", "missing")
        return BackendResult.success("slow", make_reading(feed.symbol, source_id="slow"))


class TestResolveBatchPooled:
    def test_pool_preserves_catalog_order(self):
        feeds = [_feed(i + 1) for i in range(4)]
        delays = {f.symbol: 0.05 * (len(feeds) - i) for i, f in enumerate(feeds)}
        backend = SlowBackend(delays, failing={feeds[2].symbol})
        readings = FeedResolver([backend], max_workers=4).resolve_batch(feeds)

        assert [r.symbol for r in readings] == [feeds[0].symbol, feeds[1].symbol, feeds[3].symbol]
        assert backend.completed[0] != feeds[0].symbol

    def test_pool_matches_sequential(self):
        feeds = [_feed(i + 1) for i in range(8)]
        failing = {feeds[1].symbol, feeds[6].symbol}
        sequential = FeedResolver([FakeBackend("a", missing_symbols=failing)]).resolve_batch(feeds)
        pooled = FeedResolver([FakeBackend("a", missing_symbols=failing)]).resolve_batch(feeds, max_workers=3)
        assert [r.symbol for r in pooled] == [r.symbol for r in sequential]

    def test_pool_all_fail_raises(self):
        feeds = [_feed(i + 1) for i in range(3)]
        with pytest.raises(BatchResolutionError):
            FeedResolver([FakeBackendAlwaysFail("a")], max_workers=2).resolve_batch(feeds)
