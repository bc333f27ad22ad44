"""
Pyth Hermes REST aggregator backend.

Uses the public Hermes API (no authentication required):
  GET https://hermes.pyth.network/api/latest_price_feeds?ids[]={0x-feed-id}
"""
from __future__ import annotations

import logging

import requests

from ...core.errors import DecodeError
from ..base import BackendKind, BackendResult, FeedId
from ..decoder import decode

logger = logging.getLogger(__name__)

HERMES_BASE_URL = "https://hermes.pyth.network"
HTTP_TIMEOUT_S = 10.0

# Hermes answers some bad requests with a 2xx plain-text body.
ERROR_MARKERS = ("Failed to deserialize", "Invalid")


class HermesAggregatorBackend:
    """Fetch the latest price for a feed from the Hermes REST API."""

    def __init__(
        self,
        base_url: str = HERMES_BASE_URL,
        timeout_s: float = HTTP_TIMEOUT_S,
        *,
        name: str = "aggregator",
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout_s = timeout_s
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def url_for(self, feed: FeedId) -> str:
        return f"{self._base_url}/api/latest_price_feeds?ids[]={feed.hex_id}"

    def fetch(self, feed: FeedId) -> BackendResult:
        url = self.url_for(feed)
        logger.info("Fetching %s from aggregator: %s", feed.symbol, url)

        try:
            resp = requests.get(url, timeout=self._timeout_s)
        except requests.RequestException as exc:
            return BackendResult.transient(self._name, f"{type(exc).__name__}: {exc}")

        if not 200 <= resp.status_code < 300:
            return BackendResult.transient(self._name, f"aggregator failed: HTTP {resp.status_code}")

        body = resp.text
        if any(marker in body for marker in ERROR_MARKERS):
            return BackendResult.transient(self._name, f"aggregator error: {body}")

        try:
            reading = decode(
                BackendKind.AGGREGATOR,
                body,
                symbol=feed.symbol,
                source_id=self._name,
                feed_id=feed.hex_id,
            )
        except DecodeError as exc:
            return BackendResult.malformed(self._name, f"{exc} - Response: {body[:200]}")
        return BackendResult.success(self._name, reading)
