"""Fake backends and payload builders for resolver and API tests (no live network)."""

from .backends import (
    FakeBackend,
    FakeBackendAlwaysFail,
    FakeBackendFailNThenSucceed,
    FakeRpcClient,
    make_reading,
    price_feed_bytes,
    price_update_v2_bytes,
)

__all__ = [
    "FakeBackend",
    "FakeBackendAlwaysFail",
    "FakeBackendFailNThenSucceed",
    "FakeRpcClient",
    "make_reading",
    "price_feed_bytes",
    "price_update_v2_bytes",
]
