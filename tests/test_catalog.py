"""Catalog tests: default table, config overrides, and the one-to-one id/symbol mapping."""
from __future__ import annotations

import pytest

from gdp_oracle.catalog import DEFAULT_FEEDS, FeedCatalog, default_catalog
from gdp_oracle.core.errors import InvalidIdentifier
from gdp_oracle.feeds.base import FeedId

ID_A = "0x" + "aa" * 32
ID_B = "0x" + "bb" * 32


def test_default_catalog_shape():
    catalog = default_catalog()
    assert len(catalog) == 23 == len(DEFAULT_FEEDS)
    assert catalog.primary.symbol == "ECO.US.GDP"
    assert catalog.primary.hex_id == "0x01a2d2aa5728850767d67e2f82ddc9c8e4c3bbace231461386ef9cbb16d0d36b"
    assert catalog.symbols[1] == "ECO.US.GDPQ120"


def test_iteration_order_matches_table():
    catalog = default_catalog()
    assert [f.symbol for f in catalog] == [s for _, s in DEFAULT_FEEDS]


def test_by_symbol():
    catalog = default_catalog()
    assert catalog.by_symbol("ECO.US.GDPQ424").hex_id.endswith("e32c")
    with pytest.raises(KeyError):
        catalog.by_symbol("ECO.US.NOPE")


def test_duplicate_ids_rejected():
    with pytest.raises(ValueError, match="duplicate feed ids"):
        FeedCatalog.from_pairs([(ID_A, "A"), (ID_A, "B")])


def test_duplicate_symbols_rejected():
    with pytest.raises(ValueError, match="duplicate symbols"):
        FeedCatalog.from_pairs([(ID_A, "A"), (ID_B, "A")])


def test_empty_rejected():
    with pytest.raises(ValueError):
        FeedCatalog(())


def test_from_config_entries():
    catalog = FeedCatalog.from_config([{"feed_id": ID_B, "symbol": "B"}, [ID_A, "A"]])
    assert catalog.symbols == ["B", "A"]
    assert catalog.primary.binary_id == b"\xbb" * 32


def test_from_config_none_uses_default():
    assert len(FeedCatalog.from_config(None)) == 23


def test_from_config_bad_entry():
    with pytest.raises(InvalidIdentifier):
        FeedCatalog.from_config([{"symbol": "A"}])


@pytest.mark.parametrize("bad", ["0x1234", "0x" + "zz" * 32, "aa" * 33])
def test_invalid_identifiers(bad):
    with pytest.raises(InvalidIdentifier):
        FeedId.parse(bad, "X")


def test_feed_id_without_prefix():
    assert FeedId.parse("aa" * 32, "X").hex_id == ID_A
