"""
Feed catalog: the ordered set of Pyth US GDP feeds served by /gdp/all.

The catalog is loaded once at startup and never mutated. The first entry is
the headline indicator served by /gdp. config.yaml may replace the table with
a list of {feed_id, symbol} mappings.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, List, Optional, Sequence, Tuple

from .core.errors import InvalidIdentifier
from .feeds.base import FeedId

# (hex feed id, symbol); headline US GDP first, then quarterly releases.
DEFAULT_FEEDS: Tuple[Tuple[str, str], ...] = (
    ("0x01a2d2aa5728850767d67e2f82ddc9c8e4c3bbace231461386ef9cbb16d0d36b", "ECO.US.GDP"),
    ("0xede7d586e573bba4d9f9b598134a0b3b2848fb5633efa1aeae6cdc405ca69ec4", "ECO.US.GDPQ120"),
    ("0x56ef63838b89bae2fa4ceac09887937e3a8ed5882372e9d3c5f5b0047be99201", "ECO.US.GDPQ121"),
    ("0xe007fecd2fa29ae39ca6014752d08240d29ab8d26defda84151a35888dc38f72", "ECO.US.GDPQ122"),
    ("0xed0db24f1d1e79d175b972b2824f17bfdc68adb2b9f0a95bd55001aad9636243", "ECO.US.GDPQ123"),
    ("0x7d52b237e53197baeabb7e8840afc635e804e4c120304850657b7fe9b5abde6b", "ECO.US.GDPQ124"),
    ("0x1f0585497d5749086d2a0d31872e3d54983ae1695fe8daa367f416778401a316", "ECO.US.GDPQ125"),
    ("0x9fc444f6174a9cf849b65c3b30411ecd68a98136ce7e3727c62256675f7137dc", "ECO.US.GDPQ220"),
    ("0x4e35cd9a603f66fd85f6128d91a9bc129662e64ed022a97f8d95b59f1ebf7c2e", "ECO.US.GDPQ221"),
    ("0x01da0bbe2e2a28a45eee49168a755321baccf916377337699cf6f23207952623", "ECO.US.GDPQ222"),
    ("0xd7c07f4fea81886c927eb995a5e007987c426c6b04255a0b9cc2063b990175b4", "ECO.US.GDPQ223"),
    ("0x5fd1723f5ae19701812061efdfc487b923260c3186694b1f757bc19b3478c26c", "ECO.US.GDPQ224"),
    ("0xb4ae8f99fe948c259bf1c419a8ef3c99f31b6bfbd11b2bd5e960d5ba395ce66e", "ECO.US.GDPQ225"),
    ("0xe50aec560231dbcdd10e04bcabc4f18fa492e363b08ca9098e10d658931c3457", "ECO.US.GDPQ320"),
    ("0x849b55be51fdcb722dc58ad870d69f73c3ea3b020fb2a8039e5b7abed62f2a86", "ECO.US.GDPQ321"),
    ("0xf8557de55b0ae56652e6ab325eef49a3e999aba6a37f35c36ac6403713dc11a6", "ECO.US.GDPQ322"),
    ("0xa0158865c183a07659de1f7b86dcf7f34c6b9f7982cc2f22b08c1979e3dee8ea", "ECO.US.GDPQ323"),
    ("0x8cbea9b9b69b80ddeaa00c4ab9dc54f2b1c104f3fb732ece3b70eeb622296d76", "ECO.US.GDPQ324"),
    ("0x9700fcc09ccf25204df7e5b87c3cfa7a780ff782c95a39fd5558cf14dbac8591", "ECO.US.GDPQ420"),
    ("0x3a683ed0c55b14e1521313d45d93136a5adc9945fa8dca02374f8d9870d4d342", "ECO.US.GDPQ421"),
    ("0xd584777f78a2ac22d8eebddd9cf22f9006a74b6da112e0d673bc6a6599c5f7d1", "ECO.US.GDPQ422"),
    ("0x44aaa6f2845486fd145561c678ab8b24dfba2f685a30755ad70f3b5cf6e8b3b8", "ECO.US.GDPQ423"),
    ("0x76bd1d211bed7f8c553f19cc2da845cab538e8b1d9e317d0455c22950fe4e32c", "ECO.US.GDPQ424"),
)


@dataclass(frozen=True)
class FeedCatalog:
    """Ordered, immutable feed table with a one-to-one id <-> symbol mapping."""

    feeds: Tuple[FeedId, ...]

    def __post_init__(self) -> None:
        if not self.feeds:
            raise ValueError("Feed catalog is empty")
        ids = [f.binary_id for f in self.feeds]
        symbols = [f.symbol for f in self.feeds]
        if len(set(ids)) != len(ids):
            raise ValueError("Feed catalog has duplicate feed ids")
        if len(set(symbols)) != len(symbols):
            raise ValueError("Feed catalog has duplicate symbols")

    @classmethod
    def from_pairs(cls, pairs: Iterable[Sequence[str]]) -> "FeedCatalog":
        return cls(tuple(FeedId.parse(hex_id, symbol) for hex_id, symbol in pairs))

    @classmethod
    def from_config(cls, entries: Optional[List[Any]]) -> "FeedCatalog":
        """Build from config entries ({feed_id, symbol} dicts or pairs); None -> default table."""
        if not entries:
            return default_catalog()
        pairs = []
        for entry in entries:
            if isinstance(entry, dict):
                if "feed_id" not in entry or "symbol" not in entry:
                    raise InvalidIdentifier(f"Catalog entry needs feed_id and symbol: {entry!r}")
                pairs.append((str(entry["feed_id"]), str(entry["symbol"])))
            else:
                hex_id, symbol = entry
                pairs.append((str(hex_id), str(symbol)))
        return cls.from_pairs(pairs)

    @property
    def primary(self) -> FeedId:
        return self.feeds[0]

    @property
    def symbols(self) -> List[str]:
        return [f.symbol for f in self.feeds]

    def by_symbol(self, symbol: str) -> FeedId:
        for feed in self.feeds:
            if feed.symbol == symbol:
                return feed
        raise KeyError(f"Unknown feed symbol '{symbol}'")

    def __iter__(self) -> Iterator[FeedId]:
        return iter(self.feeds)

    def __len__(self) -> int:
        return len(self.feeds)


def default_catalog() -> FeedCatalog:
    return FeedCatalog.from_pairs(DEFAULT_FEEDS)
