"""
Feed interfaces and data contracts.

Every backend implements the FeedBackend protocol: given a FeedId it returns a
BackendResult, never raising for expected failures (missing account, bad
payload, network error). The resolver walks an ordered list of backends and
produces either a Reading or a ResolutionFailure.

Data is returned via frozen dataclasses for immutability and type safety.
"""

from __future__ import annotations

import enum
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Protocol, Tuple, Union, runtime_checkable

from ..core.errors import InvalidIdentifier, ResolutionError

FEED_ID_BYTES = 32


class BackendKind(enum.Enum):
    """Which decoding path a backend's raw payload takes."""

    ONCHAIN = "onchain"
    AGGREGATOR = "aggregator"


class ResultKind(enum.Enum):
    """Outcome of a single backend attempt."""

    SUCCESS = "SUCCESS"
    NOT_FOUND = "NOT_FOUND"
    TRANSIENT_ERROR = "TRANSIENT_ERROR"
    MALFORMED_DATA = "MALFORMED_DATA"


@dataclass(frozen=True)
class FeedId:
    """
    One indicator, in both representations: the 32-byte binary id used by
    on-chain lookups and the aggregator, and the human-readable symbol.
    """

    binary_id: bytes
    symbol: str

    @classmethod
    def parse(cls, hex_id: str, symbol: str) -> "FeedId":
        """Build from a hex id (with or without 0x). Raises InvalidIdentifier."""
        text = hex_id[2:] if hex_id.lower().startswith("0x") else hex_id
        try:
            raw = bytes.fromhex(text)
        except ValueError as exc:
            raise InvalidIdentifier(f"Feed id for {symbol} is not hex: {hex_id!r}") from exc
        if len(raw) != FEED_ID_BYTES:
            raise InvalidIdentifier(
                f"Feed id for {symbol} must be {FEED_ID_BYTES} bytes, got {len(raw)}"
            )
        return cls(binary_id=raw, symbol=symbol)

    @property
    def hex_id(self) -> str:
        return "0x" + self.binary_id.hex()

    def is_valid(self) -> bool:
        return len(self.binary_id) == FEED_ID_BYTES


@dataclass(frozen=True)
class Reading:
    """Normalized, unit-scaled result of a successful feed lookup."""

    symbol: str
    value: float
    uncertainty: float
    observed_at: int
    source_id: str
    normalized_at: datetime
    feed_id: str = ""

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["normalized_at"] = self.normalized_at.isoformat()
        return out


@dataclass(frozen=True)
class BackendResult:
    """
    Result of asking one backend for one feed.

    Failure kinds are kept distinct (NOT_FOUND vs TRANSIENT_ERROR vs
    MALFORMED_DATA) even though the chain currently treats them alike.
    """

    backend: str
    kind: ResultKind
    reading: Optional[Reading] = None
    cause: Optional[str] = None

    @classmethod
    def success(cls, backend: str, reading: Reading) -> "BackendResult":
        return cls(backend=backend, kind=ResultKind.SUCCESS, reading=reading)

    @classmethod
    def not_found(cls, backend: str, cause: str) -> "BackendResult":
        return cls(backend=backend, kind=ResultKind.NOT_FOUND, cause=cause)

    @classmethod
    def transient(cls, backend: str, cause: str) -> "BackendResult":
        return cls(backend=backend, kind=ResultKind.TRANSIENT_ERROR, cause=cause[:500])

    @classmethod
    def malformed(cls, backend: str, cause: str) -> "BackendResult":
        return cls(backend=backend, kind=ResultKind.MALFORMED_DATA, cause=cause[:500])

    @property
    def ok(self) -> bool:
        return self.kind is ResultKind.SUCCESS and self.reading is not None

    def describe(self) -> str:
        return f"{self.backend}: {self.kind.value}: {self.cause}"


@dataclass(frozen=True)
class ResolutionFailure:
    """Every backend in the chain failed; attempts are kept in order."""

    symbol: str
    attempts: Tuple[BackendResult, ...] = field(default_factory=tuple)

    @property
    def reasons(self) -> list[str]:
        return [a.describe() for a in self.attempts]

    def to_error(self) -> ResolutionError:
        return ResolutionError(self.symbol, self.reasons)

    def raise_error(self) -> None:
        raise self.to_error()


ResolutionOutcome = Union[Reading, ResolutionFailure]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@runtime_checkable
class FeedBackend(Protocol):
    """Protocol for a data source that can answer one feed lookup."""

    @property
    def name(self) -> str: ...

    def fetch(self, feed: FeedId) -> BackendResult:
        """Ask this backend for the current value of one feed."""
        ...
