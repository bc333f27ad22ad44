"""
Response envelope shared by every JSON endpoint:
  {success, data, error, timestamp}
success is true exactly when data is present and error is absent.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Generic, Optional, Sequence, TypeVar

from .feeds.base import Reading

T = TypeVar("T")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _jsonable(data: Any) -> Any:
    if isinstance(data, Reading):
        return data.to_dict()
    if isinstance(data, (list, tuple)):
        return [_jsonable(x) for x in data]
    return data


@dataclass(frozen=True)
class Envelope(Generic[T]):
    """Uniform success/error/data wrapper."""

    success: bool
    data: Optional[T]
    error: Optional[str]
    timestamp: datetime

    def __post_init__(self) -> None:
        if self.success != (self.data is not None and self.error is None):
            raise ValueError("Envelope success must match data present and error absent")

    @classmethod
    def ok(cls, data: T) -> "Envelope[T]":
        if data is None:
            raise ValueError("Envelope.ok requires data")
        return cls(success=True, data=data, error=None, timestamp=_utc_now())

    @classmethod
    def fail(cls, error: str) -> "Envelope[Any]":
        return cls(success=False, data=None, error=str(error) or "unknown error", timestamp=_utc_now())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "data": _jsonable(self.data),
            "error": self.error,
            "timestamp": self.timestamp.isoformat(),
        }


def reading_envelope(reading: Reading) -> Envelope[Reading]:
    return Envelope.ok(reading)


def readings_envelope(readings: Sequence[Reading]) -> Envelope[list]:
    return Envelope.ok(list(readings))
