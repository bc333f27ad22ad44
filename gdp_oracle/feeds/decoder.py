"""
Decode raw backend payloads into a Reading.

Two encodings:
- ONCHAIN: account bytes holding a Pyth price record (88-byte PriceFeed, or a
  receiver PriceUpdateV2 account identified by its 8-byte layout tag).
  value = mantissa * 10**exponent.
- AGGREGATOR: Hermes JSON array; first element's nested price object.
  value = mantissa / 10**abs(exponent).

The exponent handling differs between the two paths and is kept as-is;
callers rely on the aggregator scaling for the published GDP feeds.
"""
from __future__ import annotations

import hashlib
import json
import struct
from typing import Any, Dict, Optional, Tuple, Union

from ..core.errors import DecodeError
from .base import BackendKind, Reading, utc_now

# price:i64 conf:u64 expo:i32 publish_time:i64
_PRICE = struct.Struct("<qQiq")
PRICE_FEED_SIZE = 32 + 2 * _PRICE.size

PRICE_UPDATE_V2_TAG = hashlib.sha256(b"account:PriceUpdateV2").digest()[:8]
# tag + write_authority; verification level follows
_PRICE_UPDATE_HEADER = 8 + 32

_VERIFICATION_PARTIAL = 0
_VERIFICATION_FULL = 1

# Pyth exponents stay within a few dozen places; anything wider is not a price.
MAX_EXPONENT = 38


def _check_exponent(expo: int) -> None:
    if abs(expo) > MAX_EXPONENT:
        raise DecodeError(f"Exponent {expo} out of range (limit {MAX_EXPONENT})")


def _scale_signed(value: int, expo: int) -> float:
    """value * 10**expo, dividing by an exact power of ten for negative exponents."""
    _check_exponent(expo)
    try:
        if expo < 0:
            return value / 10 ** -expo
        return float(value * 10 ** expo)
    except OverflowError as exc:
        raise DecodeError(f"Cannot scale {value} by 10**{expo}: {exc}") from exc


def _scale_absolute(value: int, expo: int) -> float:
    """value / 10**abs(expo)."""
    _check_exponent(expo)
    try:
        return value / 10 ** abs(expo)
    except OverflowError as exc:
        raise DecodeError(f"Cannot scale {value} by 10**-{abs(expo)}: {exc}") from exc


def _unpack_price_feed(raw: bytes) -> Tuple[bytes, int, int, int, int]:
    if len(raw) != PRICE_FEED_SIZE:
        raise DecodeError(
            f"PriceFeed record must be {PRICE_FEED_SIZE} bytes, got {len(raw)}"
        )
    feed_id = raw[:32]
    price, conf, expo, publish_time = _PRICE.unpack_from(raw, 32)
    return feed_id, price, conf, expo, publish_time


def _unpack_price_update(raw: bytes) -> Tuple[bytes, int, int, int, int]:
    if len(raw) <= _PRICE_UPDATE_HEADER:
        raise DecodeError(f"PriceUpdateV2 account truncated at {len(raw)} bytes")
    level = raw[_PRICE_UPDATE_HEADER]
    if level == _VERIFICATION_PARTIAL:
        offset = _PRICE_UPDATE_HEADER + 2
    elif level == _VERIFICATION_FULL:
        offset = _PRICE_UPDATE_HEADER + 1
    else:
        raise DecodeError(f"Unknown verification level tag {level}")
    needed = offset + 32 + _PRICE.size
    if len(raw) < needed:
        raise DecodeError(
            f"PriceUpdateV2 account needs {needed} bytes, got {len(raw)}"
        )
    feed_id = raw[offset:offset + 32]
    price, conf, expo, publish_time = _PRICE.unpack_from(raw, offset + 32)
    return feed_id, price, conf, expo, publish_time


def decode_account(raw: bytes, *, symbol: str, source_id: str, feed_id: str = "") -> Reading:
    """Decode on-chain account bytes. Raises DecodeError."""
    if not isinstance(raw, (bytes, bytearray)):
        raise DecodeError(f"Account payload must be bytes, got {type(raw).__name__}")
    raw = bytes(raw)
    if raw[:8] == PRICE_UPDATE_V2_TAG:
        account_feed_id, price, conf, expo, publish_time = _unpack_price_update(raw)
    else:
        account_feed_id, price, conf, expo, publish_time = _unpack_price_feed(raw)

    return Reading(
        symbol=symbol,
        value=_scale_signed(price, expo),
        uncertainty=_scale_signed(conf, expo),
        observed_at=int(publish_time),
        source_id=source_id,
        normalized_at=utc_now(),
        feed_id=feed_id or "0x" + account_feed_id.hex(),
    )


def _parse_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise DecodeError(f"Field {field_name} is not an integer: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise DecodeError(f"Field {field_name} is not an integer: {value!r}")


def decode_hermes(
    payload: Union[str, bytes, list],
    *,
    symbol: str,
    source_id: str,
    feed_id: str = "",
) -> Reading:
    """Decode a Hermes latest_price_feeds response. Raises DecodeError."""
    if isinstance(payload, (str, bytes)):
        try:
            data = json.loads(payload)
        except ValueError as exc:
            raise DecodeError(f"Failed to parse JSON: {exc}") from exc
    else:
        data = payload

    if not isinstance(data, list):
        raise DecodeError(f"Expected a JSON array, got {type(data).__name__}")
    if not data:
        raise DecodeError(f"No {symbol} data found in aggregator response")
    first = data[0]
    price_obj: Optional[Dict[str, Any]] = first.get("price") if isinstance(first, dict) else None
    if not isinstance(price_obj, dict):
        raise DecodeError("Aggregator entry has no price object")

    missing = [k for k in ("price", "conf", "expo", "publish_time") if k not in price_obj]
    if missing:
        raise DecodeError(f"Aggregator price object missing {', '.join(missing)}")

    mantissa = _parse_int(price_obj["price"], "price")
    conf = _parse_int(price_obj["conf"], "conf")
    if conf < 0:
        raise DecodeError(f"Negative confidence {conf}")
    expo = _parse_int(price_obj["expo"], "expo")
    publish_time = _parse_int(price_obj["publish_time"], "publish_time")

    entry_id = first.get("id")
    if not isinstance(entry_id, str):
        entry_id = ""
    if entry_id and not entry_id.startswith("0x"):
        entry_id = "0x" + entry_id
    return Reading(
        symbol=symbol,
        value=_scale_absolute(mantissa, expo),
        uncertainty=_scale_absolute(conf, expo),
        observed_at=publish_time,
        source_id=source_id,
        normalized_at=utc_now(),
        feed_id=feed_id or entry_id,
    )


def decode(
    kind: BackendKind,
    payload: Any,
    *,
    symbol: str,
    source_id: str,
    feed_id: str = "",
) -> Reading:
    """Dispatch to the decoder for a backend kind."""
    if kind is BackendKind.ONCHAIN:
        return decode_account(payload, symbol=symbol, source_id=source_id, feed_id=feed_id)
    if kind is BackendKind.AGGREGATOR:
        return decode_hermes(payload, symbol=symbol, source_id=source_id, feed_id=feed_id)
    raise DecodeError(f"Unknown backend kind: {kind!r}")
