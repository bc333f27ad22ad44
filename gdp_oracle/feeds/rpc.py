"""
Minimal Solana JSON-RPC client over requests.

Only the two calls the service needs: getAccountInfo (base64 account data) and
getVersion. Every call carries an explicit timeout; failures raise RpcError.
"""
from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import base58
import requests

from ..core.errors import InvalidIdentifier, RpcError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 10.0
PUBKEY_BYTES = 32


def pubkey_from_bytes(raw: bytes) -> str:
    """Encode 32 raw bytes as a base58 account address."""
    if len(raw) != PUBKEY_BYTES:
        raise InvalidIdentifier(f"Account key must be {PUBKEY_BYTES} bytes, got {len(raw)}")
    return base58.b58encode(raw).decode("ascii")


def validate_pubkey(address: str) -> str:
    """Return the address unchanged if it decodes to 32 bytes. Raises InvalidIdentifier."""
    try:
        raw = base58.b58decode(address)
    except ValueError as exc:
        raise InvalidIdentifier(f"Invalid account address {address!r}: {exc}") from exc
    if len(raw) != PUBKEY_BYTES:
        raise InvalidIdentifier(
            f"Invalid account address {address!r}: decodes to {len(raw)} bytes"
        )
    return address


@dataclass(frozen=True)
class AccountInfo:
    """Account returned by getAccountInfo."""

    address: str
    data: bytes
    owner: str
    lamports: int
    executable: bool

    def summary(self) -> Dict[str, Any]:
        return {
            "owner": self.owner,
            "executable": self.executable,
            "lamports": self.lamports,
            "data_size": len(self.data),
        }


class SolanaRpcClient:
    """Blocking JSON-RPC client bound to one endpoint."""

    def __init__(self, url: str, timeout_s: float = DEFAULT_TIMEOUT_S) -> None:
        self.url = url
        self.timeout_s = timeout_s

    def _call(self, method: str, params: Optional[List[Any]] = None, timeout_s: Optional[float] = None) -> Any:
        body = {"jsonrpc": "2.0", "id": 1, "method": method, "params": params or []}
        logger.debug("RPC %s -> %s", method, self.url)
        try:
            resp = requests.post(self.url, json=body, timeout=timeout_s or self.timeout_s)
        except requests.RequestException as exc:
            raise RpcError(f"{method} request failed: {type(exc).__name__}: {exc}") from exc

        if resp.status_code == 429:
            raise RpcError(f"{method} rate limited (HTTP 429)", code=429)
        if not 200 <= resp.status_code < 300:
            raise RpcError(f"{method} failed with HTTP {resp.status_code}", code=resp.status_code)

        try:
            payload = resp.json()
        except ValueError as exc:
            raise RpcError(f"{method} returned non-JSON body") from exc

        if not isinstance(payload, dict):
            raise RpcError(f"{method} returned unexpected payload type {type(payload).__name__}")
        err = payload.get("error")
        if err:
            code = err.get("code") if isinstance(err, dict) else None
            message = err.get("message") if isinstance(err, dict) else str(err)
            raise RpcError(f"{method} error: {message}", code=code)
        return payload.get("result")

    def get_account(self, address: str, timeout_s: Optional[float] = None) -> Optional[AccountInfo]:
        """Fetch one account; None when the account does not exist."""
        validate_pubkey(address)
        result = self._call(
            "getAccountInfo",
            [address, {"encoding": "base64"}],
            timeout_s=timeout_s,
        )
        if not isinstance(result, dict):
            raise RpcError(f"getAccountInfo returned unexpected result for {address}")
        value = result.get("value")
        if value is None:
            return None
        if not isinstance(value, dict):
            raise RpcError(f"getAccountInfo returned unexpected value type {type(value).__name__} for {address}")

        data_field = value.get("data")
        if not isinstance(data_field, list) or not data_field:
            raise RpcError(f"getAccountInfo returned unexpected data field for {address}")
        try:
            data = base64.b64decode(data_field[0])
        except (TypeError, ValueError) as exc:
            raise RpcError(f"getAccountInfo returned invalid base64 for {address}") from exc
        try:
            lamports = int(value.get("lamports") or 0)
        except (TypeError, ValueError) as exc:
            raise RpcError(f"getAccountInfo returned non-numeric lamports for {address}") from exc

        return AccountInfo(
            address=address,
            data=data,
            owner=str(value.get("owner", "")),
            lamports=lamports,
            executable=bool(value.get("executable", False)),
        )

    def get_version(self) -> Dict[str, Any]:
        result = self._call("getVersion")
        if not isinstance(result, dict):
            raise RpcError("getVersion returned unexpected result")
        return result
