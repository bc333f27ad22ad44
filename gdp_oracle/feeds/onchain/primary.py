"""
Primary on-chain backend (Sonic SVM).

The 32-byte feed id is used directly as the account key:
  getAccountInfo(base58(feed_id)) -> Pyth price record
"""
from __future__ import annotations

import logging
from typing import Optional

from ...core.errors import DecodeError, RpcError
from ..base import BackendKind, BackendResult, FeedId
from ..decoder import decode
from ..rpc import SolanaRpcClient, pubkey_from_bytes

logger = logging.getLogger(__name__)

SONIC_RPC_URL = "https://rpc.mainnet-alpha.sonic.game"


class PrimaryChainBackend:
    """Look a feed up as an account on the primary network."""

    def __init__(
        self,
        client: Optional[SolanaRpcClient] = None,
        *,
        name: str = "primary",
    ) -> None:
        self._client = client or SolanaRpcClient(SONIC_RPC_URL)
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def fetch(self, feed: FeedId) -> BackendResult:
        if not feed.is_valid():
            return BackendResult.malformed(
                self._name,
                f"invalid identifier: feed id for {feed.symbol} is {len(feed.binary_id)} bytes",
            )
        address = pubkey_from_bytes(feed.binary_id)
        logger.info("Trying direct account lookup for %s: %s", feed.symbol, address)

        try:
            account = self._client.get_account(address)
        except RpcError as exc:
            return BackendResult.transient(self._name, str(exc))

        if account is None:
            return BackendResult.not_found(self._name, f"account {address} not found")

        logger.info(
            "Found %s account: %d bytes, owner %s",
            feed.symbol, len(account.data), account.owner,
        )
        try:
            reading = decode(
                BackendKind.ONCHAIN,
                account.data,
                symbol=feed.symbol,
                source_id=self._name,
                feed_id=feed.hex_id,
            )
        except DecodeError as exc:
            return BackendResult.malformed(self._name, f"account {address}: {exc}")
        return BackendResult.success(self._name, reading)
