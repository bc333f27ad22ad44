"""
Fallback on-chain backend (Solana mainnet).

Walks a short fixed list of candidate accounts. The candidates are not derived
from the feed id, so whichever candidate decodes first answers for any feed.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from ...core.errors import DecodeError, InvalidIdentifier, RpcError
from ..base import BackendKind, BackendResult, FeedId
from ..decoder import decode
from ..rpc import SolanaRpcClient

logger = logging.getLogger(__name__)

SOLANA_RPC_URL = "https://api.mainnet-beta.solana.com"
DEFAULT_CANDIDATE_ACCOUNTS = (
    "48mYDzV1JWZo93cheTbg9ikvp3PScDvoTAkWFMWtmmc9",
    "H6ARHf6YXhGYeQfUzQNGk6rDNnLBQKrenN712K4AQJEG",
)
DEFAULT_ATTEMPT_TIMEOUT_S = 5.0


class FallbackChainBackend:
    """Try each candidate account on the secondary network until one decodes."""

    def __init__(
        self,
        client: Optional[SolanaRpcClient] = None,
        candidate_accounts: Optional[Sequence[str]] = None,
        attempt_timeout_s: float = DEFAULT_ATTEMPT_TIMEOUT_S,
        *,
        name: str = "fallback",
    ) -> None:
        self._client = client or SolanaRpcClient(SOLANA_RPC_URL)
        self._candidates = tuple(candidate_accounts or DEFAULT_CANDIDATE_ACCOUNTS)
        self._attempt_timeout_s = attempt_timeout_s
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    @property
    def candidate_accounts(self) -> tuple[str, ...]:
        return self._candidates

    def fetch(self, feed: FeedId) -> BackendResult:
        errors: List[str] = []
        for address in self._candidates:
            logger.info("Trying fallback account %s for %s", address, feed.symbol)
            try:
                account = self._client.get_account(address, timeout_s=self._attempt_timeout_s)
            except InvalidIdentifier as exc:
                logger.warning("Invalid account format %s: %s", address, exc)
                errors.append(f"{address}: invalid address")
                continue
            except RpcError as exc:
                logger.info("Account %s not reachable: %s", address, exc)
                errors.append(f"{address}: {exc}")
                continue

            if account is None:
                errors.append(f"{address}: not found")
                continue

            try:
                reading = decode(
                    BackendKind.ONCHAIN,
                    account.data,
                    symbol=feed.symbol,
                    source_id=self._name,
                    feed_id=address,
                )
            except DecodeError as exc:
                logger.warning("Account %s exists but is not a price record: %s", address, exc)
                errors.append(f"{address}: {exc}")
                continue
            return BackendResult.success(self._name, reading)

        detail = "; ".join(errors) if errors else "no candidate accounts configured"
        return BackendResult.not_found(self._name, f"no candidate account decoded ({detail})")
