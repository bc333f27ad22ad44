"""
Primary network diagnostics: RPC version and presence of the Pyth programs.
Diagnostic only; not part of feed resolution.
"""
from __future__ import annotations

import logging
from typing import Any, Dict

from .core.errors import InvalidIdentifier, RpcError
from .feeds.rpc import SolanaRpcClient

logger = logging.getLogger(__name__)

NETWORK_NAME = "Sonic SVM Mainnet Alpha"
PYTH_RECEIVER = "rec5EKMGg6MxZYaMdyBfgwp4d5rB9T1VQH5pJv5LtFJ"
PYTH_PRICE_FEED = "pythWSnswVUd12oZpeFP8e9CVaEqJg25g1Vtc2biRsT"
WELL_KNOWN_PROGRAMS = {
    "pyth_receiver": PYTH_RECEIVER,
    "pyth_price_feed": PYTH_PRICE_FEED,
}


def network_status(client: SolanaRpcClient) -> Dict[str, Any]:
    """Version info for the primary network. Raises RpcError when unreachable."""
    version = client.get_version()
    return {
        "network": NETWORK_NAME,
        "rpc_endpoint": client.url,
        "solana_core_version": version.get("solana-core"),
        "feature_set": version.get("feature-set"),
        "status": "connected",
    }


def check_program(client: SolanaRpcClient, address: str) -> Dict[str, Any]:
    """Presence and metadata for one program account; never raises."""
    try:
        account = client.get_account(address)
    except InvalidIdentifier as exc:
        return {"address": address, "status": "INVALID ADDRESS", "error": str(exc)}
    except RpcError as exc:
        logger.warning("Program lookup failed for %s: %s", address, exc)
        return {"address": address, "status": "ERROR", "error": str(exc)}

    if account is None:
        logger.warning("Program %s not found", address)
        return {"address": address, "status": "NOT FOUND"}
    logger.info("Program %s found", address)
    return {"address": address, "status": "DEPLOYED", **account.summary()}


def check_programs(client: SolanaRpcClient, primary_feed_id: str = "") -> Dict[str, Any]:
    programs = {key: check_program(client, address) for key, address in WELL_KNOWN_PROGRAMS.items()}
    return {
        "network": NETWORK_NAME,
        "rpc_endpoint": client.url,
        "pyth_programs": programs,
        "gdp_feed_id": primary_feed_id,
    }
