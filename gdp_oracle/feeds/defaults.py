"""
Default backend registry configuration.

Registers built-in backends and builds the resolver from config.yaml settings.
To add a new backend, register it here and add it to the priority list.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from .. import config
from .aggregator.hermes import HermesAggregatorBackend
from .onchain.fallback import FallbackChainBackend
from .onchain.primary import PrimaryChainBackend
from .registry import BackendRegistry
from .resolver import FeedResolver
from .rpc import SolanaRpcClient

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY = list(config.DEFAULT_BACKEND_PRIORITY)


def create_default_registry(cfg: Optional[dict] = None) -> BackendRegistry:
    """Create a registry with all built-in backends bound to the configured endpoints."""
    cfg = cfg or config.get_config()
    timeout_s = config.rpc_timeout_s(cfg)
    registry = BackendRegistry()
    registry.register(
        "primary",
        lambda: PrimaryChainBackend(SolanaRpcClient(config.primary_rpc_url(cfg), timeout_s)),
    )
    registry.register(
        "fallback",
        lambda: FallbackChainBackend(
            SolanaRpcClient(config.fallback_rpc_url(cfg), timeout_s),
            candidate_accounts=config.fallback_candidate_accounts(cfg),
            attempt_timeout_s=config.fallback_attempt_timeout_s(cfg),
        ),
    )
    registry.register(
        "aggregator",
        lambda: HermesAggregatorBackend(
            config.aggregator_base_url(cfg),
            config.aggregator_timeout_s(cfg),
        ),
    )
    return registry


def create_resolver(
    registry: Optional[BackendRegistry] = None,
    priority: Optional[List[str]] = None,
    cfg: Optional[dict] = None,
) -> FeedResolver:
    """Build the feed resolver from the configured backend priority."""
    cfg = cfg or config.get_config()
    reg = registry or create_default_registry(cfg)
    order = priority or config.backend_priority(cfg) or DEFAULT_PRIORITY
    backends = reg.build_chain(order)
    if not backends:
        raise ValueError(f"No known backends in priority list {order}; available: {reg.names}")
    logger.info("Feed backend priority: %s", " -> ".join(b.name for b in backends))
    return FeedResolver(backends, max_workers=config.batch_max_workers(cfg))
