"""
GDP feed REST API using FastAPI. No secrets, no auth.
Every JSON route answers HTTP 200 with the {success, data, error, timestamp} envelope,
including resolution failures.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse

from . import __version__, config
from .catalog import FeedCatalog
from .core.errors import BatchResolutionError, RpcError
from .diagnostics import check_programs, network_status
from .feeds.base import Reading
from .feeds.defaults import create_resolver
from .feeds.resolver import FeedResolver
from .feeds.rpc import SolanaRpcClient
from .presentation import Envelope

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"

_FALLBACK_DASHBOARD = """<!DOCTYPE html>
<html><head><title>GDP Dashboard</title></head>
<body><h1>GDP Dashboard</h1><p>Static files not found. API available at /gdp and /gdp/all</p></body>
</html>"""


def _dashboard_html(static_dir: Path) -> str:
    index = static_dir / "index.html"
    try:
        return index.read_text(encoding="utf-8")
    except OSError:
        return _FALLBACK_DASHBOARD


def create_app(
    resolver: Optional[FeedResolver] = None,
    catalog: Optional[FeedCatalog] = None,
    status_client: Optional[SolanaRpcClient] = None,
    cfg: Optional[dict] = None,
    static_dir: Optional[Path] = None,
) -> FastAPI:
    """Create the API. Settings and catalog are loaded once here and shared read-only."""
    cfg = cfg or config.get_config()
    app = FastAPI(title="GDP Oracle API", version=__version__)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.resolver = resolver or create_resolver(cfg=cfg)
    app.state.catalog = catalog or FeedCatalog.from_config(config.catalog_entries(cfg))
    app.state.status_client = status_client or SolanaRpcClient(
        config.primary_rpc_url(cfg), config.rpc_timeout_s(cfg)
    )
    app.state.static_dir = static_dir or STATIC_DIR

    @app.get("/health")
    def health() -> Dict[str, Any]:
        return Envelope.ok(f"GDP Oracle API {__version__} running").to_dict()

    @app.get("/gdp")
    def us_gdp(request: Request) -> Dict[str, Any]:
        state = request.app.state
        outcome = state.resolver.resolve_one(state.catalog.primary)
        if isinstance(outcome, Reading):
            logger.info(
                "GDP data: %.2f (+/-%.2f) from %s",
                outcome.value, outcome.uncertainty, outcome.source_id,
            )
            return Envelope.ok(outcome).to_dict()
        return Envelope.fail(f"Failed to fetch US GDP: {outcome.to_error()}").to_dict()

    @app.get("/gdp/all")
    def all_gdp(request: Request) -> Dict[str, Any]:
        state = request.app.state
        try:
            readings = state.resolver.resolve_batch(state.catalog)
        except BatchResolutionError as exc:
            logger.error("Failed to fetch all GDP feeds: %s", exc)
            return Envelope.fail(f"Failed to fetch all GDP feeds: {exc}").to_dict()
        logger.info("Fetched %d of %d GDP feeds", len(readings), len(state.catalog))
        return Envelope.ok(readings).to_dict()

    @app.get("/gdp/{symbol}")
    def gdp_by_symbol(symbol: str, request: Request) -> Dict[str, Any]:
        state = request.app.state
        try:
            feed = state.catalog.by_symbol(symbol)
        except KeyError:
            return Envelope.fail(f"Unknown feed symbol: {symbol}").to_dict()
        outcome = state.resolver.resolve_one(feed)
        if isinstance(outcome, Reading):
            return Envelope.ok(outcome).to_dict()
        return Envelope.fail(str(outcome.to_error())).to_dict()

    @app.get("/feeds")
    def feeds(request: Request) -> Dict[str, Any]:
        catalog = request.app.state.catalog
        return Envelope.ok(
            [{"feed_id": f.hex_id, "symbol": f.symbol} for f in catalog]
        ).to_dict()

    @app.get("/sonic/status")
    def sonic_status(request: Request) -> Dict[str, Any]:
        try:
            info = network_status(request.app.state.status_client)
        except RpcError as exc:
            logger.error("Sonic RPC connection failed: %s", exc)
            return Envelope.fail(f"Sonic RPC connection failed: {exc}").to_dict()
        return Envelope.ok(info).to_dict()

    @app.get("/sonic/programs")
    def sonic_programs(request: Request) -> Dict[str, Any]:
        state = request.app.state
        return Envelope.ok(
            check_programs(state.status_client, state.catalog.primary.hex_id)
        ).to_dict()

    @app.get("/", response_class=HTMLResponse)
    @app.get("/dashboard", response_class=HTMLResponse)
    def dashboard(request: Request) -> str:
        return _dashboard_html(request.app.state.static_dir)

    return app
