"""
Serve the GDP API and dashboard with uvicorn.
Use: gdp-oracle-api [--host 0.0.0.0] [--port 3000]
"""

from __future__ import annotations

import argparse
import logging
from typing import List, Optional

import uvicorn

from .. import config

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


def build_parser() -> argparse.ArgumentParser:
    cfg = config.get_config()
    parser = argparse.ArgumentParser(description="Serve the GDP oracle API")
    parser.add_argument("--host", default=config.server_host(cfg), help="Bind address (default: %(default)s)")
    parser.add_argument("--port", type=int, default=config.server_port(cfg), help="Port (default: %(default)s)")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload for development")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    cfg = config.get_config()
    logger.info("Starting GDP oracle on %s:%d", args.host, args.port)
    logger.info("Primary RPC: %s", config.primary_rpc_url(cfg))
    logger.info("Backend priority: %s", " -> ".join(config.backend_priority(cfg)))
    logger.info("Dashboard UI: http://localhost:%d/", args.port)

    uvicorn.run(
        "gdp_oracle.api:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level.lower(),
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
