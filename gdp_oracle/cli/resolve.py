"""
Resolve feeds once and print the response envelope as JSON.
Use: gdp-oracle-resolve [SYMBOL ...] [--all] [--backends primary,aggregator]
Exit code 1 when resolution fails.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import List, Optional

from .. import config
from ..catalog import FeedCatalog
from ..core.errors import BatchResolutionError
from ..feeds.base import Reading
from ..feeds.defaults import create_resolver
from ..feeds.resolver import FeedResolver
from ..presentation import Envelope
from .serve import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Resolve GDP feeds through the backend chain")
    parser.add_argument("symbols", nargs="*", help="Catalog symbols (default: the headline feed)")
    parser.add_argument("--all", action="store_true", help="Resolve the whole catalog")
    parser.add_argument("--backends", default=None, help="Comma-separated backend priority override")
    parser.add_argument("--workers", type=int, default=None, help="Batch worker pool size")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    return parser


def run(
    args: argparse.Namespace,
    resolver: FeedResolver,
    catalog: FeedCatalog,
) -> Envelope:
    if args.all:
        try:
            return Envelope.ok(resolver.resolve_batch(catalog, max_workers=args.workers))
        except BatchResolutionError as exc:
            return Envelope.fail(str(exc))

    try:
        feeds = [catalog.by_symbol(s) for s in args.symbols] if args.symbols else [catalog.primary]
    except KeyError as exc:
        return Envelope.fail(str(exc.args[0]))

    if len(feeds) == 1:
        outcome = resolver.resolve_one(feeds[0])
        if isinstance(outcome, Reading):
            return Envelope.ok(outcome)
        return Envelope.fail(str(outcome.to_error()))
    try:
        return Envelope.ok(resolver.resolve_batch(feeds, max_workers=args.workers))
    except BatchResolutionError as exc:
        return Envelope.fail(str(exc))


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    cfg = config.get_config()
    priority = [b.strip() for b in args.backends.split(",") if b.strip()] if args.backends else None
    resolver = create_resolver(priority=priority, cfg=cfg)
    catalog = FeedCatalog.from_config(config.catalog_entries(cfg))

    envelope = run(args, resolver, catalog)
    json.dump(envelope.to_dict(), sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0 if envelope.success else 1


if __name__ == "__main__":
    raise SystemExit(main())
