#!/usr/bin/env python3
"""
Resolve GDP feeds once and print the envelope.
Usage: python cli/resolve.py [SYMBOL ...] [--all] [--backends primary,aggregator]
"""

from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from gdp_oracle.cli.resolve import main  # noqa: E402

if __name__ == "__main__":
    raise SystemExit(main())
