#!/usr/bin/env python3
"""
Launch the GDP oracle API server.
Usage: python cli/api.py [--host 0.0.0.0] [--port 3000]
"""

from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from gdp_oracle.cli.serve import main  # noqa: E402

if __name__ == "__main__":
    raise SystemExit(main())
