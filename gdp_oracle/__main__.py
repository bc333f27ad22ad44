"""Allow python -m gdp_oracle to print help."""
from __future__ import annotations

from . import __version__

_HELP = f"""\
gdp-oracle {__version__}

Available commands (run from repo root):
  python cli/api.py [--port 3000]          Serve the GDP API and dashboard (FastAPI + uvicorn)
  python cli/resolve.py ECO.US.GDP         Resolve one feed and print the envelope
  python cli/resolve.py --all              Resolve the whole catalog
  python -m pytest -q                      Run test suite

Endpoints:
  /gdp  /gdp/all  /sonic/status  /sonic/programs  /health  /dashboard

Installed as package:
  gdp-oracle                               This help message
  gdp-oracle-api                           Serve the API
"""


def main() -> int:
    print(_HELP)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
