"""
Top-level public API surface. Stable facades only.
Canonical entrypoint: import gdp_oracle; use gdp_oracle.feeds, gdp_oracle.catalog, etc.
Does not import the API app or cli.
"""

from __future__ import annotations

from . import catalog, core, feeds, presentation
from ._version import __version__

# Do not add exports without updating __all__.
__all__ = [
    "__version__",
    "catalog",
    "core",
    "feeds",
    "presentation",
]
