"""
Stable facade: shared exception types. Do not add exports without updating __all__.
"""

from __future__ import annotations

from .errors import (
    BatchResolutionError,
    DecodeError,
    GdpOracleError,
    InvalidIdentifier,
    ResolutionError,
    RpcError,
)

# Do not add exports without updating __all__.
__all__ = [
    "BatchResolutionError",
    "DecodeError",
    "GdpOracleError",
    "InvalidIdentifier",
    "ResolutionError",
    "RpcError",
]
