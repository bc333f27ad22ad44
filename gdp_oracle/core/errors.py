"""
Shared exception types for gdp_oracle.
Stable surface; extend only.
"""

from __future__ import annotations

from typing import List


class GdpOracleError(Exception):
    """Base exception for gdp_oracle; catch this for any package-raised error."""

    pass


class InvalidIdentifier(GdpOracleError, ValueError):
    """Feed identifier is not a 32-byte hex id. Never sent over the network."""

    pass


class DecodeError(GdpOracleError, ValueError):
    """Backend payload does not match the expected layout or schema."""

    pass


class RpcError(GdpOracleError):
    """JSON-RPC call failed: transport error, non-2xx status, or an error object."""

    def __init__(self, message: str, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


class ResolutionError(GdpOracleError):
    """Every backend in the chain failed for one feed."""

    def __init__(self, symbol: str, reasons: List[str]) -> None:
        self.symbol = symbol
        self.reasons = list(reasons)
        super().__init__(
            f"Failed to fetch {symbol} from all sources: {'; '.join(self.reasons)}"
        )


class BatchResolutionError(GdpOracleError):
    """No catalog entry could be resolved."""

    pass


__all__ = [
    "BatchResolutionError",
    "DecodeError",
    "GdpOracleError",
    "InvalidIdentifier",
    "ResolutionError",
    "RpcError",
]
