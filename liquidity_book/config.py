"""Configuration for pools and the HTTP service."""

from __future__ import annotations

import os
from dataclasses import dataclass

from liquidity_book.constants import DEFAULT_MAX_BINS_PER_SWAP


@dataclass(frozen=True)
class PoolConfig:
    """Default parameters for newly created pools.

    Attributes:
        bin_step_bps: Price increase between adjacent bins (25 = 0.25%)
        fee_bps: Swap fee charged on input (30 = 0.3%)
        max_bins_per_swap: Upper bound on bins a single swap may cross
    """

    bin_step_bps: int = 25
    fee_bps: int = 30
    max_bins_per_swap: int = DEFAULT_MAX_BINS_PER_SWAP


DEFAULT_POOL_CONFIG = PoolConfig()


def _env_bool(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class ServiceSettings:
    """HTTP service settings.

    Read from environment variables by ``from_env``:
    - LB_HOST: Host to bind to (default: 0.0.0.0)
    - LB_PORT: Port to bind to (default: 8000)
    - LB_DEBUG: Enable debug/reload mode (default: false)
    - LB_LOG_LEVEL: Minimum log level (default: INFO)
    """

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> ServiceSettings:
        return cls(
            host=os.environ.get("LB_HOST", "0.0.0.0"),
            port=int(os.environ.get("LB_PORT", "8000")),
            debug=_env_bool("LB_DEBUG"),
            log_level=os.environ.get("LB_LOG_LEVEL", "INFO").upper(),
        )
