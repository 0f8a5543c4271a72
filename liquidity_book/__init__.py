"""Liquidity Book - discretized-liquidity AMM pools."""

from liquidity_book.pool import (
    LiquidityReceipt,
    Pool,
    PoolRegistry,
    Side,
    SwapResult,
    Withdrawal,
)

__version__ = "0.1.0"
__all__ = [
    "LiquidityReceipt",
    "Pool",
    "PoolRegistry",
    "Side",
    "SwapResult",
    "Withdrawal",
    "__version__",
]
