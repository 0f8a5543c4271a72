"""Liquidity book pools, bins and receipts."""

from liquidity_book.pool.bin import Bin, BinSnapshot, FeeEvent
from liquidity_book.pool.pool import Pool, PoolSnapshot
from liquidity_book.pool.receipt import LiquidityReceipt
from liquidity_book.pool.registry import PoolRegistry
from liquidity_book.pool.types import (
    BinContribution,
    BinPayout,
    Side,
    SwapResult,
    SwapStep,
    Withdrawal,
)

__all__ = [
    # Bins
    "Bin",
    "BinSnapshot",
    "FeeEvent",
    # Pools
    "Pool",
    "PoolSnapshot",
    "PoolRegistry",
    # Receipts
    "LiquidityReceipt",
    "BinContribution",
    # Results
    "Side",
    "SwapResult",
    "SwapStep",
    "BinPayout",
    "Withdrawal",
]
