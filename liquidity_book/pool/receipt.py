"""Liquidity receipts: proof of deposit for liquidity providers."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field

from liquidity_book.pool.types import BinContribution


def new_receipt_id() -> str:
    return uuid.uuid4().hex


@dataclass
class LiquidityReceipt:
    """Record of one deposit into a pool.

    Maps each bin the deposit touched to what was contributed there. A
    receipt is redeemable exactly once, at the pool that issued it, for its
    principal plus the fees its bins collected after ``deposited_at_ms``.
    """

    depositor: str
    pool_id: str
    deposited_at_ms: int
    contributions: dict[int, BinContribution]
    receipt_id: str = field(default_factory=new_receipt_id)
    redeemed: bool = False

    @property
    def bin_ids(self) -> list[int]:
        return sorted(self.contributions)

    @property
    def total_left(self) -> int:
        return sum(c.left for c in self.contributions.values())

    @property
    def total_right(self) -> int:
        return sum(c.right for c in self.contributions.values())

    @property
    def total_value(self) -> int:
        return sum(c.value for c in self.contributions.values())
