"""Value types shared by the pool components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Side(str, Enum):
    """One of the two tokens of a pool."""

    LEFT = "left"
    RIGHT = "right"

    @property
    def opposite(self) -> Side:
        return Side.RIGHT if self is Side.LEFT else Side.LEFT


@dataclass(frozen=True)
class BinContribution:
    """Amounts a depositor put into one bin.

    ``value`` is the contribution expressed in right-token units at the bin
    price, fixed at deposit time. It is the depositor's claim on the bin.
    """

    left: int
    right: int
    value: int


@dataclass(frozen=True)
class SwapStep:
    """Portion of a swap settled inside a single bin."""

    bin_id: int
    amount_in: int
    fee: int
    amount_out: int
    drained: bool = False


@dataclass(frozen=True)
class SwapResult:
    """Outcome of a swap (or a quote for one)."""

    pool_id: str
    side_in: Side
    amount_in: int
    amount_out: int
    fee: int
    steps: tuple[SwapStep, ...]
    active_bin_before: int
    active_bin_after: int

    @property
    def side_out(self) -> Side:
        return self.side_in.opposite

    @property
    def bins_crossed(self) -> int:
        return abs(self.active_bin_after - self.active_bin_before)


@dataclass(frozen=True)
class BinPayout:
    """What one bin paid out to a redeemed receipt."""

    bin_id: int
    principal_left: int
    principal_right: int
    fee_left: int
    fee_right: int


@dataclass(frozen=True)
class Withdrawal:
    """Result of redeeming a liquidity receipt."""

    receipt_id: str
    pool_id: str
    depositor: str
    payouts: tuple[BinPayout, ...] = field(default_factory=tuple)

    @property
    def principal_left(self) -> int:
        return sum(p.principal_left for p in self.payouts)

    @property
    def principal_right(self) -> int:
        return sum(p.principal_right for p in self.payouts)

    @property
    def fee_left(self) -> int:
        return sum(p.fee_left for p in self.payouts)

    @property
    def fee_right(self) -> int:
        return sum(p.fee_right for p in self.payouts)

    @property
    def total_left(self) -> int:
        return self.principal_left + self.fee_left

    @property
    def total_right(self) -> int:
        return self.principal_right + self.fee_right
