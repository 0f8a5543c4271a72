"""Price bins: constant-price sub-ledgers of a liquidity book pool."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from liquidity_book.math import value_in_right
from liquidity_book.pool.types import Side
from liquidity_book.safe_int import S


@dataclass
class FeeEvent:
    """A fee collected by a bin during one swap.

    ``total_value`` is the bin's liquidity when the fee was collected; every
    contribution live at that moment owns ``value / total_value`` of the fee.
    ``remaining_amount`` and ``remaining_base`` shrink as contributions claim
    their share, so the last claimant receives any rounding dust.
    """

    side: Side
    amount: int
    timestamp_ms: int
    total_value: int
    remaining_amount: int
    remaining_base: int

    @property
    def exhausted(self) -> bool:
        return self.remaining_base == 0 or self.remaining_amount == 0

    def claim(self, value: int) -> int:
        """Take the share owned by a contribution worth ``value``."""
        if self.exhausted or value <= 0:
            return 0
        if value >= self.remaining_base:
            share = self.remaining_amount
            self.remaining_base = 0
        else:
            share = (S(self.remaining_amount) * S(value) // S(self.remaining_base)).value
            self.remaining_base -= value
        self.remaining_amount -= share
        return share


@dataclass
class Bin:
    """A single price level.

    Holds the left and right balances traded at ``price`` plus the fee log.
    ``liquidity`` is the sum of the values of all contributions that have not
    been withdrawn yet, in right-token units.
    """

    bin_id: int
    price: int
    left: int = 0
    right: int = 0
    liquidity: int = 0
    fee_log: list[FeeEvent] = field(default_factory=list)

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "price" and "price" in self.__dict__:
            raise AttributeError(f"Price of bin {self.bin_id} is immutable")
        super().__setattr__(name, value)

    def balance(self, side: Side) -> int:
        return self.left if side is Side.LEFT else self.right

    def credit(self, side: Side, amount: int) -> None:
        if side is Side.LEFT:
            self.left = (S(self.left) + amount).to_u64()
        else:
            self.right = (S(self.right) + amount).to_u64()

    def debit(self, side: Side, amount: int) -> None:
        if side is Side.LEFT:
            self.left = (S(self.left) - amount).value
        else:
            self.right = (S(self.right) - amount).value

    @property
    def value(self) -> int:
        """Current balances expressed in right-token units."""
        return value_in_right(self.left, self.right, self.price)

    @property
    def is_empty(self) -> bool:
        return self.left == 0 and self.right == 0

    @property
    def holds_both(self) -> bool:
        return self.left > 0 and self.right > 0

    def record_fee(self, side: Side, amount: int, timestamp_ms: int) -> bool:
        """Log a fee collected by this bin.

        Returns False when nothing was logged: either the fee is zero or there
        is no live liquidity to credit it to.
        """
        if amount <= 0 or self.liquidity == 0:
            return False
        self.fee_log.append(
            FeeEvent(
                side=side,
                amount=amount,
                timestamp_ms=timestamp_ms,
                total_value=self.liquidity,
                remaining_amount=amount,
                remaining_base=self.liquidity,
            )
        )
        return True

    def claim_fees(self, value: int, deposited_at_ms: int) -> tuple[int, int]:
        """Claim the fees owed to a contribution worth ``value``.

        Only events logged strictly after ``deposited_at_ms`` pay out.
        Exhausted events are dropped from the log.

        Returns:
            Tuple of (left_fees, right_fees)
        """
        fee_left = 0
        fee_right = 0
        for event in self.fee_log:
            if event.timestamp_ms <= deposited_at_ms:
                continue
            share = event.claim(value)
            if event.side is Side.LEFT:
                fee_left += share
            else:
                fee_right += share

        self.fee_log = [event for event in self.fee_log if not event.exhausted]
        return fee_left, fee_right

    def unclaimed_fees(self, side: Side) -> int:
        return sum(e.remaining_amount for e in self.fee_log if e.side is side)

    def snapshot(self) -> BinSnapshot:
        return BinSnapshot(
            bin_id=self.bin_id,
            price=self.price,
            left=self.left,
            right=self.right,
            liquidity=self.liquidity,
            unclaimed_fee_left=self.unclaimed_fees(Side.LEFT),
            unclaimed_fee_right=self.unclaimed_fees(Side.RIGHT),
            fee_events=len(self.fee_log),
        )


@dataclass(frozen=True)
class BinSnapshot:
    """Read-only view of a bin for reporting."""

    bin_id: int
    price: int
    left: int
    right: int
    liquidity: int
    unclaimed_fee_left: int
    unclaimed_fee_right: int
    fee_events: int
