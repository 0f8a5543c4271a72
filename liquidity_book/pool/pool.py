"""Liquidity book pool.

A pool owns a contiguous run of price bins and a pointer to the active bin.
Bins below the active bin hold only the right token, bins above it hold only
the left token, and the active bin may hold both. Swaps walk the bins from the
active one outwards, draining each bin in turn until the input is consumed.

Selling the left token pulls right token out of the active bin and moves the
pointer to lower prices; selling the right token does the opposite.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

import structlog

from liquidity_book.clock import Clock, SystemClock
from liquidity_book.config import DEFAULT_POOL_CONFIG, PoolConfig
from liquidity_book.constants import INITIAL_BIN_ID, MAX_BIN_STEP_BPS, MAX_FEE_BPS
from liquidity_book.errors import (
    BinNotFound,
    InsufficientLiquidity,
    InvalidAmount,
    InvalidBinStep,
    InvalidDeposit,
    InvalidFee,
    InvalidPrice,
    InvariantViolation,
    NonContiguousBins,
    PoolMismatch,
    ReceiptAlreadyRedeemed,
    SlippageExceeded,
    TooManyBinsCrossed,
    UnknownReceipt,
)
from liquidity_book.math import (
    bin_price,
    fee_on,
    left_to_right,
    left_to_right_up,
    right_to_left,
    right_to_left_up,
    value_in_right,
)
from liquidity_book.pool.bin import Bin, BinSnapshot
from liquidity_book.pool.receipt import LiquidityReceipt
from liquidity_book.pool.types import (
    BinContribution,
    BinPayout,
    Side,
    SwapResult,
    SwapStep,
    Withdrawal,
)
from liquidity_book.safe_int import S, SafeIntError, checked_u64

logger = structlog.get_logger()

# (left, right) amounts per bin id
Deposits = Mapping[int, tuple[int, int]]


@dataclass(frozen=True)
class PoolSnapshot:
    """Read-only view of a pool for reporting."""

    pool_id: str
    left_token: str
    right_token: str
    bin_step_bps: int
    fee_bps: int
    active_bin_id: int
    active_price: int
    reserve_left: int
    reserve_right: int
    unallocated_fee_left: int
    unallocated_fee_right: int
    bins: tuple[BinSnapshot, ...]


class Pool:
    """A liquidity book pool for one token pair.

    Args:
        pool_id: Identifier of the pool
        initial_price: Fixed-point price of the initial bin (PRICE_SCALE = 1.0)
        bin_step_bps: Price increase between adjacent bins, in basis points
        fee_bps: Swap fee on input, in basis points
        left_token: Label of the left (base) token
        right_token: Label of the right (quote) token
        max_bins_per_swap: Upper bound on bins a single swap may cross
        clock: Time source for deposit and fee timestamps
    """

    def __init__(
        self,
        pool_id: str,
        initial_price: int,
        bin_step_bps: int,
        fee_bps: int,
        *,
        left_token: str = "left",
        right_token: str = "right",
        max_bins_per_swap: int = DEFAULT_POOL_CONFIG.max_bins_per_swap,
        clock: Clock | None = None,
    ) -> None:
        if not 0 < bin_step_bps <= MAX_BIN_STEP_BPS:
            raise InvalidBinStep(f"Bin step must be in (0, {MAX_BIN_STEP_BPS}] bps: {bin_step_bps}")
        if not 0 <= fee_bps <= MAX_FEE_BPS:
            raise InvalidFee(f"Fee must be in [0, {MAX_FEE_BPS}] bps: {fee_bps}")
        if initial_price <= 0:
            raise InvalidPrice(f"Initial price must be positive: {initial_price}")
        if max_bins_per_swap <= 0:
            raise ValueError(f"max_bins_per_swap must be positive: {max_bins_per_swap}")

        self.pool_id = pool_id
        self.left_token = left_token
        self.right_token = right_token
        self.initial_price = initial_price
        self.bin_step_bps = bin_step_bps
        self.fee_bps = fee_bps
        self.max_bins_per_swap = max_bins_per_swap
        self.clock: Clock = clock or SystemClock()

        self._bins: dict[int, Bin] = {INITIAL_BIN_ID: Bin(INITIAL_BIN_ID, initial_price)}
        self.active_bin_id = INITIAL_BIN_ID
        self._receipts: dict[str, LiquidityReceipt] = {}
        self._redeemed: set[str] = set()
        # Fees collected by bins without live liquidity to credit them to
        self.unallocated_fees: dict[Side, int] = {Side.LEFT: 0, Side.RIGHT: 0}

    @classmethod
    def create(
        cls,
        pool_id: str,
        initial_price: int,
        bin_step_bps: int | None = None,
        fee_bps: int | None = None,
        *,
        config: PoolConfig = DEFAULT_POOL_CONFIG,
        left_token: str = "left",
        right_token: str = "right",
        clock: Clock | None = None,
    ) -> Pool:
        """Create a pool, taking unset parameters from ``config``."""
        if bin_step_bps is None:
            bin_step_bps = config.bin_step_bps
        if fee_bps is None:
            fee_bps = config.fee_bps
        pool = cls(
            pool_id,
            initial_price,
            bin_step_bps,
            fee_bps,
            left_token=left_token,
            right_token=right_token,
            max_bins_per_swap=config.max_bins_per_swap,
            clock=clock,
        )
        logger.info(
            "pool_created",
            pool_id=pool_id,
            initial_price=initial_price,
            bin_step_bps=bin_step_bps,
            fee_bps=fee_bps,
        )
        return pool

    # --- Bins ---

    @property
    def bins(self) -> list[Bin]:
        """Bins ordered by id (ascending price)."""
        return [self._bins[bin_id] for bin_id in sorted(self._bins)]

    @property
    def active_bin(self) -> Bin:
        return self._bins[self.active_bin_id]

    def has_bin(self, bin_id: int) -> bool:
        return bin_id in self._bins

    def get_bin(self, bin_id: int) -> Bin:
        try:
            return self._bins[bin_id]
        except KeyError:
            raise BinNotFound(f"Pool {self.pool_id} has no bin {bin_id}") from None

    def price_of(self, bin_id: int) -> int:
        """Fixed-point price of ``bin_id``, whether or not the bin exists."""
        return bin_price(self.initial_price, self.bin_step_bps, bin_id - INITIAL_BIN_ID)

    @property
    def reserves(self) -> tuple[int, int]:
        """Total (left, right) balances held by the bins."""
        return (
            sum(b.left for b in self._bins.values()),
            sum(b.right for b in self._bins.values()),
        )

    # --- Liquidity ---

    def uniform_deposits(
        self,
        amount_left: int,
        amount_right: int,
        bins_each_side: int,
    ) -> dict[int, tuple[int, int]]:
        """Spread a deposit evenly around the active bin.

        Left token goes to the active bin and the ``bins_each_side`` bins above
        it; right token goes to the active bin and the bins below it. Division
        remainders land in the active bin.
        """
        if bins_each_side < 0:
            raise ValueError(f"bins_each_side cannot be negative: {bins_each_side}")

        active = self.active_bin_id
        width = bins_each_side + 1
        left_each, left_rem = divmod(amount_left, width)
        right_each, right_rem = divmod(amount_right, width)

        deposits: dict[int, tuple[int, int]] = {
            active: (left_each + left_rem, right_each + right_rem)
        }
        for offset in range(1, width):
            if left_each:
                deposits[active + offset] = (left_each, 0)
            if right_each:
                deposits[active - offset] = (0, right_each)
        return deposits

    def add_liquidity(self, depositor: str, deposits: Deposits) -> LiquidityReceipt:
        """Deposit tokens into one or more bins.

        Args:
            depositor: Owner of the resulting receipt
            deposits: Mapping of bin id to (left, right) amounts

        Returns:
            Receipt recording what was contributed to each bin

        Raises:
            InvalidAmount: Empty deposit, negative or oversized amounts, or a
                bin contribution too small to carry any value
            InvalidDeposit: A token on the wrong side of the active bin
            NonContiguousBins: New bins would leave a gap in the bin range
        """
        entries = {bin_id: amounts for bin_id, amounts in deposits.items() if any(amounts)}
        if not entries:
            raise InvalidAmount("Deposit must contain a positive amount")

        all_ids = set(self._bins) | set(entries)
        if max(all_ids) - min(all_ids) + 1 != len(all_ids):
            raise NonContiguousBins(
                f"Bins {sorted(set(entries) - set(self._bins))} would leave a gap in pool {self.pool_id}"
            )

        contributions: dict[int, BinContribution] = {}
        prices: dict[int, int] = {}
        for bin_id, (left, right) in sorted(entries.items()):
            try:
                checked_u64(left, "left amount")
                checked_u64(right, "right amount")
            except SafeIntError as err:
                raise InvalidAmount(str(err)) from err
            if bin_id < self.active_bin_id and left > 0:
                raise InvalidDeposit(f"Bin {bin_id} is below the active bin and only takes right token")
            if bin_id > self.active_bin_id and right > 0:
                raise InvalidDeposit(f"Bin {bin_id} is above the active bin and only takes left token")

            price = self._bins[bin_id].price if bin_id in self._bins else self.price_of(bin_id)
            value = value_in_right(left, right, price)
            if value == 0:
                raise InvalidAmount(f"Deposit into bin {bin_id} is worth nothing at its price")
            prices[bin_id] = price
            contributions[bin_id] = BinContribution(left=left, right=right, value=value)

        now = self.clock.now_ms()
        for bin_id, contribution in contributions.items():
            bin_ = self._bins.get(bin_id)
            if bin_ is None:
                bin_ = self._bins[bin_id] = Bin(bin_id, prices[bin_id])
            bin_.credit(Side.LEFT, contribution.left)
            bin_.credit(Side.RIGHT, contribution.right)
            bin_.liquidity += contribution.value

        receipt = LiquidityReceipt(
            depositor=depositor,
            pool_id=self.pool_id,
            deposited_at_ms=now,
            contributions=contributions,
        )
        self._receipts[receipt.receipt_id] = receipt

        logger.info(
            "liquidity_added",
            pool_id=self.pool_id,
            depositor=depositor,
            receipt_id=receipt.receipt_id,
            bins=len(contributions),
            amount_left=receipt.total_left,
            amount_right=receipt.total_right,
        )
        return receipt

    def get_receipt(self, receipt_id: str) -> LiquidityReceipt:
        if receipt_id in self._redeemed:
            raise ReceiptAlreadyRedeemed(f"Receipt {receipt_id} has already been redeemed")
        try:
            return self._receipts[receipt_id]
        except KeyError:
            raise UnknownReceipt(f"Pool {self.pool_id} has no outstanding receipt {receipt_id}") from None

    def receipts_for(self, depositor: str) -> list[LiquidityReceipt]:
        """Outstanding receipts owned by ``depositor``, oldest first."""
        return sorted(
            (r for r in self._receipts.values() if r.depositor == depositor),
            key=lambda r: r.deposited_at_ms,
        )

    def remove_liquidity(self, receipt: LiquidityReceipt) -> Withdrawal:
        """Redeem a receipt for its principal plus accrued fees.

        For each bin the receipt references, the recorded principal is paid
        back in the tokens that were deposited. When the bin no longer holds
        enough of one token (because swaps converted it), the shortfall is
        paid in the other token at the bin price. Fees come from the bin's
        fee log: every event logged after the deposit pays the receipt's
        share of that event's bin value.

        Raises:
            PoolMismatch: Receipt was issued by another pool
            ReceiptAlreadyRedeemed: Receipt was redeemed before
            UnknownReceipt: Receipt was never issued by this pool
        """
        if receipt.pool_id != self.pool_id:
            raise PoolMismatch(f"Receipt {receipt.receipt_id} belongs to pool {receipt.pool_id}, not {self.pool_id}")
        if receipt.redeemed:
            raise ReceiptAlreadyRedeemed(f"Receipt {receipt.receipt_id} has already been redeemed")
        issued = self.get_receipt(receipt.receipt_id)

        payouts = []
        for bin_id, contribution in sorted(issued.contributions.items()):
            bin_ = self._bins[bin_id]
            fee_left, fee_right = bin_.claim_fees(contribution.value, issued.deposited_at_ms)
            pay_left, pay_right = self._principal_payout(bin_, contribution)

            bin_.debit(Side.LEFT, pay_left)
            bin_.debit(Side.RIGHT, pay_right)
            bin_.liquidity = (S(bin_.liquidity) - contribution.value).value
            if bin_.liquidity == 0:
                self._release_stranded_fees(bin_)

            payouts.append(
                BinPayout(
                    bin_id=bin_id,
                    principal_left=pay_left,
                    principal_right=pay_right,
                    fee_left=fee_left,
                    fee_right=fee_right,
                )
            )

        del self._receipts[issued.receipt_id]
        self._redeemed.add(issued.receipt_id)
        issued.redeemed = True
        receipt.redeemed = True

        withdrawal = Withdrawal(
            receipt_id=issued.receipt_id,
            pool_id=self.pool_id,
            depositor=issued.depositor,
            payouts=tuple(payouts),
        )
        logger.info(
            "liquidity_removed",
            pool_id=self.pool_id,
            depositor=issued.depositor,
            receipt_id=issued.receipt_id,
            amount_left=withdrawal.total_left,
            amount_right=withdrawal.total_right,
            fee_left=withdrawal.fee_left,
            fee_right=withdrawal.fee_right,
        )
        return withdrawal

    @staticmethod
    def _principal_payout(bin_: Bin, contribution: BinContribution) -> tuple[int, int]:
        """Principal owed from ``bin_``, covering shortfalls with the other token."""
        pay_left = S(contribution.left).min(bin_.left)
        short_left = S(contribution.left) - pay_left
        owed_right = S(contribution.right) + left_to_right(short_left.value, bin_.price)

        pay_right = owed_right.min(bin_.right)
        short_right = owed_right.saturating_sub(pay_right)
        if short_right:
            spare_left = S(bin_.left).saturating_sub(pay_left)
            pay_left = pay_left + S(right_to_left(short_right.value, bin_.price)).min(spare_left)
        return pay_left.value, pay_right.value

    def _release_stranded_fees(self, bin_: Bin) -> None:
        # Nobody is left to claim what remains in the log
        for event in bin_.fee_log:
            self.unallocated_fees[event.side] += event.remaining_amount
        bin_.fee_log = []

    # --- Swaps ---

    def quote(self, side_in: Side, amount_in: int) -> SwapResult:
        """Simulate a swap without changing the pool."""
        return self._plan_swap(side_in, amount_in)

    def swap(self, side_in: Side, amount_in: int, min_amount_out: int = 0) -> SwapResult:
        """Sell ``amount_in`` of ``side_in`` for the other token.

        The pool is only modified when the whole swap succeeds.

        Raises:
            InvalidAmount: Non-positive or oversized input, or input too small
                to buy anything
            InsufficientLiquidity: Bins ran out before the input was consumed
            TooManyBinsCrossed: Swap would cross more than max_bins_per_swap
            SlippageExceeded: Output below ``min_amount_out``
        """
        try:
            result = self._plan_swap(side_in, amount_in)
        except InsufficientLiquidity:
            logger.warning(
                "swap_failed",
                pool_id=self.pool_id,
                side_in=side_in.value,
                amount_in=amount_in,
                reason="insufficient_liquidity",
            )
            raise
        if result.amount_out < min_amount_out:
            raise SlippageExceeded(f"Swap output {result.amount_out} is below the minimum {min_amount_out}")

        now = self.clock.now_ms()
        side_out = side_in.opposite
        for step in result.steps:
            bin_ = self._bins[step.bin_id]
            bin_.credit(side_in, step.amount_in - step.fee)
            bin_.debit(side_out, step.amount_out)
            if not bin_.record_fee(side_in, step.fee, now) and step.fee > 0:
                self.unallocated_fees[side_in] += step.fee
        self.active_bin_id = result.active_bin_after

        logger.info(
            "swap_executed",
            pool_id=self.pool_id,
            side_in=side_in.value,
            amount_in=result.amount_in,
            amount_out=result.amount_out,
            fee=result.fee,
            bins_crossed=result.bins_crossed,
            active_bin_id=self.active_bin_id,
        )
        return result

    def _plan_swap(self, side_in: Side, amount_in: int) -> SwapResult:
        """Walk the bins for a swap and return the steps, without mutating."""
        try:
            checked_u64(amount_in, "amount_in")
        except SafeIntError as err:
            raise InvalidAmount(str(err)) from err
        if amount_in == 0:
            raise InvalidAmount("Swap amount must be positive")

        side_out = side_in.opposite
        direction = -1 if side_in is Side.LEFT else 1
        if side_in is Side.LEFT:
            convert, required_for = left_to_right, right_to_left_up
        else:
            convert, required_for = right_to_left, left_to_right_up

        remaining = amount_in
        bin_id = self.active_bin_id
        steps: list[SwapStep] = []
        crossed = 0

        while True:
            bin_ = self._bins[bin_id]
            available = bin_.balance(side_out)
            if available > 0:
                fee = fee_on(remaining, self.fee_bps)
                amount_out = convert(remaining - fee, bin_.price)
                if amount_out < available:
                    steps.append(SwapStep(bin_id, remaining, fee, amount_out))
                    remaining = 0
                    break

                # Drain the bin; the fee goes on top of the exact input needed
                net_in = required_for(available, bin_.price)
                fee = fee_on(net_in, self.fee_bps)
                steps.append(SwapStep(bin_id, net_in + fee, fee, available, drained=True))
                remaining -= net_in + fee

            next_id = bin_id + direction
            if next_id not in self._bins:
                if remaining > 0:
                    raise InsufficientLiquidity(
                        f"Pool {self.pool_id} cannot absorb {amount_in} {side_in.value} token, "
                        f"{remaining} left unswapped"
                    )
                break
            bin_id = next_id
            crossed += 1
            if crossed > self.max_bins_per_swap:
                raise TooManyBinsCrossed(
                    f"Swap would cross more than {self.max_bins_per_swap} bins in pool {self.pool_id}"
                )
            if remaining == 0:
                break

        amount_out = sum(step.amount_out for step in steps)
        if amount_out == 0:
            raise InvalidAmount(f"Swap of {amount_in} {side_in.value} token is too small to buy anything")

        return SwapResult(
            pool_id=self.pool_id,
            side_in=side_in,
            amount_in=sum(step.amount_in for step in steps),
            amount_out=amount_out,
            fee=sum(step.fee for step in steps),
            steps=tuple(steps),
            active_bin_before=self.active_bin_id,
            active_bin_after=bin_id,
        )

    # --- Inspection ---

    def check_invariants(self) -> None:
        """Verify the structural invariants of the pool.

        Raises:
            InvariantViolation: On the first broken invariant
        """
        if self.active_bin_id not in self._bins:
            raise InvariantViolation(f"Active bin {self.active_bin_id} does not exist")

        ids = sorted(self._bins)
        if ids[-1] - ids[0] + 1 != len(ids):
            raise InvariantViolation(f"Bin ids are not contiguous: {ids}")

        for bin_id in ids:
            bin_ = self._bins[bin_id]
            if bin_.price != self.price_of(bin_id):
                raise InvariantViolation(f"Bin {bin_id} price {bin_.price} does not match its id")
            if bin_id < self.active_bin_id and bin_.left > 0:
                raise InvariantViolation(f"Bin {bin_id} below the active bin holds left token")
            if bin_id > self.active_bin_id and bin_.right > 0:
                raise InvariantViolation(f"Bin {bin_id} above the active bin holds right token")

    def snapshot(self) -> PoolSnapshot:
        reserve_left, reserve_right = self.reserves
        return PoolSnapshot(
            pool_id=self.pool_id,
            left_token=self.left_token,
            right_token=self.right_token,
            bin_step_bps=self.bin_step_bps,
            fee_bps=self.fee_bps,
            active_bin_id=self.active_bin_id,
            active_price=self.active_bin.price,
            reserve_left=reserve_left,
            reserve_right=reserve_right,
            unallocated_fee_left=self.unallocated_fees[Side.LEFT],
            unallocated_fee_right=self.unallocated_fees[Side.RIGHT],
            bins=tuple(b.snapshot() for b in self.bins),
        )

    def __repr__(self) -> str:
        return (
            f"Pool(pool_id={self.pool_id!r}, active_bin_id={self.active_bin_id}, "
            f"bins={len(self._bins)}, fee_bps={self.fee_bps}, bin_step_bps={self.bin_step_bps})"
        )
