"""Pydantic request/response models for the pool service."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, model_validator

from liquidity_book.constants import INITIAL_BIN_ID, MAX_BIN_OFFSET
from liquidity_book.models.types import U64, BasisPoints, Price
from liquidity_book.pool import (
    LiquidityReceipt,
    PoolSnapshot,
    Side,
    SwapResult,
    Withdrawal,
)
from liquidity_book.pool.bin import BinSnapshot


class CreatePoolRequest(BaseModel):
    """Parameters of a new pool. Unset fee and bin step use service defaults."""

    pool_id: str = Field(alias="poolId", min_length=1, max_length=128)
    initial_price: Price = Field(alias="initialPrice")
    bin_step_bps: BasisPoints | None = Field(default=None, alias="binStepBps")
    fee_bps: BasisPoints | None = Field(default=None, alias="feeBps")
    left_token: str = Field(default="left", alias="leftToken")
    right_token: str = Field(default="right", alias="rightToken")

    model_config = {"populate_by_name": True}


class BinDeposit(BaseModel):
    """Amounts to deposit into one bin."""

    bin_id: int = Field(
        alias="binId",
        ge=INITIAL_BIN_ID - MAX_BIN_OFFSET,
        le=INITIAL_BIN_ID + MAX_BIN_OFFSET - 1,
    )
    left: U64 = "0"
    right: U64 = "0"

    model_config = {"populate_by_name": True}


MAX_BINS_EACH_SIDE = 1024

# Explicit deposits may cover as many bins as the widest uniform spread
MAX_DEPOSIT_BINS = 2 * MAX_BINS_EACH_SIDE + 1


class UniformDeposit(BaseModel):
    """Amounts to spread evenly around the active bin."""

    amount_left: U64 = Field(default="0", alias="amountLeft")
    amount_right: U64 = Field(default="0", alias="amountRight")
    bins_each_side: int = Field(default=0, alias="binsEachSide", ge=0, le=MAX_BINS_EACH_SIDE)

    model_config = {"populate_by_name": True}


class AddLiquidityRequest(BaseModel):
    """Deposit request: either explicit per-bin deposits or a uniform spread."""

    depositor: str = Field(min_length=1)
    deposits: list[BinDeposit] | None = Field(default=None, max_length=MAX_DEPOSIT_BINS)
    uniform: UniformDeposit | None = None

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def _exactly_one_shape(self) -> AddLiquidityRequest:
        if (self.deposits is None) == (self.uniform is None):
            raise ValueError("Provide exactly one of 'deposits' or 'uniform'")
        return self


class ContributionModel(BaseModel):
    bin_id: int = Field(alias="binId")
    left: U64
    right: U64
    value: str

    model_config = {"populate_by_name": True}


class ReceiptResponse(BaseModel):
    """A liquidity receipt."""

    receipt_id: str = Field(alias="receiptId")
    pool_id: str = Field(alias="poolId")
    depositor: str
    deposited_at_ms: int = Field(alias="depositedAtMs")
    contributions: list[ContributionModel]

    model_config = {"populate_by_name": True}

    @classmethod
    def from_receipt(cls, receipt: LiquidityReceipt) -> ReceiptResponse:
        return cls(
            receipt_id=receipt.receipt_id,
            pool_id=receipt.pool_id,
            depositor=receipt.depositor,
            deposited_at_ms=receipt.deposited_at_ms,
            contributions=[
                ContributionModel(bin_id=bin_id, left=c.left, right=c.right, value=str(c.value))
                for bin_id, c in sorted(receipt.contributions.items())
            ],
        )


class SwapRequest(BaseModel):
    """Sell ``amountIn`` of ``sideIn`` for the other token."""

    side_in: Side = Field(alias="sideIn")
    amount_in: U64 = Field(alias="amountIn")
    min_amount_out: U64 = Field(default="0", alias="minAmountOut")

    model_config = {"populate_by_name": True}


class SwapStepModel(BaseModel):
    bin_id: int = Field(alias="binId")
    amount_in: U64 = Field(alias="amountIn")
    fee: U64
    amount_out: U64 = Field(alias="amountOut")
    drained: bool

    model_config = {"populate_by_name": True}


class SwapResponse(BaseModel):
    """Executed swap or quote."""

    pool_id: str = Field(alias="poolId")
    side_in: Side = Field(alias="sideIn")
    amount_in: U64 = Field(alias="amountIn")
    amount_out: U64 = Field(alias="amountOut")
    fee: U64
    active_bin_before: int = Field(alias="activeBinBefore")
    active_bin_after: int = Field(alias="activeBinAfter")
    steps: list[SwapStepModel]

    model_config = {"populate_by_name": True}

    @classmethod
    def from_result(cls, result: SwapResult) -> SwapResponse:
        return cls(
            pool_id=result.pool_id,
            side_in=result.side_in,
            amount_in=result.amount_in,
            amount_out=result.amount_out,
            fee=result.fee,
            active_bin_before=result.active_bin_before,
            active_bin_after=result.active_bin_after,
            steps=[
                SwapStepModel(
                    bin_id=s.bin_id,
                    amount_in=s.amount_in,
                    fee=s.fee,
                    amount_out=s.amount_out,
                    drained=s.drained,
                )
                for s in result.steps
            ],
        )


class WithdrawRequest(BaseModel):
    receipt_id: str = Field(alias="receiptId", min_length=1)

    model_config = {"populate_by_name": True}


class BinPayoutModel(BaseModel):
    bin_id: int = Field(alias="binId")
    principal_left: U64 = Field(alias="principalLeft")
    principal_right: U64 = Field(alias="principalRight")
    fee_left: U64 = Field(alias="feeLeft")
    fee_right: U64 = Field(alias="feeRight")

    model_config = {"populate_by_name": True}


class WithdrawalResponse(BaseModel):
    """What a redeemed receipt paid out, in total and per bin."""

    receipt_id: str = Field(alias="receiptId")
    pool_id: str = Field(alias="poolId")
    depositor: str
    total_left: U64 = Field(alias="totalLeft")
    total_right: U64 = Field(alias="totalRight")
    fee_left: U64 = Field(alias="feeLeft")
    fee_right: U64 = Field(alias="feeRight")
    payouts: list[BinPayoutModel]

    model_config = {"populate_by_name": True}

    @classmethod
    def from_withdrawal(cls, withdrawal: Withdrawal) -> WithdrawalResponse:
        return cls(
            receipt_id=withdrawal.receipt_id,
            pool_id=withdrawal.pool_id,
            depositor=withdrawal.depositor,
            total_left=withdrawal.total_left,
            total_right=withdrawal.total_right,
            fee_left=withdrawal.fee_left,
            fee_right=withdrawal.fee_right,
            payouts=[
                BinPayoutModel(
                    bin_id=p.bin_id,
                    principal_left=p.principal_left,
                    principal_right=p.principal_right,
                    fee_left=p.fee_left,
                    fee_right=p.fee_right,
                )
                for p in withdrawal.payouts
            ],
        )


class BinModel(BaseModel):
    bin_id: int = Field(alias="binId")
    price: Price
    left: U64
    right: U64
    liquidity: str
    unclaimed_fee_left: U64 = Field(alias="unclaimedFeeLeft")
    unclaimed_fee_right: U64 = Field(alias="unclaimedFeeRight")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_snapshot(cls, snapshot: BinSnapshot) -> BinModel:
        return cls(
            bin_id=snapshot.bin_id,
            price=snapshot.price,
            left=snapshot.left,
            right=snapshot.right,
            liquidity=str(snapshot.liquidity),
            unclaimed_fee_left=snapshot.unclaimed_fee_left,
            unclaimed_fee_right=snapshot.unclaimed_fee_right,
        )


class PoolResponse(BaseModel):
    """Pool state."""

    pool_id: str = Field(alias="poolId")
    left_token: str = Field(alias="leftToken")
    right_token: str = Field(alias="rightToken")
    bin_step_bps: int = Field(alias="binStepBps")
    fee_bps: int = Field(alias="feeBps")
    active_bin_id: int = Field(alias="activeBinId")
    active_price: Price = Field(alias="activePrice")
    reserve_left: str = Field(alias="reserveLeft")
    reserve_right: str = Field(alias="reserveRight")
    bins: list[BinModel] = Field(default_factory=list)

    model_config = {"populate_by_name": True}

    @classmethod
    def from_snapshot(cls, snapshot: PoolSnapshot, *, include_bins: bool = True) -> PoolResponse:
        return cls(
            pool_id=snapshot.pool_id,
            left_token=snapshot.left_token,
            right_token=snapshot.right_token,
            bin_step_bps=snapshot.bin_step_bps,
            fee_bps=snapshot.fee_bps,
            active_bin_id=snapshot.active_bin_id,
            active_price=snapshot.active_price,
            reserve_left=str(snapshot.reserve_left),
            reserve_right=str(snapshot.reserve_right),
            bins=[BinModel.from_snapshot(b) for b in snapshot.bins] if include_bins else [],
        )


class ErrorResponse(BaseModel):
    error: str
    detail: str

    @classmethod
    def of(cls, error: str, detail: Any) -> ErrorResponse:
        return cls(error=error, detail=str(detail))
