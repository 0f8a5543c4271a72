"""Pydantic models for the pool service API."""

from liquidity_book.models.api import (
    AddLiquidityRequest,
    BinDeposit,
    CreatePoolRequest,
    ErrorResponse,
    PoolResponse,
    ReceiptResponse,
    SwapRequest,
    SwapResponse,
    UniformDeposit,
    WithdrawalResponse,
    WithdrawRequest,
)
from liquidity_book.models.types import U64, Price

__all__ = [
    # Types
    "U64",
    "Price",
    # Requests
    "CreatePoolRequest",
    "AddLiquidityRequest",
    "BinDeposit",
    "UniformDeposit",
    "SwapRequest",
    "WithdrawRequest",
    # Responses
    "PoolResponse",
    "ReceiptResponse",
    "SwapResponse",
    "WithdrawalResponse",
    "ErrorResponse",
]
