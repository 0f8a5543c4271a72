"""API endpoints for the pool service."""

import structlog
from fastapi import APIRouter, Depends

from liquidity_book.models import (
    AddLiquidityRequest,
    CreatePoolRequest,
    PoolResponse,
    ReceiptResponse,
    SwapRequest,
    SwapResponse,
    WithdrawalResponse,
    WithdrawRequest,
)
from liquidity_book.pool import PoolRegistry

logger = structlog.get_logger()

router = APIRouter(prefix="/pools")

_default_registry = PoolRegistry()


def get_registry() -> PoolRegistry:
    """Dependency provider for the pool registry.

    Override this in tests to inject a registry with a manual clock:
        app.dependency_overrides[get_registry] = lambda: registry
    """
    return _default_registry


@router.post("", status_code=201)
async def create_pool(
    request: CreatePoolRequest,
    registry: PoolRegistry = Depends(get_registry),
) -> PoolResponse:
    pool = registry.create_pool(
        request.pool_id,
        int(request.initial_price),
        bin_step_bps=request.bin_step_bps,
        fee_bps=request.fee_bps,
        left_token=request.left_token,
        right_token=request.right_token,
    )
    return PoolResponse.from_snapshot(pool.snapshot())


@router.get("")
async def list_pools(registry: PoolRegistry = Depends(get_registry)) -> list[PoolResponse]:
    return [PoolResponse.from_snapshot(p.snapshot(), include_bins=False) for p in registry.pools()]


@router.get("/{pool_id}")
async def get_pool(pool_id: str, registry: PoolRegistry = Depends(get_registry)) -> PoolResponse:
    return PoolResponse.from_snapshot(registry.get_pool(pool_id).snapshot())


@router.post("/{pool_id}/liquidity", status_code=201)
async def add_liquidity(
    pool_id: str,
    request: AddLiquidityRequest,
    registry: PoolRegistry = Depends(get_registry),
) -> ReceiptResponse:
    """Deposit liquidity and return the receipt needed to withdraw it."""
    pool = registry.get_pool(pool_id)
    if request.uniform is not None:
        deposits = pool.uniform_deposits(
            int(request.uniform.amount_left),
            int(request.uniform.amount_right),
            request.uniform.bins_each_side,
        )
    else:
        deposits = {}
        for entry in request.deposits or []:
            left, right = deposits.get(entry.bin_id, (0, 0))
            deposits[entry.bin_id] = (left + int(entry.left), right + int(entry.right))

    receipt = pool.add_liquidity(request.depositor, deposits)
    return ReceiptResponse.from_receipt(receipt)


@router.get("/{pool_id}/receipts/{depositor}")
async def list_receipts(
    pool_id: str,
    depositor: str,
    registry: PoolRegistry = Depends(get_registry),
) -> list[ReceiptResponse]:
    pool = registry.get_pool(pool_id)
    return [ReceiptResponse.from_receipt(r) for r in pool.receipts_for(depositor)]


@router.post("/{pool_id}/quote")
async def quote(
    pool_id: str,
    request: SwapRequest,
    registry: PoolRegistry = Depends(get_registry),
) -> SwapResponse:
    """Price a swap without executing it."""
    result = registry.get_pool(pool_id).quote(request.side_in, int(request.amount_in))
    return SwapResponse.from_result(result)


@router.post("/{pool_id}/swap")
async def swap(
    pool_id: str,
    request: SwapRequest,
    registry: PoolRegistry = Depends(get_registry),
) -> SwapResponse:
    result = registry.get_pool(pool_id).swap(
        request.side_in,
        int(request.amount_in),
        min_amount_out=int(request.min_amount_out),
    )
    return SwapResponse.from_result(result)


@router.post("/{pool_id}/withdraw")
async def withdraw(
    pool_id: str,
    request: WithdrawRequest,
    registry: PoolRegistry = Depends(get_registry),
) -> WithdrawalResponse:
    """Redeem a receipt for principal plus accrued fees."""
    pool = registry.get_pool(pool_id)
    receipt = registry.find_receipt(request.receipt_id)
    withdrawal = pool.remove_liquidity(receipt)
    return WithdrawalResponse.from_withdrawal(withdrawal)
