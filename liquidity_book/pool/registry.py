"""Registry of liquidity book pools.

Holds every pool the service knows about, keyed by pool id, and resolves
receipts back to the pool that issued them.
"""

from __future__ import annotations

import structlog

from liquidity_book.clock import Clock
from liquidity_book.config import DEFAULT_POOL_CONFIG, PoolConfig
from liquidity_book.errors import PoolExists, PoolNotFound, UnknownReceipt
from liquidity_book.pool.pool import Pool
from liquidity_book.pool.receipt import LiquidityReceipt

logger = structlog.get_logger()


class PoolRegistry:
    """In-memory collection of pools.

    Args:
        config: Defaults for pools created through ``create_pool``
        clock: Clock shared by every pool created through the registry
        pools: Initial pools. Duplicate ids raise PoolExists.
    """

    def __init__(
        self,
        config: PoolConfig = DEFAULT_POOL_CONFIG,
        clock: Clock | None = None,
        pools: list[Pool] | None = None,
    ) -> None:
        self.config = config
        self.clock = clock
        self._pools: dict[str, Pool] = {}
        for pool in pools or []:
            self.add_pool(pool)

    def __len__(self) -> int:
        return len(self._pools)

    def __contains__(self, pool_id: object) -> bool:
        return pool_id in self._pools

    def add_pool(self, pool: Pool) -> None:
        if pool.pool_id in self._pools:
            raise PoolExists(f"Pool {pool.pool_id} is already registered")
        self._pools[pool.pool_id] = pool

    def create_pool(
        self,
        pool_id: str,
        initial_price: int,
        *,
        bin_step_bps: int | None = None,
        fee_bps: int | None = None,
        left_token: str = "left",
        right_token: str = "right",
    ) -> Pool:
        """Create and register a pool, filling unset parameters from the config."""
        if pool_id in self._pools:
            raise PoolExists(f"Pool {pool_id} is already registered")
        pool = Pool.create(
            pool_id,
            initial_price,
            bin_step_bps,
            fee_bps,
            config=self.config,
            left_token=left_token,
            right_token=right_token,
            clock=self.clock,
        )
        self._pools[pool_id] = pool
        return pool

    def get_pool(self, pool_id: str) -> Pool:
        try:
            return self._pools[pool_id]
        except KeyError:
            raise PoolNotFound(f"No pool with id {pool_id}") from None

    def pools(self) -> list[Pool]:
        """All pools, ordered by id."""
        return [self._pools[pool_id] for pool_id in sorted(self._pools)]

    def find_receipt(self, receipt_id: str) -> LiquidityReceipt:
        """Find an outstanding receipt in any pool.

        Raises:
            UnknownReceipt: No pool has an outstanding receipt with this id
        """
        for pool in self._pools.values():
            try:
                return pool.get_receipt(receipt_id)
            except UnknownReceipt:
                continue
        logger.debug("receipt_not_found", receipt_id=receipt_id, pools=len(self._pools))
        raise UnknownReceipt(f"No outstanding receipt with id {receipt_id}")
