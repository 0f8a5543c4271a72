"""Liquidity book error classes.

Every error carries a stable ``code`` used by the HTTP API.
"""


class LiquidityBookError(Exception):
    """Base error for pool operations."""

    code = "liquidity_book_error"


class InvalidPrice(LiquidityBookError):
    """Bin price must be positive."""

    code = "invalid_price"


class InvalidBinStep(LiquidityBookError):
    """Bin step must be in (0, MAX_BIN_STEP_BPS]."""

    code = "invalid_bin_step"


class InvalidFee(LiquidityBookError):
    """Fee must be in [0, MAX_FEE_BPS]."""

    code = "invalid_fee"


class InvalidAmount(LiquidityBookError):
    """Amount must be positive and fit in a u64 balance."""

    code = "invalid_amount"


class InvalidDeposit(LiquidityBookError):
    """Deposit puts a token on the wrong side of the active bin."""

    code = "invalid_deposit"


class NonContiguousBins(LiquidityBookError):
    """Populated bin ids must form a contiguous range."""

    code = "non_contiguous_bins"


class BinNotFound(LiquidityBookError):
    """No bin with the requested id exists in the pool."""

    code = "bin_not_found"


class InsufficientLiquidity(LiquidityBookError):
    """The pool ran out of bins before the swap input was consumed."""

    code = "insufficient_liquidity"


class SlippageExceeded(LiquidityBookError):
    """Swap output is below the caller's minimum."""

    code = "slippage_exceeded"


class TooManyBinsCrossed(LiquidityBookError):
    """Swap would walk more bins than the pool allows."""

    code = "too_many_bins_crossed"


class PoolMismatch(LiquidityBookError):
    """Receipt belongs to a different pool."""

    code = "pool_mismatch"


class UnknownReceipt(LiquidityBookError):
    """Receipt was not issued by this pool."""

    code = "unknown_receipt"


class ReceiptAlreadyRedeemed(LiquidityBookError):
    """Receipt has already been redeemed."""

    code = "receipt_already_redeemed"


class PoolNotFound(LiquidityBookError):
    """No pool with the requested id is registered."""

    code = "pool_not_found"


class PoolExists(LiquidityBookError):
    """A pool with this id is already registered."""

    code = "pool_exists"


class InvariantViolation(LiquidityBookError):
    """Pool state breaks one of its structural invariants."""

    code = "invariant_violation"
