"""Fixed-point price math for liquidity book bins.

Prices are integers scaled by PRICE_SCALE (10^18) and denote how many units
of the right token one unit of the left token is worth. Every conversion
rounds in the pool's favour: amounts paid out round down, amounts required
from a trader round up.
"""

from __future__ import annotations

from liquidity_book.constants import BPS_DENOMINATOR, MAX_BIN_OFFSET, PRICE_SCALE
from liquidity_book.errors import InvalidPrice
from liquidity_book.safe_int import S

__all__ = [
    "bin_price",
    "fee_on",
    "left_to_right",
    "left_to_right_up",
    "right_to_left",
    "right_to_left_up",
    "value_in_right",
]


def bin_price(initial_price: int, bin_step_bps: int, offset: int) -> int:
    """Price of the bin ``offset`` steps away from the initial bin.

    Computes ``initial_price * (1 + bin_step_bps / 10_000) ** offset`` with
    exact integer arithmetic, rounded down. Negative offsets walk towards
    lower prices.

    Raises:
        InvalidPrice: If the price rounds down to zero or the offset leaves
            the bin id range
    """
    if initial_price <= 0:
        raise InvalidPrice(f"Initial price must be positive: {initial_price}")
    if abs(offset) > MAX_BIN_OFFSET:
        raise InvalidPrice(f"Bin offset {offset} is outside [-{MAX_BIN_OFFSET}, {MAX_BIN_OFFSET}]")

    step_num = BPS_DENOMINATOR + bin_step_bps
    if offset >= 0:
        numerator = initial_price * step_num**offset
        denominator = BPS_DENOMINATOR**offset
    else:
        numerator = initial_price * BPS_DENOMINATOR ** (-offset)
        denominator = step_num ** (-offset)

    price = numerator // denominator
    if price <= 0:
        raise InvalidPrice(f"Price underflows to zero {offset} bins from the initial bin")
    return price


def left_to_right(amount: int, price: int) -> int:
    """Right-token amount worth ``amount`` left tokens, rounded down."""
    return (S(amount) * S(price) // S(PRICE_SCALE)).value


def left_to_right_up(amount: int, price: int) -> int:
    """Right-token amount worth ``amount`` left tokens, rounded up."""
    return (S(amount) * S(price)).ceiling_div(PRICE_SCALE).value


def right_to_left(amount: int, price: int) -> int:
    """Left-token amount worth ``amount`` right tokens, rounded down."""
    return (S(amount) * S(PRICE_SCALE) // S(price)).value


def right_to_left_up(amount: int, price: int) -> int:
    """Left-token amount worth ``amount`` right tokens, rounded up."""
    return (S(amount) * S(PRICE_SCALE)).ceiling_div(price).value


def value_in_right(left: int, right: int, price: int) -> int:
    """Total value of a (left, right) pair in right-token units."""
    return left_to_right(left, price) + right


def fee_on(amount: int, fee_bps: int) -> int:
    """Fee charged on ``amount``, rounded up."""
    return (S(amount) * S(fee_bps)).ceiling_div(BPS_DENOMINATOR).value
