"""Price and amount math."""

from liquidity_book.math.fixed_point import (
    bin_price,
    fee_on,
    left_to_right,
    left_to_right_up,
    right_to_left,
    right_to_left_up,
    value_in_right,
)

__all__ = [
    "bin_price",
    "fee_on",
    "left_to_right",
    "left_to_right_up",
    "right_to_left",
    "right_to_left_up",
    "value_in_right",
]
