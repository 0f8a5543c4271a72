"""Shared field types for the API models."""

from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from liquidity_book.safe_int import U64_MAX


def _parse_decimal_int(value: Any, kind: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{kind} must be string or int, got bool")
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        raise ValueError(f"{kind} must be string or int, got {type(value).__name__}")
    try:
        return int(value)
    except ValueError as err:
        raise ValueError(f"{kind} must be a decimal integer string: '{value}'") from err


def validate_u64(value: Any) -> str:
    """Validate that a value is a token amount fitting in a u64.

    Args:
        value: Value to validate (string or int)

    Returns:
        Amount as decimal string

    Raises:
        ValueError: If value is not a non-negative integer within u64 range
    """
    int_value = _parse_decimal_int(value, "U64")
    if int_value < 0:
        raise ValueError(f"U64 cannot be negative: {value}")
    if int_value > U64_MAX:
        raise ValueError(f"U64 overflow: {value} > 2^64-1")
    return str(int_value)


def validate_price(value: Any) -> str:
    """Validate a positive fixed-point price (scaled by 10^18)."""
    int_value = _parse_decimal_int(value, "Price")
    if int_value <= 0:
        raise ValueError(f"Price must be positive: {value}")
    return str(int_value)


# Token amount as decimal string (JSON numbers lose precision above 2^53)
U64 = Annotated[
    str,
    BeforeValidator(validate_u64),
    Field(description="Unsigned 64-bit token amount as decimal string"),
]

# Fixed-point price, 10^18 = 1.0
Price = Annotated[
    str,
    BeforeValidator(validate_price),
    Field(description="Fixed-point price scaled by 10^18, as decimal string"),
]

BasisPoints = Annotated[int, Field(ge=0, le=10_000)]
