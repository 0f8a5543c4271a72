"""Test helpers module for shared test utilities.

- constants: Bin ids, prices and depositor names
- factories: Pool factory and accounting helpers
"""

from tests.helpers.constants import (
    ACTIVE,
    ALICE,
    BOB,
    CAROL,
    ONE,
    PRICE_ABOVE,
    PRICE_BELOW,
    STEP_1PCT,
)
from tests.helpers.factories import holdings, make_pool

__all__ = [
    # Constants
    "ACTIVE",
    "ALICE",
    "BOB",
    "CAROL",
    "ONE",
    "PRICE_ABOVE",
    "PRICE_BELOW",
    "STEP_1PCT",
    # Factories
    "make_pool",
    "holdings",
]
