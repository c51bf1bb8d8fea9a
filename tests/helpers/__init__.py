"""Test helpers module for shared test utilities.

- constants: fixed time, units and reference pool sizes
- factories: funded accounts and reserve snapshots
"""

from tests.helpers.constants import (
    ETH,
    GWEI,
    NOW,
    POOL_B_ETH,
    POOL_B_TOKENS,
    POOL_ETH,
    POOL_TOKENS,
    SMALL_POOL_CONFIG,
    UNUSED,
)
from tests.helpers.factories import make_trader, pool_reserves

__all__ = [
    # Constants
    "NOW",
    "ETH",
    "GWEI",
    "POOL_ETH",
    "POOL_TOKENS",
    "POOL_B_ETH",
    "POOL_B_TOKENS",
    "UNUSED",
    "SMALL_POOL_CONFIG",
    # Factories
    "make_trader",
    "pool_reserves",
]
