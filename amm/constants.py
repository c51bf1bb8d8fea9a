"""Protocol constants for the constant-product exchange.

Centralizes the fee, deposit floor and well-known addresses.
"""

# Largest amount representable on the ledger
UINT256_MAX = 2**256 - 1

# Null identity: never a valid recipient, exchange or token
ZERO_ADDRESS = "0x" + "00" * 20

# Swap fee of 0.3%, applied as input * 997 / 1000
FEE_NUMERATOR = 997
FEE_DENOMINATOR = 1000

# First deposit into an empty pool must be at least 1 gwei (1e-9 of 1e18)
MIN_INITIAL_DEPOSIT = 10**9

# Liquidity share metadata reported by every exchange's share ledger
SHARE_NAME = "Constant Product Liquidity"
SHARE_SYMBOL = "CPL"
SHARE_DECIMALS = 18

# Registry ids start at 1; 0 means "not registered"
FIRST_TOKEN_ID = 1
