"""Shared type definitions: addresses and uint256 amounts.

Addresses are 0x-prefixed, 40 hex characters, and always stored lowercase.
"""

from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from amm.constants import UINT256_MAX, ZERO_ADDRESS


def validate_uint256(value: Any) -> int:
    """Validate that a value is a uint256 amount.

    Accepts ints and decimal strings (the wire form used by the quote service).

    Raises:
        ValueError: If value is not a non-negative integer within uint256 range
    """
    if isinstance(value, bool):
        raise ValueError("Uint256 must be an integer, got bool")
    if isinstance(value, str):
        # Plain ASCII digits only: no sign, whitespace or underscores
        if not (value.isascii() and value.isdigit()):
            raise ValueError(f"Uint256 must be a decimal integer string: '{value}'")
        value = int(value)
    if not isinstance(value, int):
        raise ValueError(f"Uint256 must be string or int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"Uint256 cannot be negative: {value}")
    if value > UINT256_MAX:
        raise ValueError(f"Uint256 overflow: {value} > 2^256-1")
    return value


# Ethereum-style address (40 hex chars after 0x prefix)
Address = Annotated[str, Field(pattern=r"^0x[a-fA-F0-9]{40}$")]

# 256-bit unsigned amount, accepted as int or decimal string
Uint256 = Annotated[
    int,
    BeforeValidator(validate_uint256),
    Field(description="256-bit unsigned integer"),
]


def normalize_address(address: str, *, validate: bool = False) -> str:
    """Normalize an address to lowercase with a 0x prefix.

    Args:
        address: An address, with or without 0x prefix
        validate: If True, raises ValueError for malformed addresses

    Raises:
        ValueError: If validate=True and address is not a valid address
    """
    addr = address.lower()
    if not addr.startswith("0x"):
        addr = "0x" + addr

    if validate and not is_valid_address(addr):
        raise ValueError(f"Invalid address: {address}")

    return addr


def is_valid_address(address: str) -> bool:
    """Check if a string is a well-formed address."""
    if not isinstance(address, str):
        return False
    if not address.startswith("0x"):
        return False
    if len(address) != 42:
        return False
    try:
        int(address, 16)
        return True
    except ValueError:
        return False


def is_zero_address(address: str) -> bool:
    return normalize_address(address) == ZERO_ADDRESS


def address_to_bytes(address: str) -> bytes:
    """Raw 20-byte form of an address, as the ABI encoder expects."""
    return bytes.fromhex(normalize_address(address, validate=True)[2:])
