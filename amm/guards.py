"""Precondition checks shared by exchange entry points.

Each guard is a plain function that raises on failure, so an entry point
lists its preconditions at the top and reads top to bottom.
"""

from __future__ import annotations

from amm.constants import UINT256_MAX
from amm.errors import BoundError, Expired, InvalidAmount, InvalidRecipient
from amm.types import is_zero_address, normalize_address


def require_not_expired(deadline: int, now: int) -> None:
    """The deadline itself is still valid; one second later is not."""
    if deadline < now:
        raise Expired(deadline, now)


def require_positive(**amounts: int) -> None:
    """Every named amount must be a uint256 strictly greater than zero."""
    for name, amount in amounts.items():
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise InvalidAmount(f"{name} must be an integer, got {type(amount).__name__}")
        if amount <= 0:
            raise InvalidAmount(f"{name} must be positive, got {amount}")
        if amount > UINT256_MAX:
            raise InvalidAmount(f"{name} exceeds uint256 max: {amount}")


def require_recipient(recipient: str, exchange_address: str) -> str:
    """Reject the exchange itself and the zero address; return it normalized."""
    recipient = normalize_address(recipient)
    if recipient == normalize_address(exchange_address) or is_zero_address(recipient):
        raise InvalidRecipient(f"Invalid recipient: {recipient}")
    return recipient


def require_at_least(amount: int, minimum: int, error: type[BoundError]) -> None:
    if amount < minimum:
        raise error(amount, minimum)


def require_at_most(amount: int, maximum: int, error: type[BoundError]) -> None:
    if amount > maximum:
        raise error(amount, maximum)


__all__ = [
    "require_not_expired",
    "require_positive",
    "require_recipient",
    "require_at_least",
    "require_at_most",
]
