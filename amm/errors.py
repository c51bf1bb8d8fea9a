"""Exchange, registry and ledger error classes.

Every error aborts the whole call it is raised in: the chain restores the
world state to what it was before the outermost failing call.
"""

from __future__ import annotations


class AMMError(Exception):
    """Base error for ledger, exchange and registry operations."""

    pass


# --- Fungible ledger ---


class InsufficientBalance(AMMError):
    """Account balance is smaller than the amount moved or burned."""

    pass


class InsufficientAllowance(AMMError):
    """Spender allowance is smaller than the amount pulled."""

    pass


class TransferFailed(AMMError):
    """A ledger transfer reported failure instead of raising."""

    pass


class Unauthorized(AMMError):
    """Caller is not allowed to perform this operation."""

    pass


# --- Exchange preconditions ---


class Expired(AMMError):
    """Deadline has passed."""

    def __init__(self, deadline: int, now: int) -> None:
        super().__init__(f"Deadline {deadline} is before current time {now}")
        self.deadline = deadline
        self.now = now


class InvalidAmount(AMMError):
    """Amount parameter is zero, negative, or outside uint256 range."""

    pass


class InsufficientReserve(AMMError):
    """A reserve used in a pricing computation is zero."""

    pass


class InsufficientInputReserve(InsufficientReserve):
    pass


class InsufficientOutputReserve(InsufficientReserve):
    pass


class InsufficientLiquidity(AMMError):
    """Operation attempted against a pool with no outstanding shares."""

    pass


class InvalidRecipient(AMMError):
    """Recipient is the exchange itself or the zero address."""

    pass


class InvalidExchange(AMMError):
    """Target exchange is missing, null, or the calling exchange itself."""

    pass


class InvalidToken(AMMError):
    """Token is null, not deployed, or already has an exchange."""

    pass


class AlreadyInitialized(AMMError):
    """Exchange setup was invoked more than once."""

    pass


class NotInitialized(AMMError):
    """Exchange has not been set up with a token yet."""

    pass


# --- Slippage bounds ---


class BoundError(AMMError):
    """A computed amount violates a caller-supplied bound.

    Attributes:
        amount: The computed amount
        bound: The caller's minimum or maximum
    """

    kind = "bound"

    def __init__(self, amount: int, bound: int) -> None:
        super().__init__(f"{self.kind}: computed {amount}, bound {bound}")
        self.amount = amount
        self.bound = bound


class InsufficientSold(BoundError):
    """Amount sold is below the caller's minimum."""

    kind = "insufficient sold"


class InsufficientBought(BoundError):
    """Amount bought is below the caller's minimum."""

    kind = "insufficient bought"


class ExceededSold(BoundError):
    """Amount sold is above the caller's maximum."""

    kind = "exceeded sold"


class ExceededBought(BoundError):
    """Amount bought is above the caller's maximum."""

    kind = "exceeded bought"


# --- Fatal ---


class InvariantViolation(BaseException):
    """Deployment wiring is broken; never expected in a correct deployment.

    Derives from BaseException so ``except Exception`` handlers cannot
    swallow it. The chain still rolls back the enclosing call.
    """

    pass


__all__ = [
    "AMMError",
    "InsufficientBalance",
    "InsufficientAllowance",
    "TransferFailed",
    "Unauthorized",
    "Expired",
    "InvalidAmount",
    "InsufficientReserve",
    "InsufficientInputReserve",
    "InsufficientOutputReserve",
    "InsufficientLiquidity",
    "InvalidRecipient",
    "InvalidExchange",
    "InvalidToken",
    "AlreadyInitialized",
    "NotInitialized",
    "BoundError",
    "InsufficientSold",
    "InsufficientBought",
    "ExceededSold",
    "ExceededBought",
    "InvariantViolation",
]
