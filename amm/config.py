"""Exchange configuration."""

from dataclasses import dataclass

from amm.constants import FEE_DENOMINATOR, FEE_NUMERATOR, MIN_INITIAL_DEPOSIT


@dataclass(frozen=True)
class ExchangeConfig:
    """Parameters fixed for the lifetime of an exchange.

    The registry hands its own config to every exchange it creates, so all
    pools in one registry price identically.

    Attributes:
        fee_numerator: Share of the input that reaches the curve (default: 997)
        fee_denominator: Fee scale (default: 1000, so 997/1000 is a 0.3% fee)
        min_initial_deposit: Smallest base-asset amount accepted by the first
            deposit into an empty pool (default: 1e9, one gwei)
    """

    fee_numerator: int = FEE_NUMERATOR
    fee_denominator: int = FEE_DENOMINATOR
    min_initial_deposit: int = MIN_INITIAL_DEPOSIT

    def __post_init__(self) -> None:
        if self.fee_denominator <= 0:
            raise ValueError(f"fee_denominator must be positive, got {self.fee_denominator}")
        if not 0 < self.fee_numerator <= self.fee_denominator:
            raise ValueError(
                f"fee_numerator must be in (0, {self.fee_denominator}], got {self.fee_numerator}"
            )
        if self.min_initial_deposit < 1:
            raise ValueError(
                f"min_initial_deposit must be at least 1, got {self.min_initial_deposit}"
            )

    @property
    def fee_bps(self) -> int:
        """Fee in basis points (30 for the default 997/1000)."""
        return (self.fee_denominator - self.fee_numerator) * 10000 // self.fee_denominator


# Default configuration instance
DEFAULT_EXCHANGE_CONFIG = ExchangeConfig()
