"""Constant-product pricing with a proportional input fee.

The pool holds reserves x and y with x * y = k. A trader selling ``a`` of x
only moves the curve by the fee-reduced amount a * 997 / 1000, so k grows
with every trade. Both directions use truncating integer division, which
rounds every trade in the pool's favor by less than one unit.
"""

from __future__ import annotations

from amm.config import DEFAULT_EXCHANGE_CONFIG, ExchangeConfig
from amm.errors import InsufficientInputReserve, InsufficientOutputReserve
from amm.safe_int import S


class ConstantProductPricing:
    """Pure pricing functions for one fee configuration.

    Formula (exact input):
        out = (in * fee_num * res_out) / (res_in * fee_den + in * fee_num)

    Formula (exact output):
        in = (res_in * out * fee_den) / ((res_out - out) * fee_num) + 1
    """

    def __init__(self, config: ExchangeConfig = DEFAULT_EXCHANGE_CONFIG) -> None:
        self.config = config

    def get_input_price(self, input_amount: int, input_reserve: int, output_reserve: int) -> int:
        """Amount of output bought by selling exactly ``input_amount``.

        Args:
            input_amount: Amount of the input asset sold
            input_reserve: Pool reserve of the input asset, before the sale
            output_reserve: Pool reserve of the output asset

        Returns:
            Output amount, rounded down

        Raises:
            InsufficientInputReserve: If input_reserve is zero
            InsufficientOutputReserve: If output_reserve is zero
        """
        _require_reserves(input_reserve, output_reserve)

        amount_in_with_fee = S(input_amount) * self.config.fee_numerator
        denominator = S(input_reserve) * self.config.fee_denominator + amount_in_with_fee

        return amount_in_with_fee.mul_div(output_reserve, denominator).to_uint256()

    def get_output_price(self, output_amount: int, input_reserve: int, output_reserve: int) -> int:
        """Amount of input that must be sold to buy exactly ``output_amount``.

        The +1 after the floor division guarantees that selling the returned
        amount yields at least ``output_amount``.

        Raises:
            InsufficientInputReserve: If input_reserve is zero
            InsufficientOutputReserve: If output_reserve is zero
            Underflow: If output_amount exceeds output_reserve
            DivisionByZero: If output_amount equals output_reserve
        """
        _require_reserves(input_reserve, output_reserve)

        numerator = S(input_reserve) * output_amount * self.config.fee_denominator
        denominator = (S(output_reserve) - output_amount) * self.config.fee_numerator

        return ((numerator // denominator) + 1).to_uint256()


def _require_reserves(input_reserve: int, output_reserve: int) -> None:
    if input_reserve <= 0:
        raise InsufficientInputReserve(f"Input reserve is {input_reserve}")
    if output_reserve <= 0:
        raise InsufficientOutputReserve(f"Output reserve is {output_reserve}")


# Singleton for the default 0.3% fee
pricing = ConstantProductPricing()


__all__ = ["ConstantProductPricing", "pricing"]
