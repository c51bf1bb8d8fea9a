"""Liquidity engine: minting and burning pool shares.

A pool is empty while its share supply is zero. The first deposit sets the
price (the depositor picks the token amount) and mints shares 1:1 with the
base asset deposited. Every later deposit or withdrawal moves both reserves
and the share supply by the same fraction.
"""

from __future__ import annotations

import structlog

from amm.chain import external, payable
from amm.errors import (
    ExceededSold,
    InsufficientBought,
    InsufficientLiquidity,
    InvalidAmount,
    InvariantViolation,
)
from amm.events import AddLiquidity, RemoveLiquidity
from amm.exchange.base import ExchangeBase
from amm.guards import require_at_least, require_at_most, require_not_expired, require_positive
from amm.safe_int import S
from amm.types import normalize_address

logger = structlog.get_logger()


class LiquidityEngine(ExchangeBase):
    """Deposit into and withdraw from the pool."""

    @payable
    def add_liquidity(
        self,
        min_liquidity: int,
        max_tokens: int,
        deadline: int,
        *,
        sender: str,
        value: int,
    ) -> int:
        """Deposit ``value`` base asset plus the matching tokens.

        Args:
            min_liquidity: Minimum shares to mint; ignored for the first deposit
            max_tokens: Maximum tokens to deposit. The first deposit takes
                exactly this many, which sets the initial price.
            deadline: Last valid timestamp
            sender: Liquidity provider
            value: Base asset deposited

        Returns:
            Shares minted to the provider

        Raises:
            Expired: If deadline has passed
            InvalidAmount: If max_tokens or value is zero, min_liquidity is zero
                on an active pool, or the first deposit is below the floor
            ExceededSold: If the proportional token amount exceeds max_tokens
            InsufficientBought: If fewer than min_liquidity shares would be minted
        """
        require_not_expired(deadline, self.chain.timestamp)
        require_positive(max_tokens=max_tokens, value=value)
        self._require_ready()
        provider = normalize_address(sender)

        total_liquidity = self.total_supply()
        if total_liquidity > 0:
            require_positive(min_liquidity=min_liquidity)
            # value is already credited to this address
            eth_reserve = S(self.eth_reserve()) - value
            token_reserve = self.token_reserve()
            token_amount = S(value).mul_div(token_reserve, eth_reserve).to_uint256()
            liquidity_minted = S(value).mul_div(total_liquidity, eth_reserve).to_uint256()
            require_at_most(token_amount, max_tokens, ExceededSold)
            require_at_least(liquidity_minted, min_liquidity, InsufficientBought)
        else:
            if value < self.config.min_initial_deposit:
                raise InvalidAmount(
                    f"Initial deposit {value} is below the floor {self.config.min_initial_deposit}"
                )
            registered = self._registry_lookup(self.token_address())
            if registered != self.address:
                raise InvariantViolation(
                    f"Registry maps {self.token_address()} to {registered}, not {self.address}"
                )
            token_amount = max_tokens
            liquidity_minted = value

        self._mint(provider, liquidity_minted)
        self._pull_tokens(provider, token_amount)
        self.emit(AddLiquidity(provider=provider, eth_amount=value, token_amount=token_amount))

        logger.debug(
            "liquidity_added",
            exchange=self.address,
            provider=provider,
            eth_amount=value,
            token_amount=token_amount,
            shares=liquidity_minted,
            bootstrap=total_liquidity == 0,
        )
        return liquidity_minted

    @external
    def remove_liquidity(
        self,
        amount: int,
        min_eth: int,
        min_tokens: int,
        deadline: int,
        *,
        sender: str,
    ) -> tuple[int, int]:
        """Burn ``amount`` shares for a proportional slice of both reserves.

        Shares are burned before either asset is paid out, so a ledger that
        calls back into the exchange during payout sees the reduced supply.

        Returns:
            (eth_amount, token_amount) paid to the provider

        Raises:
            Expired: If deadline has passed
            InvalidAmount: If amount, min_eth or min_tokens is zero
            InsufficientLiquidity: If no shares are outstanding
            InsufficientBought: If either payout is below its minimum
            InsufficientBalance: If the provider holds fewer than amount shares
        """
        require_not_expired(deadline, self.chain.timestamp)
        require_positive(amount=amount, min_eth=min_eth, min_tokens=min_tokens)
        self._require_ready()
        provider = normalize_address(sender)

        total_liquidity = self.total_supply()
        if total_liquidity == 0:
            raise InsufficientLiquidity(f"Exchange {self.address} has no outstanding shares")

        eth_amount = S(amount).mul_div(self.eth_reserve(), total_liquidity).to_uint256()
        token_amount = S(amount).mul_div(self.token_reserve(), total_liquidity).to_uint256()
        require_at_least(eth_amount, min_eth, InsufficientBought)
        require_at_least(token_amount, min_tokens, InsufficientBought)

        self._burn(provider, amount)
        self._send_eth(provider, eth_amount)
        self._push_tokens(provider, token_amount)
        self.emit(RemoveLiquidity(provider=provider, eth_amount=eth_amount, token_amount=token_amount))

        logger.debug(
            "liquidity_removed",
            exchange=self.address,
            provider=provider,
            eth_amount=eth_amount,
            token_amount=token_amount,
            shares=amount,
        )
        return eth_amount, token_amount


__all__ = ["LiquidityEngine"]
