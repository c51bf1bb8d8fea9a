"""Swap engine: base asset <-> token trades against this pool.

Four settlement primitives (exact input or exact output, in either
direction) back eight entry points: a "swap" variant where the caller
receives the output and a "transfer" variant with an explicit recipient.
Reserves are read before any asset moves; for base-asset input the incoming
value is already in this address's balance and is subtracted back out.
"""

from __future__ import annotations

import structlog

from amm.chain import external, payable
from amm.errors import ExceededSold, InsufficientBought
from amm.events import EthPurchase, TokenPurchase
from amm.exchange.base import ExchangeBase
from amm.guards import (
    require_at_least,
    require_at_most,
    require_not_expired,
    require_positive,
    require_recipient,
)
from amm.safe_int import S
from amm.types import normalize_address

logger = structlog.get_logger()


class SwapEngine(ExchangeBase):
    """Single-pool trades and price quotes."""

    # --- Primitives ---

    def _eth_to_token_input(
        self, eth_sold: int, min_tokens: int, deadline: int, buyer: str, recipient: str
    ) -> int:
        require_not_expired(deadline, self.chain.timestamp)
        require_positive(eth_sold=eth_sold, min_tokens=min_tokens)
        self._require_ready()

        eth_reserve = (S(self.eth_reserve()) - eth_sold).value
        tokens_bought = self.pricing.get_input_price(eth_sold, eth_reserve, self.token_reserve())
        require_at_least(tokens_bought, min_tokens, InsufficientBought)

        self._push_tokens(recipient, tokens_bought)
        self.emit(TokenPurchase(buyer=buyer, eth_sold=eth_sold, tokens_bought=tokens_bought))
        logger.debug(
            "token_purchase",
            exchange=self.address,
            buyer=buyer,
            recipient=recipient,
            eth_sold=eth_sold,
            tokens_bought=tokens_bought,
        )
        return tokens_bought

    def _eth_to_token_output(
        self, tokens_bought: int, max_eth: int, deadline: int, buyer: str, recipient: str
    ) -> int:
        require_not_expired(deadline, self.chain.timestamp)
        require_positive(tokens_bought=tokens_bought, max_eth=max_eth)
        self._require_ready()

        eth_reserve = (S(self.eth_reserve()) - max_eth).value
        eth_sold = self.pricing.get_output_price(tokens_bought, eth_reserve, self.token_reserve())
        require_at_most(eth_sold, max_eth, ExceededSold)

        eth_refund = max_eth - eth_sold
        if eth_refund > 0:
            self._send_eth(buyer, eth_refund)
        self._push_tokens(recipient, tokens_bought)
        self.emit(TokenPurchase(buyer=buyer, eth_sold=eth_sold, tokens_bought=tokens_bought))
        logger.debug(
            "token_purchase",
            exchange=self.address,
            buyer=buyer,
            recipient=recipient,
            eth_sold=eth_sold,
            tokens_bought=tokens_bought,
            refund=eth_refund,
        )
        return eth_sold

    def _token_to_eth_input(
        self, tokens_sold: int, min_eth: int, deadline: int, buyer: str, recipient: str
    ) -> int:
        require_not_expired(deadline, self.chain.timestamp)
        require_positive(tokens_sold=tokens_sold, min_eth=min_eth)
        self._require_ready()

        eth_bought = self.pricing.get_input_price(
            tokens_sold, self.token_reserve(), self.eth_reserve()
        )
        require_at_least(eth_bought, min_eth, InsufficientBought)

        self._pull_tokens(buyer, tokens_sold)
        self._send_eth(recipient, eth_bought)
        self.emit(EthPurchase(buyer=buyer, tokens_sold=tokens_sold, eth_bought=eth_bought))
        logger.debug(
            "eth_purchase",
            exchange=self.address,
            buyer=buyer,
            recipient=recipient,
            tokens_sold=tokens_sold,
            eth_bought=eth_bought,
        )
        return eth_bought

    def _token_to_eth_output(
        self, eth_bought: int, max_tokens: int, deadline: int, buyer: str, recipient: str
    ) -> int:
        require_not_expired(deadline, self.chain.timestamp)
        require_positive(eth_bought=eth_bought, max_tokens=max_tokens)
        self._require_ready()

        tokens_sold = self.pricing.get_output_price(
            eth_bought, self.token_reserve(), self.eth_reserve()
        )
        require_at_most(tokens_sold, max_tokens, ExceededSold)

        self._pull_tokens(buyer, tokens_sold)
        self._send_eth(recipient, eth_bought)
        self.emit(EthPurchase(buyer=buyer, tokens_sold=tokens_sold, eth_bought=eth_bought))
        logger.debug(
            "eth_purchase",
            exchange=self.address,
            buyer=buyer,
            recipient=recipient,
            tokens_sold=tokens_sold,
            eth_bought=eth_bought,
        )
        return tokens_sold

    # --- Base asset -> token ---

    @payable
    def receive(self, *, sender: str, value: int) -> int:
        """Plain base-asset transfer: buy tokens at any price, right now."""
        buyer = normalize_address(sender)
        return self._eth_to_token_input(value, 1, self.chain.timestamp, buyer, buyer)

    @payable
    def eth_to_token_swap_input(
        self, min_tokens: int, deadline: int, *, sender: str, value: int
    ) -> int:
        """Sell exactly ``value`` base asset; returns tokens bought."""
        buyer = normalize_address(sender)
        return self._eth_to_token_input(value, min_tokens, deadline, buyer, buyer)

    @payable
    def eth_to_token_transfer_input(
        self, min_tokens: int, deadline: int, recipient: str, *, sender: str, value: int
    ) -> int:
        """Sell exactly ``value`` base asset; tokens go to ``recipient``."""
        recipient = require_recipient(recipient, self.address)
        return self._eth_to_token_input(
            value, min_tokens, deadline, normalize_address(sender), recipient
        )

    @payable
    def eth_to_token_swap_output(
        self, tokens_bought: int, deadline: int, *, sender: str, value: int
    ) -> int:
        """Buy exactly ``tokens_bought``, paying at most ``value``; the rest is refunded.

        Returns:
            Base asset actually sold
        """
        buyer = normalize_address(sender)
        return self._eth_to_token_output(tokens_bought, value, deadline, buyer, buyer)

    @payable
    def eth_to_token_transfer_output(
        self, tokens_bought: int, deadline: int, recipient: str, *, sender: str, value: int
    ) -> int:
        recipient = require_recipient(recipient, self.address)
        return self._eth_to_token_output(
            tokens_bought, value, deadline, normalize_address(sender), recipient
        )

    # --- Token -> base asset ---

    @external
    def token_to_eth_swap_input(
        self, tokens_sold: int, min_eth: int, deadline: int, *, sender: str
    ) -> int:
        """Sell exactly ``tokens_sold``; returns base asset bought."""
        buyer = normalize_address(sender)
        return self._token_to_eth_input(tokens_sold, min_eth, deadline, buyer, buyer)

    @external
    def token_to_eth_transfer_input(
        self, tokens_sold: int, min_eth: int, deadline: int, recipient: str, *, sender: str
    ) -> int:
        recipient = require_recipient(recipient, self.address)
        return self._token_to_eth_input(
            tokens_sold, min_eth, deadline, normalize_address(sender), recipient
        )

    @external
    def token_to_eth_swap_output(
        self, eth_bought: int, max_tokens: int, deadline: int, *, sender: str
    ) -> int:
        """Buy exactly ``eth_bought``; returns tokens sold."""
        buyer = normalize_address(sender)
        return self._token_to_eth_output(eth_bought, max_tokens, deadline, buyer, buyer)

    @external
    def token_to_eth_transfer_output(
        self, eth_bought: int, max_tokens: int, deadline: int, recipient: str, *, sender: str
    ) -> int:
        recipient = require_recipient(recipient, self.address)
        return self._token_to_eth_output(
            eth_bought, max_tokens, deadline, normalize_address(sender), recipient
        )

    # --- Quotes ---

    def get_eth_to_token_input_price(self, eth_sold: int) -> int:
        """Tokens bought for selling ``eth_sold``."""
        require_positive(eth_sold=eth_sold)
        return self.pricing.get_input_price(eth_sold, self.eth_reserve(), self.token_reserve())

    def get_eth_to_token_output_price(self, tokens_bought: int) -> int:
        """Base asset needed to buy ``tokens_bought``."""
        require_positive(tokens_bought=tokens_bought)
        return self.pricing.get_output_price(tokens_bought, self.eth_reserve(), self.token_reserve())

    def get_token_to_eth_input_price(self, tokens_sold: int) -> int:
        """Base asset bought for selling ``tokens_sold``."""
        require_positive(tokens_sold=tokens_sold)
        return self.pricing.get_input_price(tokens_sold, self.token_reserve(), self.eth_reserve())

    def get_token_to_eth_output_price(self, eth_bought: int) -> int:
        """Tokens needed to buy ``eth_bought``."""
        require_positive(eth_bought=eth_bought)
        return self.pricing.get_output_price(eth_bought, self.token_reserve(), self.eth_reserve())


__all__ = ["SwapEngine"]
