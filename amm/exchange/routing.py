"""Routing engine: token -> token trades through the shared base asset.

A route sells this exchange's token for base asset on this pool, then
spends that base asset on a second exchange, sending the second token to the
recipient. Both legs run in one call; if the second exchange rejects its
leg, the token pull on this pool is rolled back with it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from amm.chain import external
from amm.errors import ExceededBought, ExceededSold, InsufficientSold, InvalidExchange
from amm.events import EthPurchase
from amm.exchange.base import ExchangeBase
from amm.guards import (
    require_at_least,
    require_at_most,
    require_not_expired,
    require_positive,
    require_recipient,
)
from amm.types import is_zero_address, normalize_address

if TYPE_CHECKING:
    from amm.exchange.exchange import Exchange

logger = structlog.get_logger()


class RoutingEngine(ExchangeBase):
    """Two-hop trades: this pool's token -> base asset -> another pool's token."""

    def _token_to_token_input(
        self,
        tokens_sold: int,
        min_tokens_bought: int,
        min_eth_bought: int,
        deadline: int,
        buyer: str,
        recipient: str,
        exchange_addr: str,
    ) -> int:
        require_not_expired(deadline, self.chain.timestamp)
        require_positive(
            tokens_sold=tokens_sold,
            min_tokens_bought=min_tokens_bought,
            min_eth_bought=min_eth_bought,
        )
        target = self._route_target(exchange_addr)

        eth_bought = self.pricing.get_input_price(
            tokens_sold, self.token_reserve(), self.eth_reserve()
        )
        require_at_least(eth_bought, min_eth_bought, InsufficientSold)

        self._pull_tokens(buyer, tokens_sold)
        tokens_bought = target.eth_to_token_transfer_input(
            min_tokens_bought, deadline, recipient, sender=self.address, value=eth_bought
        )
        self.emit(EthPurchase(buyer=buyer, tokens_sold=tokens_sold, eth_bought=eth_bought))
        logger.debug(
            "token_to_token_input",
            exchange=self.address,
            target=target.address,
            buyer=buyer,
            recipient=recipient,
            tokens_sold=tokens_sold,
            eth_bought=eth_bought,
            tokens_bought=tokens_bought,
        )
        return tokens_bought

    def _token_to_token_output(
        self,
        tokens_bought: int,
        max_tokens_sold: int,
        max_eth_sold: int,
        deadline: int,
        buyer: str,
        recipient: str,
        exchange_addr: str,
    ) -> int:
        require_not_expired(deadline, self.chain.timestamp)
        require_positive(
            tokens_bought=tokens_bought,
            max_tokens_sold=max_tokens_sold,
            max_eth_sold=max_eth_sold,
        )
        target = self._route_target(exchange_addr)

        eth_bought = target.get_eth_to_token_output_price(tokens_bought)
        tokens_sold = self.pricing.get_output_price(
            eth_bought, self.token_reserve(), self.eth_reserve()
        )
        require_at_most(tokens_sold, max_tokens_sold, ExceededSold)
        require_at_most(eth_bought, max_eth_sold, ExceededBought)

        self._pull_tokens(buyer, tokens_sold)
        target.eth_to_token_transfer_output(
            tokens_bought, deadline, recipient, sender=self.address, value=eth_bought
        )
        self.emit(EthPurchase(buyer=buyer, tokens_sold=tokens_sold, eth_bought=eth_bought))
        logger.debug(
            "token_to_token_output",
            exchange=self.address,
            target=target.address,
            buyer=buyer,
            recipient=recipient,
            tokens_sold=tokens_sold,
            eth_bought=eth_bought,
            tokens_bought=tokens_bought,
        )
        return tokens_sold

    def _route_target(self, exchange_addr: str) -> Exchange:
        self._require_ready()
        exchange_addr = normalize_address(exchange_addr)
        if exchange_addr == self.address:
            raise InvalidExchange("Cannot route a trade back into the same exchange")
        return self._exchange_at(exchange_addr)

    def _registered_exchange(self, token_addr: str) -> str:
        exchange_addr = self._registry_lookup(token_addr)
        if is_zero_address(exchange_addr):
            raise InvalidExchange(f"No exchange registered for token {token_addr}")
        if exchange_addr == self.address:
            raise InvalidExchange("Cannot route a trade back into the same exchange")
        return exchange_addr

    # --- Registry-resolved routes ---

    @external
    def token_to_token_swap_input(
        self,
        tokens_sold: int,
        min_tokens_bought: int,
        min_eth_bought: int,
        deadline: int,
        token_addr: str,
        *,
        sender: str,
    ) -> int:
        """Sell exactly ``tokens_sold`` for the token at ``token_addr``.

        Args:
            tokens_sold: Amount of this exchange's token sold
            min_tokens_bought: Minimum output token received
            min_eth_bought: Minimum base asset carried between the two pools
            deadline: Last valid timestamp, forwarded to the second leg
            token_addr: Output token; its exchange comes from the registry
            sender: Buyer and recipient

        Returns:
            Output tokens bought
        """
        buyer = normalize_address(sender)
        return self._token_to_token_input(
            tokens_sold,
            min_tokens_bought,
            min_eth_bought,
            deadline,
            buyer,
            buyer,
            self._registered_exchange(token_addr),
        )

    @external
    def token_to_token_transfer_input(
        self,
        tokens_sold: int,
        min_tokens_bought: int,
        min_eth_bought: int,
        deadline: int,
        recipient: str,
        token_addr: str,
        *,
        sender: str,
    ) -> int:
        recipient = require_recipient(recipient, self.address)
        return self._token_to_token_input(
            tokens_sold,
            min_tokens_bought,
            min_eth_bought,
            deadline,
            normalize_address(sender),
            recipient,
            self._registered_exchange(token_addr),
        )

    @external
    def token_to_token_swap_output(
        self,
        tokens_bought: int,
        max_tokens_sold: int,
        max_eth_sold: int,
        deadline: int,
        token_addr: str,
        *,
        sender: str,
    ) -> int:
        """Buy exactly ``tokens_bought`` of ``token_addr``; returns tokens sold."""
        buyer = normalize_address(sender)
        return self._token_to_token_output(
            tokens_bought,
            max_tokens_sold,
            max_eth_sold,
            deadline,
            buyer,
            buyer,
            self._registered_exchange(token_addr),
        )

    @external
    def token_to_token_transfer_output(
        self,
        tokens_bought: int,
        max_tokens_sold: int,
        max_eth_sold: int,
        deadline: int,
        recipient: str,
        token_addr: str,
        *,
        sender: str,
    ) -> int:
        recipient = require_recipient(recipient, self.address)
        return self._token_to_token_output(
            tokens_bought,
            max_tokens_sold,
            max_eth_sold,
            deadline,
            normalize_address(sender),
            recipient,
            self._registered_exchange(token_addr),
        )

    # --- Explicit-exchange routes ---
    # The target need not be in this exchange's registry.

    @external
    def token_to_exchange_swap_input(
        self,
        tokens_sold: int,
        min_tokens_bought: int,
        min_eth_bought: int,
        deadline: int,
        exchange_addr: str,
        *,
        sender: str,
    ) -> int:
        buyer = normalize_address(sender)
        return self._token_to_token_input(
            tokens_sold, min_tokens_bought, min_eth_bought, deadline, buyer, buyer, exchange_addr
        )

    @external
    def token_to_exchange_transfer_input(
        self,
        tokens_sold: int,
        min_tokens_bought: int,
        min_eth_bought: int,
        deadline: int,
        recipient: str,
        exchange_addr: str,
        *,
        sender: str,
    ) -> int:
        recipient = require_recipient(recipient, self.address)
        return self._token_to_token_input(
            tokens_sold,
            min_tokens_bought,
            min_eth_bought,
            deadline,
            normalize_address(sender),
            recipient,
            exchange_addr,
        )

    @external
    def token_to_exchange_swap_output(
        self,
        tokens_bought: int,
        max_tokens_sold: int,
        max_eth_sold: int,
        deadline: int,
        exchange_addr: str,
        *,
        sender: str,
    ) -> int:
        buyer = normalize_address(sender)
        return self._token_to_token_output(
            tokens_bought, max_tokens_sold, max_eth_sold, deadline, buyer, buyer, exchange_addr
        )

    @external
    def token_to_exchange_transfer_output(
        self,
        tokens_bought: int,
        max_tokens_sold: int,
        max_eth_sold: int,
        deadline: int,
        recipient: str,
        exchange_addr: str,
        *,
        sender: str,
    ) -> int:
        recipient = require_recipient(recipient, self.address)
        return self._token_to_token_output(
            tokens_bought,
            max_tokens_sold,
            max_eth_sold,
            deadline,
            normalize_address(sender),
            recipient,
            exchange_addr,
        )


__all__ = ["RoutingEngine"]
