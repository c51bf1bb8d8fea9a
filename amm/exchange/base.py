"""Exchange state, one-shot setup, reserve reads and settlement legs."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

import structlog

from amm.chain import external
from amm.config import DEFAULT_EXCHANGE_CONFIG, ExchangeConfig
from amm.constants import SHARE_DECIMALS, SHARE_NAME, SHARE_SYMBOL, ZERO_ADDRESS
from amm.errors import (
    AlreadyInitialized,
    InvalidExchange,
    InvalidToken,
    NotInitialized,
    TransferFailed,
)
from amm.pricing import ConstantProductPricing
from amm.token import FungibleLedger
from amm.types import is_zero_address, normalize_address

if TYPE_CHECKING:
    from amm.exchange.exchange import Exchange
    from amm.factory import Factory

logger = structlog.get_logger()


class ExchangeStatus(str, Enum):
    """Setup state; moves UNINITIALIZED -> READY exactly once."""

    UNINITIALIZED = "uninitialized"
    READY = "ready"


class ExchangeBase(FungibleLedger):
    """Storage layout and plumbing shared by the liquidity, swap and routing engines.

    The exchange is its own liquidity-share ledger. Reserves are never
    cached: the base-asset reserve is the native balance of this address and
    the token reserve is this address's balance on the token ledger.
    """

    def on_deploy(self, deployer: str, config: ExchangeConfig = DEFAULT_EXCHANGE_CONFIG) -> None:
        self._init_ledger(SHARE_NAME, SHARE_SYMBOL, SHARE_DECIMALS)
        storage = self.storage
        storage["config"] = config
        storage["token"] = ZERO_ADDRESS
        storage["factory"] = ZERO_ADDRESS
        storage["status"] = ExchangeStatus.UNINITIALIZED

    @external
    def setup(self, token_addr: str, *, sender: str) -> None:
        """Bind this exchange to its token; the caller becomes its registry.

        Raises:
            AlreadyInitialized: If setup already ran
            InvalidToken: If token_addr is the zero address
        """
        if self.status is not ExchangeStatus.UNINITIALIZED:
            raise AlreadyInitialized(f"Exchange {self.address} is already set up")
        if is_zero_address(token_addr):
            raise InvalidToken("Token address cannot be zero")

        storage = self.storage
        storage["token"] = normalize_address(token_addr)
        storage["factory"] = normalize_address(sender)
        storage["status"] = ExchangeStatus.READY

    # --- Accessors ---

    @property
    def status(self) -> ExchangeStatus:
        return self.storage["status"]

    @property
    def config(self) -> ExchangeConfig:
        return self.storage["config"]

    @property
    def pricing(self) -> ConstantProductPricing:
        return ConstantProductPricing(self.config)

    def token_address(self) -> str:
        return self.storage["token"]

    def factory_address(self) -> str:
        return self.storage["factory"]

    @property
    def token(self) -> FungibleLedger:
        self._require_ready()
        token = self.chain.get_contract(self.token_address())
        if not isinstance(token, FungibleLedger):
            raise InvalidToken(f"No token ledger deployed at {self.token_address()}")
        return token

    def _registry_lookup(self, token_addr: str) -> str:
        """Exchange our registry holds for token_addr; zero if none or no registry."""
        self._require_ready()
        registry: Factory | None = self.chain.get_contract(self.factory_address())  # type: ignore[assignment]
        lookup = getattr(registry, "get_exchange", None)
        if lookup is None:
            return ZERO_ADDRESS
        return lookup(token_addr)

    def _require_ready(self) -> None:
        if self.status is not ExchangeStatus.READY:
            raise NotInitialized(f"Exchange {self.address} has no token yet")

    # --- Reserves ---

    def eth_reserve(self) -> int:
        return self.balance

    def token_reserve(self) -> int:
        return self.token.balance_of(self.address)

    def _exchange_at(self, address: str) -> Exchange:
        from amm.exchange.exchange import Exchange

        exchange = self.chain.get_contract(address)
        if not isinstance(exchange, Exchange):
            raise InvalidExchange(f"No exchange deployed at {address}")
        return exchange

    # --- Settlement legs ---

    def _pull_tokens(self, owner: str, amount: int) -> None:
        if not self.token.transfer_from(owner, self.address, amount, sender=self.address):
            raise TransferFailed(f"Pulling {amount} tokens from {owner} failed")

    def _push_tokens(self, to: str, amount: int) -> None:
        if not self.token.transfer(to, amount, sender=self.address):
            raise TransferFailed(f"Sending {amount} tokens to {to} failed")

    def _send_eth(self, to: str, amount: int) -> None:
        self.chain.transfer_native(self.address, to, amount)


__all__ = ["ExchangeBase", "ExchangeStatus"]
