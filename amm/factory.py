"""Exchange registry.

The factory deploys one exchange per token, binds it with ``setup`` in the
same call, and indexes the pair both ways. Token ids are assigned in
creation order starting at 1 and are never reused.
"""

from __future__ import annotations

import structlog

from amm.chain import Contract, external
from amm.config import DEFAULT_EXCHANGE_CONFIG, ExchangeConfig
from amm.constants import FIRST_TOKEN_ID, ZERO_ADDRESS
from amm.errors import InvalidToken
from amm.events import NewExchange
from amm.exchange import Exchange
from amm.token import FungibleLedger
from amm.types import is_zero_address, normalize_address

logger = structlog.get_logger()


class Factory(Contract):
    """Creates and indexes exchanges.

    Args (on_deploy):
        config: Passed to every exchange this factory creates
        template: Exchange class to instantiate
    """

    def on_deploy(
        self,
        deployer: str,
        config: ExchangeConfig = DEFAULT_EXCHANGE_CONFIG,
        template: type[Exchange] = Exchange,
    ) -> None:
        storage = self.storage
        storage["config"] = config
        storage["template"] = template
        storage["token_count"] = 0
        storage["token_to_exchange"] = {}
        storage["exchange_to_token"] = {}
        storage["id_to_token"] = {}

    @property
    def config(self) -> ExchangeConfig:
        return self.storage["config"]

    @external
    def create_exchange(self, token: str, *, sender: str) -> str:
        """Deploy and register the exchange for ``token``.

        Returns:
            Address of the new exchange

        Raises:
            InvalidToken: If token is zero, has no ledger deployed, or already
                has an exchange
        """
        if is_zero_address(token):
            raise InvalidToken("Token address cannot be zero")
        token = normalize_address(token)
        if not isinstance(self.chain.get_contract(token), FungibleLedger):
            raise InvalidToken(f"No token ledger deployed at {token}")
        if self.get_exchange(token) != ZERO_ADDRESS:
            raise InvalidToken(f"Token {token} already has exchange {self.get_exchange(token)}")

        storage = self.storage
        exchange = self.chain.deploy(storage["template"], sender=self.address, config=self.config)
        exchange.setup(token, sender=self.address)

        token_id = storage["token_count"] + FIRST_TOKEN_ID
        storage["token_count"] += 1
        storage["token_to_exchange"][token] = exchange.address
        storage["exchange_to_token"][exchange.address] = token
        storage["id_to_token"][token_id] = token
        self.emit(NewExchange(token=token, exchange=exchange.address))

        logger.info(
            "exchange_created",
            factory=self.address,
            token=token,
            exchange=exchange.address,
            token_id=token_id,
            creator=normalize_address(sender),
        )
        return exchange.address

    # --- Lookups ---

    def get_exchange(self, token: str) -> str:
        """Exchange address for token, or the zero address."""
        return self.storage["token_to_exchange"].get(normalize_address(token), ZERO_ADDRESS)

    def get_token(self, exchange: str) -> str:
        """Token address for exchange, or the zero address."""
        return self.storage["exchange_to_token"].get(normalize_address(exchange), ZERO_ADDRESS)

    def get_token_with_id(self, token_id: int) -> str:
        """Token registered under token_id, or the zero address."""
        return self.storage["id_to_token"].get(token_id, ZERO_ADDRESS)

    def token_count(self) -> int:
        return self.storage["token_count"]

    def exchange_for(self, token: str) -> Exchange | None:
        """Resolve the registered Exchange object for token."""
        address = self.get_exchange(token)
        if address == ZERO_ADDRESS:
            return None
        exchange = self.chain.get_contract(address)
        return exchange if isinstance(exchange, Exchange) else None

    def registered(self) -> list[tuple[int, str, str]]:
        """All (token_id, token, exchange) records in id order."""
        return [
            (token_id, token, self.get_exchange(token))
            for token_id, token in sorted(self.storage["id_to_token"].items())
        ]


__all__ = ["Factory"]
