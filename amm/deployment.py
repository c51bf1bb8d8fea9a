"""Helpers for standing up a chain with a registry, tokens and seeded pools."""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from amm.chain import Chain
from amm.config import DEFAULT_EXCHANGE_CONFIG, ExchangeConfig
from amm.exchange import Exchange
from amm.factory import Factory
from amm.token import Token

logger = structlog.get_logger()


@dataclass
class Deployment:
    """A chain plus the registry deployed on it."""

    chain: Chain
    factory: Factory
    deployer: str

    def deploy_token(
        self, name: str, symbol: str, initial_supply: int = 0, decimals: int = 18
    ) -> Token:
        return self.chain.deploy(
            Token,
            name,
            symbol,
            decimals=decimals,
            initial_supply=initial_supply,
            sender=self.deployer,
        )

    def create_exchange(self, token: Token | str) -> Exchange:
        token_addr = token if isinstance(token, str) else token.address
        address = self.factory.create_exchange(token_addr, sender=self.deployer)
        return self.chain.get_contract(address)  # type: ignore[return-value]

    def exchange_for(self, token: Token | str) -> Exchange | None:
        return self.factory.exchange_for(token if isinstance(token, str) else token.address)

    def seed_pool(
        self,
        token: Token,
        eth_amount: int,
        token_amount: int,
        provider: str | None = None,
    ) -> Exchange:
        """Create (if needed) and fund the exchange for ``token``.

        The provider (default: the deployer) receives freshly issued base
        asset and tokens and becomes the first liquidity provider. Runs as
        one atomic call: if the deposit fails, the exchange creation and the
        issued funds are undone too.

        Raises:
            ExceededSold: If the pool is active and token_amount is below the
                proportional amount for eth_amount
        """
        provider = provider or self.deployer
        with self.chain.atomic():
            exchange = self.exchange_for(token) or self.create_exchange(token)
            self.chain.fund(provider, eth_amount)
            token.mint(provider, token_amount, sender=token.owner())
            token.approve(exchange.address, token_amount, sender=provider)
            exchange.add_liquidity(
                0 if exchange.total_supply() == 0 else 1,
                token_amount,
                self.chain.timestamp,
                sender=provider,
                value=eth_amount,
            )
        logger.info(
            "pool_seeded",
            exchange=exchange.address,
            token=token.address,
            eth_amount=eth_amount,
            token_amount=token_amount,
        )
        return exchange


def deploy(
    chain: Chain | None = None,
    config: ExchangeConfig = DEFAULT_EXCHANGE_CONFIG,
) -> Deployment:
    """Deploy a registry on ``chain`` (a fresh chain by default)."""
    chain = chain or Chain()
    deployer = chain.new_account("deployer")
    factory = chain.deploy(Factory, config=config, sender=deployer)
    logger.info("factory_deployed", factory=factory.address, fee_bps=config.fee_bps)
    return Deployment(chain=chain, factory=factory, deployer=deployer)


_default_deployment: Deployment | None = None


def get_default_deployment() -> Deployment:
    """Process-wide deployment used by the quote service."""
    global _default_deployment
    if _default_deployment is None:
        _default_deployment = deploy()
    return _default_deployment


__all__ = ["Deployment", "deploy", "get_default_deployment"]
