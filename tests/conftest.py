"""Pytest configuration and fixtures."""

import pytest

from amm.chain import Chain
from amm.deployment import Deployment, deploy
from amm.exchange import Exchange
from amm.token import Token
from tests.helpers import (
    NOW,
    POOL_B_ETH,
    POOL_B_TOKENS,
    POOL_ETH,
    POOL_TOKENS,
    SMALL_POOL_CONFIG,
    make_trader,
)


@pytest.fixture
def chain() -> Chain:
    """A fresh chain pinned at NOW."""
    return Chain(timestamp=NOW)


@pytest.fixture
def deployment(chain: Chain) -> Deployment:
    """Registry with the default configuration."""
    return deploy(chain)


@pytest.fixture
def small_deployment(chain: Chain) -> Deployment:
    """Registry whose exchanges accept bootstrap deposits of any size."""
    return deploy(chain, SMALL_POOL_CONFIG)


@pytest.fixture
def token(small_deployment: Deployment) -> Token:
    return small_deployment.deploy_token("Token A", "TKA")


@pytest.fixture
def token_b(small_deployment: Deployment) -> Token:
    return small_deployment.deploy_token("Token B", "TKB")


@pytest.fixture
def empty_exchange(small_deployment: Deployment, token: Token) -> Exchange:
    """Registered exchange with no liquidity yet."""
    return small_deployment.create_exchange(token)


@pytest.fixture
def exchange(small_deployment: Deployment, token: Token) -> Exchange:
    """Reference pool: (1000 eth, 2000 tokens), 1000 shares held by the deployer."""
    return small_deployment.seed_pool(token, POOL_ETH, POOL_TOKENS)


@pytest.fixture
def exchange_b(small_deployment: Deployment, token_b: Token) -> Exchange:
    """Second pool for routing: (1000 eth, 3000 tokens)."""
    return small_deployment.seed_pool(token_b, POOL_B_ETH, POOL_B_TOKENS)


@pytest.fixture
def alice(small_deployment: Deployment, token: Token, exchange: Exchange) -> str:
    """Trader holding 1000 eth and 1000 tokens, tokens approved to the exchange."""
    return make_trader(
        small_deployment, token, eth=1000, tokens=1000, spender=exchange, label="alice"
    )


@pytest.fixture
def bob(small_deployment: Deployment) -> str:
    """Unfunded account, used as a third-party recipient."""
    return small_deployment.chain.new_account("bob")
