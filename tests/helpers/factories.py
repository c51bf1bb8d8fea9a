"""Factory functions for setting up accounts and pools in tests.

Usage:
    from tests.helpers import make_trader

    alice = make_trader(deployment, token, eth=500, tokens=1000, spender=exchange)
"""

from amm.deployment import Deployment
from amm.exchange import Exchange
from amm.token import Token


def make_trader(
    deployment: Deployment,
    token: Token | None = None,
    eth: int = 0,
    tokens: int = 0,
    spender: Exchange | None = None,
    label: str = "trader",
) -> str:
    """Create a funded account.

    Args:
        deployment: Deployment whose chain the account lives on
        token: Token to mint to the account (optional)
        eth: Base asset to issue to the account
        tokens: Tokens to mint to the account
        spender: If given, approve it for the full token amount
        label: Account label, used only to derive the address

    Returns:
        The account address
    """
    account = deployment.chain.new_account(label, balance=eth)
    if token is not None and tokens:
        token.mint(account, tokens, sender=token.owner())
        if spender is not None:
            token.approve(spender.address, tokens, sender=account)
    return account


def pool_reserves(exchange: Exchange) -> tuple[int, int]:
    """(eth_reserve, token_reserve) of an exchange."""
    return exchange.eth_reserve(), exchange.token_reserve()
