"""Tests for hostile token ledgers: callbacks and silent failures."""

import pytest

from amm.chain import external
from amm.errors import InsufficientBalance, TransferFailed
from amm.token import Token
from amm.types import normalize_address
from tests.helpers import NOW, make_trader, pool_reserves


class ReentrantToken(Token):
    """Calls back into an exchange before paying out to a chosen account."""

    def arm(self, exchange_addr: str, victim: str, shares: int) -> None:
        self.storage["reenter"] = (
            normalize_address(exchange_addr),
            normalize_address(victim),
            shares,
        )

    @external
    def transfer(self, to: str, amount: int, *, sender: str) -> bool:
        hook = self.storage.get("reenter")
        if hook is not None and normalize_address(sender) == hook[0]:
            exchange_addr, victim, shares = hook
            self.storage["reenter"] = None
            exchange = self.chain.get_contract(exchange_addr)
            exchange.remove_liquidity(shares, 1, 1, self.chain.timestamp, sender=victim)
        return super().transfer(to, amount, sender=sender)


class SilentToken(Token):
    """Reports failure instead of raising once silenced."""

    def silence(self) -> None:
        self.storage["silent"] = True

    @external
    def transfer(self, to: str, amount: int, *, sender: str) -> bool:
        if self.storage.get("silent"):
            return False
        return super().transfer(to, amount, sender=sender)

    @external
    def transfer_from(self, owner: str, to: str, amount: int, *, sender: str) -> bool:
        if self.storage.get("silent"):
            return False
        return super().transfer_from(owner, to, amount, sender=sender)


@pytest.fixture
def reentrant(small_deployment):
    token = small_deployment.chain.deploy(
        ReentrantToken, "Reentrant", "RNT", sender=small_deployment.deployer
    )
    exchange = small_deployment.seed_pool(token, 1000, 2000)
    return token, exchange


@pytest.fixture
def silent(small_deployment):
    token = small_deployment.chain.deploy(
        SilentToken, "Silent", "SIL", sender=small_deployment.deployer
    )
    exchange = small_deployment.seed_pool(token, 1000, 2000)
    return token, exchange


class TestReentrantWithdrawal:
    """Shares are burned before payout, so a nested withdrawal cannot reuse them."""

    def test_nested_withdrawal_reverts_everything(self, reentrant, small_deployment):
        token, exchange = reentrant
        chain = small_deployment.chain
        provider = make_trader(small_deployment, token, eth=100, tokens=200, spender=exchange)
        assert exchange.add_liquidity(1, 200, NOW, sender=provider, value=100) == 100

        token.arm(exchange.address, provider, 100)
        with pytest.raises(InsufficientBalance):
            exchange.remove_liquidity(100, 1, 1, NOW, sender=provider)

        assert exchange.balance_of(provider) == 100
        assert exchange.total_supply() == 1100
        assert pool_reserves(exchange) == (1100, 2200)
        assert chain.balance_of(provider) == 0
        assert token.storage["reenter"] is not None

    def test_withdrawal_without_callback(self, reentrant, small_deployment):
        token, exchange = reentrant
        provider = make_trader(small_deployment, token, eth=100, tokens=200, spender=exchange)
        exchange.add_liquidity(1, 200, NOW, sender=provider, value=100)

        assert exchange.remove_liquidity(100, 1, 1, NOW, sender=provider) == (100, 200)
        assert token.balance_of(provider) == 200


class TestSilentLedger:
    """A ledger returning False is treated as a failed transfer."""

    def test_payout_failure(self, silent, small_deployment):
        token, exchange = silent
        buyer = make_trader(small_deployment, eth=100)
        token.silence()

        with pytest.raises(TransferFailed):
            exchange.eth_to_token_swap_input(1, NOW, sender=buyer, value=100)

        assert small_deployment.chain.balance_of(buyer) == 100
        assert pool_reserves(exchange) == (1000, 2000)

    def test_pull_failure(self, silent, small_deployment):
        token, exchange = silent
        seller = make_trader(small_deployment, token, tokens=200, spender=exchange)
        token.silence()

        with pytest.raises(TransferFailed):
            exchange.token_to_eth_swap_input(200, 1, NOW, sender=seller)

        assert small_deployment.chain.balance_of(seller) == 0
        assert exchange.eth_reserve() == 1000

    def test_withdrawal_failure_keeps_shares(self, silent, small_deployment):
        token, exchange = silent
        token.silence()

        with pytest.raises(TransferFailed):
            exchange.remove_liquidity(500, 1, 1, NOW, sender=small_deployment.deployer)

        assert exchange.balance_of(small_deployment.deployer) == 1000
        assert exchange.eth_reserve() == 1000
