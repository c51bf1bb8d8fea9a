"""Tests for the fungible token ledger."""

import pytest

from amm.constants import UINT256_MAX, ZERO_ADDRESS
from amm.errors import InsufficientAllowance, InsufficientBalance, InvalidAmount, Unauthorized
from amm.events import Approval, Transfer
from amm.token import Token


@pytest.fixture
def owner(chain) -> str:
    return chain.new_account("owner")


@pytest.fixture
def ledger(chain, owner) -> Token:
    return chain.deploy(Token, "Test Token", "TST", decimals=6, initial_supply=1000, sender=owner)


class TestTokenMetadata:
    def test_metadata(self, ledger, owner):
        assert ledger.name() == "Test Token"
        assert ledger.symbol() == "TST"
        assert ledger.decimals() == 6
        assert ledger.owner() == owner

    def test_initial_supply_minted_to_deployer(self, chain, ledger, owner):
        assert ledger.total_supply() == 1000
        assert ledger.balance_of(owner) == 1000
        assert chain.events(Transfer)[-1] == Transfer(
            sender=ZERO_ADDRESS, receiver=owner, value=1000
        )


class TestTransfer:
    """Tests for transfer and transfer_from."""

    def test_transfer(self, chain, ledger, owner):
        receiver = chain.new_account("receiver")
        assert ledger.transfer(receiver, 300, sender=owner) is True
        assert ledger.balance_of(owner) == 700
        assert ledger.balance_of(receiver) == 300
        assert ledger.total_supply() == 1000

    def test_transfer_too_much(self, chain, ledger, owner):
        with pytest.raises(InsufficientBalance):
            ledger.transfer(chain.new_account("receiver"), 1001, sender=owner)
        assert ledger.balance_of(owner) == 1000

    def test_transfer_from_uses_allowance(self, chain, ledger, owner):
        spender = chain.new_account("spender")
        receiver = chain.new_account("receiver")
        assert ledger.approve(spender, 500, sender=owner) is True
        assert chain.events(Approval)[-1] == Approval(owner=owner, spender=spender, value=500)

        assert ledger.transfer_from(owner, receiver, 200, sender=spender) is True
        assert ledger.allowance(owner, spender) == 300
        assert ledger.balance_of(receiver) == 200

    def test_transfer_from_without_allowance(self, chain, ledger, owner):
        spender = chain.new_account("spender")
        ledger.approve(spender, 10, sender=owner)
        with pytest.raises(InsufficientAllowance):
            ledger.transfer_from(owner, spender, 11, sender=spender)
        assert ledger.allowance(owner, spender) == 10

    def test_allowance_kept_when_balance_short(self, chain, ledger, owner):
        """A failing move does not consume the allowance."""
        spender = chain.new_account("spender")
        ledger.approve(spender, 5000, sender=owner)
        with pytest.raises(InsufficientBalance):
            ledger.transfer_from(owner, spender, 2000, sender=spender)
        assert ledger.allowance(owner, spender) == 5000

    def test_approve_overwrites(self, chain, ledger, owner):
        spender = chain.new_account("spender")
        ledger.approve(spender, 10, sender=owner)
        ledger.approve(spender, 3, sender=owner)
        assert ledger.allowance(owner, spender) == 3

    @pytest.mark.parametrize("amount", [-1, UINT256_MAX + 1, True, 1.5])
    def test_invalid_amounts(self, chain, ledger, owner, amount):
        with pytest.raises(InvalidAmount):
            ledger.transfer(chain.new_account("receiver"), amount, sender=owner)


class TestMint:
    def test_owner_can_mint(self, chain, ledger, owner):
        receiver = chain.new_account("receiver")
        ledger.mint(receiver, 50, sender=owner)
        assert ledger.balance_of(receiver) == 50
        assert ledger.total_supply() == 1050

    def test_others_cannot_mint(self, chain, ledger):
        intruder = chain.new_account("intruder")
        with pytest.raises(Unauthorized):
            ledger.mint(intruder, 50, sender=intruder)
        assert ledger.total_supply() == 1000

    def test_supply_cannot_overflow(self, ledger, owner):
        with pytest.raises(InvalidAmount):
            ledger.mint(owner, UINT256_MAX, sender=owner)
