"""Fungible-token ledgers.

FungibleLedger is the balance/allowance bookkeeping shared by plain tokens
and by each exchange's liquidity shares. Token adds an owner-only mint so
deployments and tests can issue supply.
"""

from __future__ import annotations

import structlog

from amm.chain import Contract, external
from amm.constants import UINT256_MAX, ZERO_ADDRESS
from amm.errors import InsufficientAllowance, InsufficientBalance, InvalidAmount, Unauthorized
from amm.events import Approval, Transfer
from amm.types import normalize_address

logger = structlog.get_logger()


class FungibleLedger(Contract):
    """ERC20-style balances and allowances kept in contract storage."""

    def _init_ledger(self, name: str, symbol: str, decimals: int) -> None:
        storage = self.storage
        storage["name"] = name
        storage["symbol"] = symbol
        storage["decimals"] = decimals
        storage["total_supply"] = 0
        storage["balances"] = {}
        storage["allowances"] = {}

    # --- Views ---

    def name(self) -> str:
        return self.storage["name"]

    def symbol(self) -> str:
        return self.storage["symbol"]

    def decimals(self) -> int:
        return self.storage["decimals"]

    def total_supply(self) -> int:
        return self.storage["total_supply"]

    def balance_of(self, owner: str) -> int:
        return self.storage["balances"].get(normalize_address(owner), 0)

    def allowance(self, owner: str, spender: str) -> int:
        owner_allowances = self.storage["allowances"].get(normalize_address(owner), {})
        return owner_allowances.get(normalize_address(spender), 0)

    # --- External calls ---

    @external
    def transfer(self, to: str, amount: int, *, sender: str) -> bool:
        self._move(sender, to, amount)
        return True

    @external
    def transfer_from(self, owner: str, to: str, amount: int, *, sender: str) -> bool:
        """Move tokens out of ``owner`` using the allowance granted to ``sender``."""
        _check_amount(amount)
        owner = normalize_address(owner)
        sender = normalize_address(sender)
        allowed = self.allowance(owner, sender)
        if allowed < amount:
            raise InsufficientAllowance(
                f"{sender} may move {allowed} of {owner}'s tokens, requested {amount}"
            )
        self.storage["allowances"].setdefault(owner, {})[sender] = allowed - amount
        self._move(owner, to, amount)
        return True

    @external
    def approve(self, spender: str, amount: int, *, sender: str) -> bool:
        _check_amount(amount)
        owner = normalize_address(sender)
        spender = normalize_address(spender)
        self.storage["allowances"].setdefault(owner, {})[spender] = amount
        self.emit(Approval(owner=owner, spender=spender, value=amount))
        return True

    # --- Internal bookkeeping ---

    def _move(self, sender: str, to: str, amount: int) -> None:
        _check_amount(amount)
        sender = normalize_address(sender)
        to = normalize_address(to)
        balances = self.storage["balances"]
        balance = balances.get(sender, 0)
        if balance < amount:
            raise InsufficientBalance(f"{sender} holds {balance} {self.symbol()}, needs {amount}")
        balances[sender] = balance - amount
        balances[to] = balances.get(to, 0) + amount
        self.emit(Transfer(sender=sender, receiver=to, value=amount))

    def _mint(self, to: str, amount: int) -> None:
        _check_amount(amount)
        to = normalize_address(to)
        storage = self.storage
        if storage["total_supply"] + amount > UINT256_MAX:
            raise InvalidAmount(f"Minting {amount} would overflow total supply")
        storage["total_supply"] += amount
        storage["balances"][to] = storage["balances"].get(to, 0) + amount
        self.emit(Transfer(sender=ZERO_ADDRESS, receiver=to, value=amount))

    def _burn(self, owner: str, amount: int) -> None:
        _check_amount(amount)
        owner = normalize_address(owner)
        storage = self.storage
        balance = storage["balances"].get(owner, 0)
        if balance < amount:
            raise InsufficientBalance(f"{owner} holds {balance} {self.symbol()}, cannot burn {amount}")
        storage["balances"][owner] = balance - amount
        storage["total_supply"] -= amount
        self.emit(Transfer(sender=owner, receiver=ZERO_ADDRESS, value=amount))


class Token(FungibleLedger):
    """Mintable token; the deployer is the owner."""

    def on_deploy(
        self,
        deployer: str,
        name: str,
        symbol: str,
        decimals: int = 18,
        initial_supply: int = 0,
    ) -> None:
        self._init_ledger(name, symbol, decimals)
        self.storage["owner"] = normalize_address(deployer)
        if initial_supply:
            self._mint(deployer, initial_supply)
        logger.debug("token_deployed", token=self.address, symbol=symbol, supply=initial_supply)

    def owner(self) -> str:
        return self.storage["owner"]

    @external
    def mint(self, to: str, amount: int, *, sender: str) -> None:
        if normalize_address(sender) != self.owner():
            raise Unauthorized(f"Only {self.owner()} may mint {self.symbol()}")
        self._mint(to, amount)


def _check_amount(amount: int) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmount(f"Amount must be an integer, got {type(amount).__name__}")
    if not 0 <= amount <= UINT256_MAX:
        raise InvalidAmount(f"Amount out of uint256 range: {amount}")


__all__ = ["FungibleLedger", "Token"]
