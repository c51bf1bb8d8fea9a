"""Events emitted by exchanges, ledgers and the registry.

Each event knows its ABI field types, so indexers can consume the same
payload layout an on-chain log would carry.
"""

from __future__ import annotations

from dataclasses import astuple, dataclass, fields
from typing import ClassVar

from eth_abi import encode  # type: ignore[attr-defined]

from amm.types import address_to_bytes


@dataclass(frozen=True)
class Event:
    """Base class for emitted events."""

    ABI_TYPES: ClassVar[tuple[str, ...]] = ()

    @property
    def name(self) -> str:
        return type(self).__name__

    @property
    def signature(self) -> str:
        """Canonical signature, e.g. ``TokenPurchase(address,uint256,uint256)``."""
        return f"{self.name}({','.join(self.ABI_TYPES)})"

    def encode(self) -> bytes:
        """ABI-encode the event fields in declaration order."""
        values = [
            address_to_bytes(value) if abi_type == "address" else value
            for abi_type, value in zip(self.ABI_TYPES, astuple(self), strict=True)
        ]
        return encode(list(self.ABI_TYPES), values)

    def as_dict(self) -> dict[str, object]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class TokenPurchase(Event):
    """Base asset sold for tokens."""

    ABI_TYPES: ClassVar[tuple[str, ...]] = ("address", "uint256", "uint256")

    buyer: str
    eth_sold: int
    tokens_bought: int


@dataclass(frozen=True)
class EthPurchase(Event):
    """Tokens sold for base asset."""

    ABI_TYPES: ClassVar[tuple[str, ...]] = ("address", "uint256", "uint256")

    buyer: str
    tokens_sold: int
    eth_bought: int


@dataclass(frozen=True)
class AddLiquidity(Event):
    ABI_TYPES: ClassVar[tuple[str, ...]] = ("address", "uint256", "uint256")

    provider: str
    eth_amount: int
    token_amount: int


@dataclass(frozen=True)
class RemoveLiquidity(Event):
    ABI_TYPES: ClassVar[tuple[str, ...]] = ("address", "uint256", "uint256")

    provider: str
    eth_amount: int
    token_amount: int


@dataclass(frozen=True)
class Transfer(Event):
    """Ledger movement; mints come from and burns go to the zero address."""

    ABI_TYPES: ClassVar[tuple[str, ...]] = ("address", "address", "uint256")

    sender: str
    receiver: str
    value: int


@dataclass(frozen=True)
class Approval(Event):
    ABI_TYPES: ClassVar[tuple[str, ...]] = ("address", "address", "uint256")

    owner: str
    spender: str
    value: int


@dataclass(frozen=True)
class NewExchange(Event):
    ABI_TYPES: ClassVar[tuple[str, ...]] = ("address", "address")

    token: str
    exchange: str


@dataclass(frozen=True)
class Log:
    """An event together with the address that emitted it."""

    address: str
    event: Event


__all__ = [
    "Event",
    "TokenPurchase",
    "EthPurchase",
    "AddLiquidity",
    "RemoveLiquidity",
    "Transfer",
    "Approval",
    "NewExchange",
    "Log",
]
