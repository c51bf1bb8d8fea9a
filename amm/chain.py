"""In-process ledger that exchanges, tokens and the registry execute on.

The chain owns the whole world state: native balances, per-contract storage,
deployment nonces and the event log. Contracts keep no state on the Python
object itself, they read and write ``chain.storage_of(address)``. That makes
atomicity a property of the chain rather than of each contract: every
external call runs inside ``Chain.atomic()``, which journals the prior value of
everything the frame writes and puts those values back if anything below
raises. The log is append-only, so a revert just cuts it back to its length
on entry.

Calls are strictly sequential. Nested calls (an exchange pulling tokens from
a ledger, or calling another exchange while routing) open nested frames, and
a failure in any frame unwinds every frame above it.
"""

from __future__ import annotations

import copy
import functools
import hashlib
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

import structlog

from amm.errors import InsufficientBalance, InvalidAmount
from amm.events import Event, Log
from amm.types import normalize_address

logger = structlog.get_logger()

P = ParamSpec("P")
R = TypeVar("R")
C = TypeVar("C", bound="Contract")


@dataclass
class WorldState:
    """Everything a revert has to restore."""

    balances: dict[str, int] = field(default_factory=dict)
    storage: dict[str, dict[str, Any]] = field(default_factory=dict)
    nonces: dict[str, int] = field(default_factory=dict)
    logs: list[Log] = field(default_factory=list)


# Journal marker for a key that did not exist before the frame wrote it
_MISSING = object()


@dataclass
class Frame:
    """Undo journal for one open call frame.

    Each mapping holds, per key, the value it had before this frame first
    touched it. Contract storage is copied whole the first time a frame
    hands it out, since contracts mutate it in place.
    """

    log_count: int
    balances: dict[str, Any] = field(default_factory=dict)
    nonces: dict[str, Any] = field(default_factory=dict)
    storage: dict[str, Any] = field(default_factory=dict)


_JOURNALED = ("balances", "nonces", "storage")


class Chain:
    """Sequential ledger with a settable clock and atomic call frames.

    Args:
        timestamp: Current time in unix seconds. Defaults to wall-clock time.
    """

    def __init__(self, timestamp: int | None = None) -> None:
        self.timestamp = int(time.time()) if timestamp is None else timestamp
        self._state = WorldState()
        # Python objects for deployed code; reachability is decided by
        # WorldState.storage so a reverted deployment disappears.
        self._contracts: dict[str, Contract] = {}
        self._account_counter = 0
        self._depth = 0
        self._frames: list[Frame] = []

    # --- Clock ---

    def advance_time(self, seconds: int) -> int:
        if seconds < 0:
            raise ValueError(f"Cannot move the clock backwards by {seconds}s")
        self.timestamp += seconds
        return self.timestamp

    # --- Accounts and native balances ---

    def new_account(self, label: str = "account", balance: int = 0) -> str:
        """Create a fresh externally owned address, optionally funded."""
        self._account_counter += 1
        address = _derive_address(f"account:{label}:{self._account_counter}")
        if balance:
            self.fund(address, balance)
        return address

    def fund(self, address: str, amount: int) -> None:
        """Credit newly issued base asset to an address."""
        if amount < 0:
            raise InvalidAmount(f"Cannot fund a negative amount: {amount}")
        address = normalize_address(address)
        self._journal("balances", address)
        self._state.balances[address] = self._state.balances.get(address, 0) + amount

    def balance_of(self, address: str) -> int:
        return self._state.balances.get(normalize_address(address), 0)

    def transfer_native(self, sender: str, receiver: str, amount: int) -> None:
        """Move base asset between two addresses.

        Raises:
            InvalidAmount: If amount is negative
            InsufficientBalance: If sender holds less than amount
        """
        if amount < 0:
            raise InvalidAmount(f"Cannot transfer a negative amount: {amount}")
        if amount == 0:
            return
        sender = normalize_address(sender)
        receiver = normalize_address(receiver)
        balance = self._state.balances.get(sender, 0)
        if balance < amount:
            raise InsufficientBalance(
                f"Native balance of {sender} is {balance}, cannot send {amount}"
            )
        self._journal("balances", sender)
        self._journal("balances", receiver)
        self._state.balances[sender] = balance - amount
        self._state.balances[receiver] = self._state.balances.get(receiver, 0) + amount

    # --- Contracts ---

    def deploy(self, contract_cls: type[C], *args: Any, sender: str, **kwargs: Any) -> C:
        """Deploy a contract and run its ``on_deploy`` hook as one atomic call."""
        sender = normalize_address(sender)
        with self.atomic():
            self._journal("nonces", sender)
            nonce = self._state.nonces.get(sender, 0)
            self._state.nonces[sender] = nonce + 1
            address = _derive_address(f"contract:{sender}:{nonce}")
            self._journal("storage", address)
            self._state.storage[address] = {}
            contract = contract_cls(self, address)
            self._contracts[address] = contract
            contract.on_deploy(sender, *args, **kwargs)
        return contract

    def get_contract(self, address: str) -> Contract | None:
        """Return the contract deployed at address, or None."""
        address = normalize_address(address)
        if address not in self._state.storage:
            return None
        return self._contracts.get(address)

    def storage_of(self, address: str) -> dict[str, Any]:
        address = normalize_address(address)
        storage = self._state.storage[address]
        self._journal("storage", address)
        return storage

    # --- Events ---

    def emit(self, address: str, event: Event) -> None:
        self._state.logs.append(Log(address=normalize_address(address), event=event))

    @property
    def logs(self) -> tuple[Log, ...]:
        return tuple(self._state.logs)

    def events(self, event_type: type[Event] | None = None) -> list[Event]:
        """Emitted events in order, optionally filtered by type."""
        return [
            log.event
            for log in self._state.logs
            if event_type is None or isinstance(log.event, event_type)
        ]

    # --- Atomicity ---

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """Run a call frame; restore the world state if it raises.

        Catches BaseException so fatal invariant violations roll back too.
        """
        frame = self._open_frame()
        self._depth += 1
        try:
            yield
        except BaseException as exc:
            self._close_frame(frame, commit=False)
            if self._depth == 1:
                logger.debug("call_reverted", error=type(exc).__name__, detail=str(exc))
            raise
        else:
            self._close_frame(frame, commit=True)
        finally:
            self._depth -= 1

    @contextmanager
    def simulate(self) -> Iterator[None]:
        """Dry-run: execute the block, then discard every state change."""
        frame = self._open_frame()
        try:
            yield
        finally:
            self._close_frame(frame, commit=False)

    @property
    def depth(self) -> int:
        """Number of call frames currently open."""
        return self._depth

    def _open_frame(self) -> Frame:
        frame = Frame(log_count=len(self._state.logs))
        self._frames.append(frame)
        return frame

    def _journal(self, kind: str, key: str) -> None:
        """Record the prior value of ``key`` before the innermost frame writes it."""
        if not self._frames:
            return
        journal = getattr(self._frames[-1], kind)
        if key in journal:
            return
        live = getattr(self._state, kind)
        if key not in live:
            journal[key] = _MISSING
        elif kind == "storage":
            journal[key] = copy.deepcopy(live[key])
        else:
            journal[key] = live[key]

    def _close_frame(self, frame: Frame, *, commit: bool) -> None:
        """Fold a finished frame into its parent, or undo it."""
        popped = self._frames.pop()
        assert popped is frame, "call frames closed out of order"

        if commit:
            # The parent keeps its own older entries; the rest become its to undo
            if self._frames:
                parent = self._frames[-1]
                for kind in _JOURNALED:
                    parent_journal = getattr(parent, kind)
                    for key, previous in getattr(frame, kind).items():
                        parent_journal.setdefault(key, previous)
            return

        del self._state.logs[frame.log_count :]
        for kind in _JOURNALED:
            live = getattr(self._state, kind)
            for key, previous in getattr(frame, kind).items():
                if previous is _MISSING:
                    live.pop(key, None)
                elif kind == "storage":
                    # In place, so callers holding the storage dict see the revert
                    restored = live.setdefault(key, {})
                    restored.clear()
                    restored.update(previous)
                else:
                    live[key] = previous


class Contract:
    """Base class for code deployed on a Chain.

    Subclasses keep persistent state in ``self.storage`` only.
    """

    def __init__(self, chain: Chain, address: str) -> None:
        self.chain = chain
        self.address = address

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.address})"

    def on_deploy(self, deployer: str) -> None:
        """Initialize storage. Called once by Chain.deploy."""
        pass

    @property
    def storage(self) -> dict[str, Any]:
        return self.chain.storage_of(self.address)

    @property
    def balance(self) -> int:
        """Native balance held at this contract's address."""
        return self.chain.balance_of(self.address)

    def emit(self, event: Event) -> None:
        self.chain.emit(self.address, event)


def external(method: Callable[P, R]) -> Callable[P, R]:
    """Run a contract method as one atomic call frame."""

    @functools.wraps(method)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        contract = args[0]
        with contract.chain.atomic():  # type: ignore[attr-defined]
            return method(*args, **kwargs)

    return wrapper


def payable(method: Callable[P, R]) -> Callable[P, R]:
    """Like ``external``, but first credits ``value`` from ``sender``.

    The method body therefore sees the incoming amount already included in
    the contract's native balance.
    """

    @functools.wraps(method)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        contract = args[0]
        chain: Chain = contract.chain  # type: ignore[attr-defined]
        with chain.atomic():
            chain.transfer_native(
                kwargs["sender"],  # type: ignore[arg-type]
                contract.address,  # type: ignore[attr-defined]
                kwargs["value"],  # type: ignore[arg-type]
            )
            return method(*args, **kwargs)

    return wrapper


def _derive_address(seed: str) -> str:
    return "0x" + hashlib.sha256(seed.encode()).hexdigest()[-40:]


__all__ = ["Chain", "Contract", "Frame", "WorldState", "external", "payable"]
