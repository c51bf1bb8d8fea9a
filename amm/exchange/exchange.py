"""The deployable exchange contract."""

from __future__ import annotations

from amm.exchange.liquidity import LiquidityEngine
from amm.exchange.routing import RoutingEngine
from amm.exchange.swaps import SwapEngine


class Exchange(RoutingEngine, SwapEngine, LiquidityEngine):
    """Constant-product pool between the base asset and one token.

    Deployed by the registry, then bound to its token with ``setup``. The
    exchange is also the ledger for its own liquidity shares.
    """

    def pool_state(self) -> dict[str, int | str]:
        """Snapshot of reserves and share supply, for quoting and display."""
        return {
            "exchange": self.address,
            "token": self.token_address(),
            "eth_reserve": self.eth_reserve(),
            "token_reserve": self.token_reserve(),
            "total_supply": self.total_supply(),
        }


__all__ = ["Exchange"]
