"""Constant-product exchange: pricing, liquidity, swaps and routing."""

from .base import ExchangeBase, ExchangeStatus
from .exchange import Exchange
from .liquidity import LiquidityEngine
from .routing import RoutingEngine
from .swaps import SwapEngine

__all__ = [
    "Exchange",
    "ExchangeBase",
    "ExchangeStatus",
    "LiquidityEngine",
    "SwapEngine",
    "RoutingEngine",
]
