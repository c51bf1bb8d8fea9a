"""Constant-product automated market maker: exchanges, registry and quote service."""

from amm.chain import Chain
from amm.config import DEFAULT_EXCHANGE_CONFIG, ExchangeConfig
from amm.deployment import Deployment, deploy
from amm.exchange import Exchange, ExchangeStatus
from amm.factory import Factory
from amm.pricing import ConstantProductPricing, pricing
from amm.token import Token

__version__ = "0.1.0"
__all__ = [
    "Chain",
    "ConstantProductPricing",
    "DEFAULT_EXCHANGE_CONFIG",
    "Deployment",
    "Exchange",
    "ExchangeConfig",
    "ExchangeStatus",
    "Factory",
    "Token",
    "deploy",
    "pricing",
    "__version__",
]
