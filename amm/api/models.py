"""Pydantic response models for the quote service."""

from enum import Enum

from pydantic import BaseModel, Field

from amm.types import Address, Uint256


class QuoteKind(str, Enum):
    """Which of the four single-pool prices to quote."""

    ETH_TO_TOKEN_INPUT = "eth_to_token_input"  # tokens bought for an exact eth amount
    ETH_TO_TOKEN_OUTPUT = "eth_to_token_output"  # eth needed for an exact token amount
    TOKEN_TO_ETH_INPUT = "token_to_eth_input"  # eth bought for an exact token amount
    TOKEN_TO_ETH_OUTPUT = "token_to_eth_output"  # tokens needed for an exact eth amount


class ExchangeRecord(BaseModel):
    """One registry entry."""

    token_id: int = Field(alias="tokenId", description="Sequential id, starting at 1.")
    token: Address
    exchange: Address

    model_config = {"populate_by_name": True}


class PoolState(BaseModel):
    """Current reserves and share supply of one exchange."""

    exchange: Address
    token: Address
    eth_reserve: Uint256 = Field(alias="ethReserve")
    token_reserve: Uint256 = Field(alias="tokenReserve")
    total_supply: Uint256 = Field(alias="totalSupply", description="Outstanding liquidity shares.")
    fee_bps: int = Field(alias="feeBps")

    model_config = {"populate_by_name": True}


class Quote(BaseModel):
    """Single-pool price for a given amount."""

    exchange: Address
    kind: QuoteKind
    amount: Uint256 = Field(description="The exact amount given in the request.")
    price: Uint256 = Field(description="The computed counter-amount.")

    model_config = {"populate_by_name": True}


class RouteQuote(BaseModel):
    """Two-hop token -> base asset -> token price for an exact input."""

    token_in: Address = Field(alias="tokenIn")
    token_out: Address = Field(alias="tokenOut")
    amount_in: Uint256 = Field(alias="amountIn")
    eth_intermediate: Uint256 = Field(alias="ethIntermediate")
    amount_out: Uint256 = Field(alias="amountOut")

    model_config = {"populate_by_name": True}


class ErrorResponse(BaseModel):
    error: str = Field(description="Error class name, e.g. InsufficientOutputReserve.")
    detail: str


__all__ = [
    "QuoteKind",
    "ExchangeRecord",
    "PoolState",
    "Quote",
    "RouteQuote",
    "ErrorResponse",
]
