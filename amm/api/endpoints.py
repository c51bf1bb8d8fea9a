"""Read-only quote endpoints over a deployment."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query

from amm.api.models import (
    ErrorResponse,
    ExchangeRecord,
    PoolState,
    Quote,
    QuoteKind,
    RouteQuote,
)
from amm.deployment import Deployment, get_default_deployment
from amm.errors import InvalidExchange
from amm.exchange import Exchange
from amm.types import is_valid_address, normalize_address, validate_uint256

logger = structlog.get_logger()

router = APIRouter()


def get_deployment() -> Deployment:
    """Dependency provider for the deployment being quoted.

    Override this in tests to inject a seeded deployment:
        app.dependency_overrides[get_deployment] = lambda: deployment
    """
    return get_default_deployment()


def _resolve_exchange(deployment: Deployment, token: str) -> Exchange:
    if not is_valid_address(token):
        raise HTTPException(status_code=422, detail=f"Invalid token address: {token}")
    exchange = deployment.factory.exchange_for(normalize_address(token))
    if exchange is None:
        raise HTTPException(status_code=404, detail=f"No exchange for token {token}")
    return exchange


def _parse_amount(amount: str) -> int:
    try:
        return validate_uint256(amount)
    except ValueError as err:
        raise HTTPException(status_code=422, detail=str(err)) from err


@router.get("/exchanges")
async def list_exchanges(
    deployment: Deployment = Depends(get_deployment),
) -> list[ExchangeRecord]:
    """Every registered exchange, in token-id order."""
    return [
        ExchangeRecord(token_id=token_id, token=token, exchange=exchange)
        for token_id, token, exchange in deployment.factory.registered()
    ]


@router.get("/exchanges/{token}")
async def pool_state(
    token: str,
    deployment: Deployment = Depends(get_deployment),
) -> PoolState:
    exchange = _resolve_exchange(deployment, token)
    return PoolState(**exchange.pool_state(), fee_bps=exchange.config.fee_bps)


@router.get("/exchanges/{token}/quote", responses={400: {"model": ErrorResponse}})
async def quote(
    token: str,
    kind: QuoteKind,
    amount: str = Query(description="Exact amount, as a decimal integer string."),
    deployment: Deployment = Depends(get_deployment),
) -> Quote:
    """Quote one of the four single-pool prices.

    Error Handling:
        - Unknown token: 404
        - Malformed amount or address: 422
        - Pricing failure (zero amount, empty pool, output above reserve): 400
    """
    exchange = _resolve_exchange(deployment, token)
    exact = _parse_amount(amount)

    getters = {
        QuoteKind.ETH_TO_TOKEN_INPUT: exchange.get_eth_to_token_input_price,
        QuoteKind.ETH_TO_TOKEN_OUTPUT: exchange.get_eth_to_token_output_price,
        QuoteKind.TOKEN_TO_ETH_INPUT: exchange.get_token_to_eth_input_price,
        QuoteKind.TOKEN_TO_ETH_OUTPUT: exchange.get_token_to_eth_output_price,
    }
    price = getters[kind](exact)

    logger.info("quote", exchange=exchange.address, kind=kind.value, amount=exact, price=price)
    return Quote(exchange=exchange.address, kind=kind, amount=exact, price=price)


@router.get("/route", responses={400: {"model": ErrorResponse}})
async def route(
    token_in: str,
    token_out: str,
    amount_in: str,
    deployment: Deployment = Depends(get_deployment),
) -> RouteQuote:
    """Quote selling exactly ``amount_in`` of token_in for token_out via the base asset."""
    exchange_in = _resolve_exchange(deployment, token_in)
    exchange_out = _resolve_exchange(deployment, token_out)
    if exchange_in.address == exchange_out.address:
        raise InvalidExchange("Cannot route a trade back into the same exchange")
    exact = _parse_amount(amount_in)

    eth_intermediate = exchange_in.get_token_to_eth_input_price(exact)
    amount_out = exchange_out.get_eth_to_token_input_price(eth_intermediate)

    logger.info(
        "route_quote",
        token_in=exchange_in.token_address(),
        token_out=exchange_out.token_address(),
        amount_in=exact,
        eth_intermediate=eth_intermediate,
        amount_out=amount_out,
    )
    return RouteQuote(
        token_in=exchange_in.token_address(),
        token_out=exchange_out.token_address(),
        amount_in=exact,
        eth_intermediate=eth_intermediate,
        amount_out=amount_out,
    )
