"""Markets router -- create, look up and re-price markets."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, status

from ideamarket.errors import RegistryError
from ideamarket.registry import IdeaTokenFactory, MarketRecord
from web.backend.app.middleware.auth import (
    ERROR_RESPONSES,
    get_caller,
    get_factory,
    registry_http_error,
)
from web.backend.app.models.api import (
    CreateMarketRequest,
    FeeUpdateRequest,
    MarketResponse,
)

router = APIRouter(prefix="/api/markets", tags=["markets"], responses=ERROR_RESPONSES)


def market_response(record: MarketRecord) -> MarketResponse:
    """Convert a MarketRecord tuple to the Pydantic response model."""
    return MarketResponse(
        exists=record.exists,
        id=record.id,
        name=record.name,
        name_verifier=record.name_verifier.key if record.name_verifier else None,
        num_tokens=record.num_tokens,
        base_cost=str(record.base_cost),
        price_rise=str(record.price_rise),
        trading_fee_rate=record.trading_fee_rate,
        platform_fee_rate=record.platform_fee_rate,
    )


@router.get(
    "",
    response_model=list[MarketResponse],
    summary="List all markets",
)
async def list_markets(factory: IdeaTokenFactory = Depends(get_factory)):
    """List every market in ID order."""
    return [market_response(r) for r in factory.list_markets()]


@router.post(
    "",
    response_model=MarketResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a market",
)
async def create_market(
    body: CreateMarketRequest,
    caller: Optional[str] = Depends(get_caller),
    factory: IdeaTokenFactory = Depends(get_factory),
):
    """Create a market. Only the registry owner may call this."""
    try:
        record = factory.add_market(
            body.name,
            body.name_verifier,
            body.base_cost,
            body.price_rise,
            body.trading_fee_rate,
            body.platform_fee_rate,
            caller=caller,
        )
    except RegistryError as exc:
        raise registry_http_error(exc)
    return market_response(record)


@router.get(
    "/by-name/{name:path}",
    response_model=MarketResponse,
    summary="Get a market by name",
)
async def get_market_by_name(name: str, factory: IdeaTokenFactory = Depends(get_factory)):
    try:
        return market_response(factory.get_market_details_by_name(name))
    except RegistryError as exc:
        raise registry_http_error(exc)


@router.get(
    "/{market_id}",
    response_model=MarketResponse,
    summary="Get a market by ID",
)
async def get_market(market_id: int, factory: IdeaTokenFactory = Depends(get_factory)):
    try:
        return market_response(factory.get_market_details_by_id(market_id))
    except RegistryError as exc:
        raise registry_http_error(exc)


@router.put(
    "/{market_id}/trading-fee",
    response_model=MarketResponse,
    summary="Set the trading fee",
)
async def set_trading_fee(
    market_id: int,
    body: FeeUpdateRequest,
    caller: Optional[str] = Depends(get_caller),
    factory: IdeaTokenFactory = Depends(get_factory),
):
    """Overwrite a market's trading fee rate. Owner only."""
    try:
        factory.set_trading_fee(market_id, body.rate, caller=caller)
        return market_response(factory.get_market_details_by_id(market_id))
    except RegistryError as exc:
        raise registry_http_error(exc)


@router.put(
    "/{market_id}/platform-fee",
    response_model=MarketResponse,
    summary="Set the platform fee",
)
async def set_platform_fee(
    market_id: int,
    body: FeeUpdateRequest,
    caller: Optional[str] = Depends(get_caller),
    factory: IdeaTokenFactory = Depends(get_factory),
):
    """Overwrite a market's platform fee rate. Owner only."""
    try:
        factory.set_platform_fee(market_id, body.rate, caller=caller)
        return market_response(factory.get_market_details_by_id(market_id))
    except RegistryError as exc:
        raise registry_http_error(exc)
