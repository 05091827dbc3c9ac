"""Tokens router -- list tokens on a market and look them up."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, status

from ideamarket.errors import RegistryError
from ideamarket.registry import IdeaTokenFactory, TokenRecord
from web.backend.app.middleware.auth import (
    ERROR_RESPONSES,
    get_caller,
    get_factory,
    registry_http_error,
)
from web.backend.app.models.api import CreateTokenRequest, TokenResponse

router = APIRouter(
    prefix="/api/markets/{market_id}/tokens", tags=["tokens"], responses=ERROR_RESPONSES
)


def _token_response(record: TokenRecord) -> TokenResponse:
    return TokenResponse(
        exists=record.exists,
        id=record.id,
        name=record.name,
        market_id=record.market_id,
    )


@router.get(
    "",
    response_model=list[TokenResponse],
    summary="List a market's tokens",
)
async def list_tokens(market_id: int, factory: IdeaTokenFactory = Depends(get_factory)):
    try:
        return [_token_response(r) for r in factory.list_tokens(market_id)]
    except RegistryError as exc:
        raise registry_http_error(exc)


@router.post(
    "",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a token",
)
async def create_token(
    market_id: int,
    body: CreateTokenRequest,
    caller: Optional[str] = Depends(get_caller),
    factory: IdeaTokenFactory = Depends(get_factory),
):
    """List a token on a market.

    Open to any caller; the market's name verifier decides which names are
    admitted, and names are unique across all markets.
    """
    try:
        record = factory.add_token(body.name, market_id, caller=caller)
    except RegistryError as exc:
        raise registry_http_error(exc)
    return _token_response(record)


@router.get(
    "/{token_id}",
    response_model=TokenResponse,
    summary="Get a token",
)
async def get_token(market_id: int, token_id: int, factory: IdeaTokenFactory = Depends(get_factory)):
    try:
        return _token_response(factory.get_token_details(market_id, token_id))
    except RegistryError as exc:
        raise registry_http_error(exc)
