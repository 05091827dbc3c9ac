"""Pydantic models for API request/response serialization.

These models mirror the ideamarket registry records and provide JSON
serialization for the FastAPI endpoints. Pricing-curve values are returned
as decimal strings so clients without big integers keep full precision.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Registry models
# ---------------------------------------------------------------------------


class InitializeRequest(BaseModel):
    """Request body for the one-time registry setup."""

    owner: str = Field(..., min_length=1)
    exchange: str = Field(..., min_length=1)


class RegistryInfoResponse(BaseModel):
    owner: Optional[str] = None
    exchange: Optional[str] = None
    num_markets: int = 0
    verifiers: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Market models
# ---------------------------------------------------------------------------


class CreateMarketRequest(BaseModel):
    """Request body for creating a market."""

    name: str
    name_verifier: Optional[str] = None
    base_cost: int
    price_rise: int
    trading_fee_rate: int
    platform_fee_rate: int = 0


class FeeUpdateRequest(BaseModel):
    """Request body for a trading or platform fee update."""

    rate: int


class MarketResponse(BaseModel):
    """Mirrors ideamarket.registry.models.MarketRecord, same field order."""

    exists: bool = True
    id: int
    name: str
    name_verifier: Optional[str] = None
    num_tokens: int = 0
    base_cost: str
    price_rise: str
    trading_fee_rate: int
    platform_fee_rate: int


# ---------------------------------------------------------------------------
# Token models
# ---------------------------------------------------------------------------


class CreateTokenRequest(BaseModel):
    """Request body for listing a token on a market."""

    name: str


class TokenResponse(BaseModel):
    """Mirrors ideamarket.registry.models.TokenRecord."""

    exists: bool = True
    id: int
    name: str
    market_id: int


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class ErrorDetail(BaseModel):
    """Body of ``detail`` for registry failures."""

    code: str
    message: str


class ErrorResponse(BaseModel):
    """Error body returned for registry failures."""

    detail: ErrorDetail
