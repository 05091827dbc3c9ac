"""Registry data models — markets, tokens, and their wire records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple, Optional

from ideamarket.verifiers import NameVerifier


@dataclass
class Market:
    """A named trading venue with pricing-curve and fee parameters."""

    # Identity
    id: int
    name: str
    name_verifier: Optional[NameVerifier] = None

    # Pricing curve (immutable after creation)
    base_cost: int = 0
    price_rise: int = 0

    # Fees (owner-mutable)
    trading_fee_rate: int = 0
    platform_fee_rate: int = 0

    num_tokens: int = 0

    @property
    def verifier_key(self) -> str:
        return self.name_verifier.key if self.name_verifier is not None else ""

    def accepts(self, name: str) -> bool:
        """Run the market's verifier; markets without one accept any name."""
        if self.name_verifier is None:
            return True
        return self.name_verifier.is_valid(name)

    def to_record(self) -> MarketRecord:
        return MarketRecord(
            exists=True,
            id=self.id,
            name=self.name,
            name_verifier=self.name_verifier,
            num_tokens=self.num_tokens,
            base_cost=self.base_cost,
            price_rise=self.price_rise,
            trading_fee_rate=self.trading_fee_rate,
            platform_fee_rate=self.platform_fee_rate,
        )


@dataclass
class Token:
    """A named asset registered under exactly one market."""

    id: int
    name: str
    market_id: int

    def to_record(self) -> TokenRecord:
        return TokenRecord(exists=True, id=self.id, name=self.name, market_id=self.market_id)


class MarketRecord(NamedTuple):
    """Market details in the fixed field order the exchange reads."""

    exists: bool
    id: int
    name: str
    name_verifier: Optional[NameVerifier]
    num_tokens: int
    base_cost: int
    price_rise: int
    trading_fee_rate: int
    platform_fee_rate: int


class TokenRecord(NamedTuple):
    """Token details in fixed field order."""

    exists: bool
    id: int
    name: str
    market_id: int
