"""Market registry — one arena of markets indexed by ID and by name."""

from __future__ import annotations

import logging
from typing import Optional

from ideamarket.errors import AlreadyExists, InvalidParameters, NotFound
from ideamarket.registry.models import Market
from ideamarket.verifiers import NameVerifier

logger = logging.getLogger(__name__)


def _is_uint(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


class MarketRegistry:
    """Owns every market and assigns sequential IDs starting at 1.

    Records live once in ``_arena``; ``_by_id`` and ``_by_name`` map both keys
    to the same arena slot and are only ever updated together.
    """

    def __init__(self) -> None:
        self._arena: list[Market] = []
        self._by_id: dict[int, int] = {}
        self._by_name: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._arena)

    @property
    def num_markets(self) -> int:
        return len(self._arena)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_market(
        self,
        name: str,
        name_verifier: Optional[NameVerifier],
        base_cost: int,
        price_rise: int,
        trading_fee_rate: int,
        platform_fee_rate: int,
    ) -> Market:
        """Validate the parameters and store a new market.

        Raises ``AlreadyExists`` on a name collision and ``InvalidParameters``
        for an empty name, a non-positive base cost, price rise or trading
        fee, or a negative platform fee. Nothing is stored on failure.
        """
        if isinstance(name, str) and name in self._by_name:
            raise AlreadyExists("addMarket: market exists already")

        if (
            not isinstance(name, str)
            or not name
            or not _is_uint(base_cost)
            or not _is_uint(price_rise)
            or not _is_uint(trading_fee_rate)
            or not _is_uint(platform_fee_rate)
            or base_cost == 0
            or price_rise == 0
            or trading_fee_rate == 0
        ):
            raise InvalidParameters("addMarket: invalid parameters")

        market = Market(
            id=len(self._arena) + 1,
            name=name,
            name_verifier=name_verifier,
            base_cost=base_cost,
            price_rise=price_rise,
            trading_fee_rate=trading_fee_rate,
            platform_fee_rate=platform_fee_rate,
        )
        self._insert(market)
        return market

    def set_trading_fee(self, market_id: int, rate: int) -> Market:
        market = self._require(market_id, "setTradingFee")
        if not _is_uint(rate):
            raise InvalidParameters("setTradingFee: invalid fee")
        market.trading_fee_rate = rate
        return market

    def set_platform_fee(self, market_id: int, rate: int) -> Market:
        market = self._require(market_id, "setPlatformFee")
        if not _is_uint(rate):
            raise InvalidParameters("setPlatformFee: invalid fee")
        market.platform_fee_rate = rate
        return market

    def increment_tokens(self, market_id: int) -> int:
        """Bump ``num_tokens`` for a market and return the new count."""
        market = self._require(market_id, "addToken")
        market.num_tokens += 1
        return market.num_tokens

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def exists(self, market_id: int) -> bool:
        return isinstance(market_id, int) and market_id in self._by_id

    def get_id_by_name(self, name: str) -> int:
        """Return the market ID for *name*, or 0 if no market has that name."""
        slot = self._by_name.get(name)
        return self._arena[slot].id if slot is not None else 0

    def get_by_id(self, market_id: int) -> Market:
        return self._require(market_id, "getMarketDetailsByID")

    def get_by_name(self, name: str) -> Market:
        slot = self._by_name.get(name)
        if slot is None:
            raise NotFound("getMarketDetailsByName: market does not exist")
        return self._arena[slot]

    def list(self) -> list[Market]:
        """All markets in ID order."""
        return list(self._arena)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _insert(self, market: Market) -> None:
        slot = len(self._arena)
        self._arena.append(market)
        self._by_id[market.id] = slot
        self._by_name[market.name] = slot
        logger.debug("Indexed market %d (%s) at slot %d", market.id, market.name, slot)

    def _require(self, market_id: int, operation: str) -> Market:
        slot = self._by_id.get(market_id)
        if slot is None:
            raise NotFound(f"{operation}: market does not exist")
        return self._arena[slot]

    def restore(self, markets: list[Market]) -> None:
        """Replace the whole collection, e.g. from a persisted snapshot."""
        self._arena = []
        self._by_id = {}
        self._by_name = {}
        for market in sorted(markets, key=lambda m: m.id):
            self._insert(market)
