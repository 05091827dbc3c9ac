"""Token registry — market-scoped tokens with globally unique names."""

from __future__ import annotations

import logging

from ideamarket.errors import MarketNotFound, NameVerificationFailed, NotFound
from ideamarket.registry.markets import MarketRegistry
from ideamarket.registry.models import Token

logger = logging.getLogger(__name__)

NAME_VERIFICATION_FAILED = "addToken: name verification failed"


class TokenRegistry:
    """Owns every token; IDs are numbered per market starting at 1."""

    def __init__(self, markets: MarketRegistry) -> None:
        self._markets = markets
        self._arena: list[Token] = []
        self._by_key: dict[tuple[int, int], int] = {}
        self._by_name: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._arena)

    def add_token(self, name: str, market_id: int) -> Token:
        """Admit a token under *market_id*.

        Raises ``MarketNotFound`` if the market does not exist and
        ``NameVerificationFailed`` if the market's verifier rejects the name
        or any market already has a token with that name.
        """
        if not self._markets.exists(market_id):
            raise MarketNotFound("addToken: market does not exist")

        market = self._markets.get_by_id(market_id)
        if not isinstance(name, str) or not name or not market.accepts(name):
            raise NameVerificationFailed(
                NAME_VERIFICATION_FAILED, reason=NameVerificationFailed.REJECTED
            )
        if name in self._by_name:
            raise NameVerificationFailed(
                NAME_VERIFICATION_FAILED, reason=NameVerificationFailed.TAKEN
            )

        # No failure path past this point: the token and its count land together.
        token = Token(id=market.num_tokens + 1, name=name, market_id=market_id)
        self._insert(token)
        self._markets.increment_tokens(market_id)
        return token

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get(self, market_id: int, token_id: int) -> Token:
        slot = self._by_key.get((market_id, token_id))
        if slot is None:
            raise NotFound("getTokenInfo: token does not exist")
        return self._arena[slot]

    def get_by_name(self, name: str) -> Token:
        slot = self._by_name.get(name)
        if slot is None:
            raise NotFound("getTokenInfo: token does not exist")
        return self._arena[slot]

    def get_id_by_name(self, name: str, market_id: int) -> int:
        """Return the token ID for *name* within *market_id*, or 0."""
        slot = self._by_name.get(name)
        if slot is None or self._arena[slot].market_id != market_id:
            return 0
        return self._arena[slot].id

    def list(self, market_id: int) -> list[Token]:
        """Tokens of one market in ID order."""
        if not self._markets.exists(market_id):
            raise MarketNotFound("listTokens: market does not exist")
        return sorted(
            (t for t in self._arena if t.market_id == market_id), key=lambda t: t.id
        )

    def all(self) -> list[Token]:
        return list(self._arena)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _insert(self, token: Token) -> None:
        slot = len(self._arena)
        self._arena.append(token)
        self._by_key[(token.market_id, token.id)] = slot
        self._by_name[token.name] = slot

    def restore(self, tokens: list[Token]) -> None:
        """Replace the whole collection without touching market counters."""
        self._arena = []
        self._by_key = {}
        self._by_name = {}
        for token in tokens:
            self._insert(token)
