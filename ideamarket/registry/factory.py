"""IdeaTokenFactory — the public registry surface.

Composes the owner gate, the market registry and the token registry. Every
mutation runs as one transaction under a lock: it either commits completely
(and is persisted when a store is attached) or leaves state untouched. With a
store, each call first picks up commits made by other processes sharing the
registry directory.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager, nullcontext
from typing import Iterator, Optional, Union

from ideamarket import events as ev
from ideamarket.auth.ownable import Ownable
from ideamarket.errors import InvalidParameters, RegistryError
from ideamarket.events import EventLog
from ideamarket.registry.markets import MarketRegistry
from ideamarket.registry.models import Market, MarketRecord, Token, TokenRecord
from ideamarket.registry.store import (
    RegistryStore,
    dict_to_market,
    dict_to_token,
    market_to_dict,
    token_to_dict,
)
from ideamarket.registry.tokens import TokenRegistry
from ideamarket.verifiers import NameVerifier, available_verifiers, resolve_verifier

logger = logging.getLogger(__name__)

VerifierRef = Union[NameVerifier, str, None]


class IdeaTokenFactory:
    """Owner-administered registry of markets and their tokens."""

    def __init__(
        self,
        store: Optional[RegistryStore] = None,
        events: Optional[EventLog] = None,
    ) -> None:
        self._lock = threading.RLock()
        self._store = store
        self._events = events
        self._ownable = Ownable()
        self._exchange: Optional[str] = None
        self._markets = MarketRegistry()
        self._tokens = TokenRegistry(self._markets)

        if store is not None:
            snapshot = store.load()
            if snapshot:
                self._apply_snapshot(snapshot)
                logger.info(
                    "Loaded %d market(s) and %d token(s) from %s",
                    len(self._markets),
                    len(self._tokens),
                    store.state_path,
                )

    # ------------------------------------------------------------------
    # Setup and ownership
    # ------------------------------------------------------------------

    def initialize(self, owner: str, exchange: str) -> None:
        """Configure the owner and the exchange. Allowed exactly once."""
        with self._transaction("initialize"):
            if not self._ownable.initialized and not exchange:
                raise InvalidParameters("initialize: exchange is required")
            self._ownable.initialize(owner)
            self._exchange = exchange
        self._emit(ev.INITIALIZED, owner, owner=owner, exchange=exchange)

    def get_owner(self) -> Optional[str]:
        with self._lock:
            self._refresh()
            return self._ownable.get_owner()

    def get_exchange(self) -> Optional[str]:
        with self._lock:
            self._refresh()
            return self._exchange

    # ------------------------------------------------------------------
    # Markets
    # ------------------------------------------------------------------

    def add_market(
        self,
        name: str,
        name_verifier: VerifierRef,
        base_cost: int,
        price_rise: int,
        trading_fee_rate: int,
        platform_fee_rate: int,
        *,
        caller: Optional[str],
    ) -> MarketRecord:
        """Create a market. Owner only.

        ``name_verifier`` may be a verifier instance, a catalog key, or None
        to admit any token name.
        """
        with self._transaction("addMarket"):
            self._ownable.require_owner(caller)
            verifier = resolve_verifier(name_verifier)
            if (
                self._store is not None
                and verifier is not None
                and verifier.key not in available_verifiers()
            ):
                raise InvalidParameters("addMarket: invalid parameters")
            market = self._markets.add_market(
                name, verifier, base_cost, price_rise, trading_fee_rate, platform_fee_rate
            )
        logger.info("Added market %d (%s)", market.id, market.name)
        self._emit(
            ev.NEW_MARKET,
            caller,
            id=market.id,
            name=market.name,
            base_cost=str(market.base_cost),
            price_rise=str(market.price_rise),
            trading_fee_rate=market.trading_fee_rate,
            platform_fee_rate=market.platform_fee_rate,
            name_verifier=market.verifier_key,
        )
        return market.to_record()

    def get_num_markets(self) -> int:
        with self._lock:
            self._refresh()
            return self._markets.num_markets

    def get_market_id_by_name(self, name: str) -> int:
        with self._lock:
            self._refresh()
            return self._markets.get_id_by_name(name)

    def get_market_details_by_id(self, market_id: int) -> MarketRecord:
        with self._lock:
            self._refresh()
            return self._markets.get_by_id(market_id).to_record()

    def get_market_details_by_name(self, name: str) -> MarketRecord:
        with self._lock:
            self._refresh()
            return self._markets.get_by_name(name).to_record()

    def list_markets(self) -> list[MarketRecord]:
        with self._lock:
            self._refresh()
            return [m.to_record() for m in self._markets.list()]

    def set_trading_fee(self, market_id: int, rate: int, *, caller: Optional[str]) -> None:
        """Overwrite a market's trading fee. Owner only."""
        with self._transaction("setTradingFee"):
            self._ownable.require_owner(caller)
            self._markets.set_trading_fee(market_id, rate)
        logger.info("Market %d trading fee set to %d", market_id, rate)
        self._emit(ev.NEW_TRADING_FEE, caller, market_id=market_id, fee=rate)

    def set_platform_fee(self, market_id: int, rate: int, *, caller: Optional[str]) -> None:
        """Overwrite a market's platform fee. Owner only."""
        with self._transaction("setPlatformFee"):
            self._ownable.require_owner(caller)
            self._markets.set_platform_fee(market_id, rate)
        logger.info("Market %d platform fee set to %d", market_id, rate)
        self._emit(ev.NEW_PLATFORM_FEE, caller, market_id=market_id, fee=rate)

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------

    def add_token(self, name: str, market_id: int, *, caller: Optional[str] = None) -> TokenRecord:
        """Register a token under a market. Open to any caller."""
        with self._transaction("addToken"):
            token = self._tokens.add_token(name, market_id)
        logger.info("Added token %s to market %d as #%d", token.name, market_id, token.id)
        self._emit(ev.NEW_TOKEN, caller, id=token.id, market_id=market_id, name=token.name)
        return token.to_record()

    def get_token_details(self, market_id: int, token_id: int) -> TokenRecord:
        with self._lock:
            self._refresh()
            return self._tokens.get(market_id, token_id).to_record()

    def get_token_details_by_name(self, name: str) -> TokenRecord:
        with self._lock:
            self._refresh()
            return self._tokens.get_by_name(name).to_record()

    def get_token_id_by_name(self, name: str, market_id: int) -> int:
        with self._lock:
            self._refresh()
            return self._tokens.get_id_by_name(name, market_id)

    def list_tokens(self, market_id: int) -> list[TokenRecord]:
        with self._lock:
            self._refresh()
            return [t.to_record() for t in self._tokens.list(market_id)]

    # ------------------------------------------------------------------
    # Transactions and persistence
    # ------------------------------------------------------------------

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[None]:
        """Run one mutation atomically.

        The registries validate every input before they touch state, so a
        rejected call leaves memory as it was. The only failure after a
        mutation is a failed save, and that is undone by reloading the last
        committed snapshot from the store.
        """
        store_lock = self._store.lock() if self._store is not None else nullcontext()
        with self._lock, store_lock:
            self._refresh(force=True)
            try:
                yield
                if self._store is not None:
                    self._store.save(self.snapshot())
            except RegistryError as exc:
                logger.warning("%s rejected: [%s] %s", operation, exc.code, exc.message)
                raise
            except Exception:
                self._rollback()
                logger.exception("%s failed; state rolled back", operation)
                raise

    def _refresh(self, force: bool = False) -> None:
        if self._store is None:
            return
        snapshot = self._store.load() if force else self._store.load_if_changed()
        if snapshot is not None:
            self._apply_snapshot(snapshot)
            logger.debug("Picked up registry changes from %s", self._store.state_path)

    def _rollback(self) -> None:
        if self._store is not None:
            self._apply_snapshot(self._store.load())

    def snapshot(self) -> dict:
        """Serializable copy of the full registry state."""
        with self._lock:
            return {
                "owner": self._ownable.get_owner(),
                "exchange": self._exchange,
                "markets": [market_to_dict(m) for m in self._markets.list()],
                "tokens": [token_to_dict(t) for t in self._tokens.all()],
            }

    def _apply_snapshot(self, snapshot: dict) -> None:
        markets: list[Market] = [dict_to_market(d) for d in snapshot.get("markets", [])]
        tokens: list[Token] = [dict_to_token(d) for d in snapshot.get("tokens", [])]
        self._ownable = Ownable(snapshot.get("owner"))
        self._exchange = snapshot.get("exchange")
        self._markets.restore(markets)
        self._tokens.restore(tokens)

    def _emit(self, event: str, caller: Optional[str], **args) -> None:
        # The change is already committed; a failed event write must not undo it.
        if self._events is None:
            return
        try:
            self._events.emit(event, caller=caller, args=args)
        except Exception:
            logger.exception("Failed to record %s event", event)
