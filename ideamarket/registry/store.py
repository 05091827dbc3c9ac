"""File-based JSON persistence for registry state.

A simple snapshot store for single-host use. The whole registry is kept in
``state.json`` inside the registry directory. Writers serialize on an
exclusive lock on ``state.lock`` so processes sharing the directory never
overwrite each other's commits.
"""

from __future__ import annotations

import fcntl
import json
import logging
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from ideamarket.registry.models import Market, Token
from ideamarket.verifiers import get_verifier

logger = logging.getLogger(__name__)


class RegistryStore:
    """Loads and saves registry snapshots as JSON."""

    STATE_FILE = "state.json"
    LOCK_FILE = "state.lock"

    def __init__(self, registry_dir: str | Path):
        self.registry_dir = Path(registry_dir)
        self.registry_dir.mkdir(parents=True, exist_ok=True)
        self.state_path = self.registry_dir / self.STATE_FILE
        self.lock_path = self.registry_dir / self.LOCK_FILE
        self._seen: Optional[tuple] = None

    def _signature(self) -> Optional[tuple]:
        try:
            st = self.state_path.stat()
        except FileNotFoundError:
            return None
        return (st.st_ino, st.st_mtime_ns, st.st_size)

    @contextmanager
    def lock(self) -> Iterator[None]:
        """Hold the exclusive writer lock for the registry directory."""
        with open(self.lock_path, "a") as fh:
            fcntl.flock(fh.fileno(), fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(fh.fileno(), fcntl.LOCK_UN)

    def load(self) -> dict:
        """Return the persisted snapshot, or an empty dict if none exists."""
        signature = self._signature()
        if signature is None:
            self._seen = None
            return {}
        with open(self.state_path) as f:
            data = json.load(f)
        self._seen = signature
        logger.debug("Loaded registry state from %s", self.state_path)
        return data

    def load_if_changed(self) -> Optional[dict]:
        """Return the snapshot if the file changed since the last load or save."""
        if self._signature() == self._seen:
            return None
        return self.load()

    def save(self, snapshot: dict) -> None:
        """Write the snapshot; the previous file stays intact if writing fails."""
        tmp_path = self.state_path.with_suffix(".json.tmp")
        with open(tmp_path, "w") as f:
            json.dump(snapshot, f, indent=2)
        os.replace(tmp_path, self.state_path)
        self._seen = self._signature()


def market_to_dict(market: Market) -> dict:
    return {
        "id": market.id,
        "name": market.name,
        "name_verifier": market.verifier_key,
        "num_tokens": market.num_tokens,
        "base_cost": str(market.base_cost),
        "price_rise": str(market.price_rise),
        "trading_fee_rate": market.trading_fee_rate,
        "platform_fee_rate": market.platform_fee_rate,
    }


def dict_to_market(data: dict) -> Market:
    verifier_key = data.get("name_verifier", "")
    return Market(
        id=data["id"],
        name=data["name"],
        name_verifier=get_verifier(verifier_key) if verifier_key else None,
        num_tokens=data.get("num_tokens", 0),
        base_cost=int(data["base_cost"]),
        price_rise=int(data["price_rise"]),
        trading_fee_rate=data["trading_fee_rate"],
        platform_fee_rate=data["platform_fee_rate"],
    )


def token_to_dict(token: Token) -> dict:
    return {"id": token.id, "name": token.name, "market_id": token.market_id}


def dict_to_token(data: dict) -> Token:
    return Token(id=data["id"], name=data["name"], market_id=data["market_id"])
