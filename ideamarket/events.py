"""Registry event log.

Every committed registry mutation is recorded as one event, appended as a
line of JSON to ``events.jsonl`` in the registry directory. File order is
emission order.
"""

from __future__ import annotations

import json
import logging
import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)

# Event names emitted by the registry
INITIALIZED = "Initialized"
NEW_MARKET = "NewMarket"
NEW_TOKEN = "NewToken"
NEW_TRADING_FEE = "NewTradingFee"
NEW_PLATFORM_FEE = "NewPlatformFee"


@dataclass
class RegistryEvent:
    """A single registry event."""

    id: str
    name: str
    timestamp: str
    caller: str = ""
    args: dict[str, Any] = field(default_factory=dict)


class EventLog:
    """Append-only JSONL event log.

    Events are persisted as newline-delimited JSON in ``events.jsonl`` under
    the given directory.
    """

    LOG_FILE = "events.jsonl"

    def __init__(self, base_dir: str | Path) -> None:
        self._base_dir = Path(base_dir)
        self._base_dir.mkdir(parents=True, exist_ok=True)
        self._path = self._base_dir / self.LOG_FILE

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _read_all(self) -> list[RegistryEvent]:
        if not self._path.exists():
            return []
        events: list[RegistryEvent] = []
        for line in self._path.read_text(encoding="utf-8").splitlines():
            if line.strip():
                events.append(RegistryEvent(**json.loads(line)))
        return events

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def emit(
        self,
        event: str,
        caller: Optional[str] = None,
        args: Optional[dict[str, Any]] = None,
    ) -> RegistryEvent:
        """Append an event and return it."""
        entry = RegistryEvent(
            id=uuid.uuid4().hex[:16],
            name=event,
            timestamp=datetime.now(timezone.utc).isoformat(),
            caller=caller or "",
            args=args or {},
        )
        with self._path.open("a", encoding="utf-8") as fh:
            fh.write(json.dumps(asdict(entry)) + "\n")
        logger.debug("Emitted %s (%s)", event, entry.id)
        return entry

    def get_events(self, *, name: Optional[str] = None, limit: int = 200) -> list[RegistryEvent]:
        """Return events, newest first, optionally filtered by event name."""
        events = self._read_all()
        if name:
            events = [e for e in events if e.name == name]
        events.reverse()
        return events[:limit]
