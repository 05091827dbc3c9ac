"""Configuration — registry settings and market seed files.

Settings come from a YAML file and the environment. Seed files describe
markets to create in bulk, e.g. when bootstrapping a fresh registry.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

from ideamarket.errors import InvalidParameters

REGISTRY_DIR_ENV = "IDEAMARKET_REGISTRY_DIR"
DEFAULT_REGISTRY_DIR = ".ideamarket_registry"

_REQUIRED_MARKET_KEYS = ("name", "base_cost", "price_rise", "trading_fee_rate")


@dataclass
class Settings:
    """Where the registry lives and who administers it."""

    registry_dir: str = DEFAULT_REGISTRY_DIR
    owner: str = ""
    exchange: str = ""


@dataclass
class MarketSpec:
    """One market entry from a seed file."""

    name: str
    base_cost: int
    price_rise: int
    trading_fee_rate: int
    platform_fee_rate: int = 0
    verifier: str = ""  # Catalog key; empty means any token name


def _as_int(value: object, field: str, index: int) -> int:
    """Return *value* as an int, accepting decimal strings such as "1000"."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and re.fullmatch(r"-?\d+", value.strip()):
        return int(value)
    raise InvalidParameters(f"Market {index + 1} field {field} must be an integer, got {value!r}")


def default_registry_dir() -> str:
    """Registry directory from ``IDEAMARKET_REGISTRY_DIR`` or the default."""
    return os.environ.get(REGISTRY_DIR_ENV, DEFAULT_REGISTRY_DIR)


def load_settings(path: Optional[str | Path] = None) -> Settings:
    """Load settings from a YAML file.

    Without a path only the environment is consulted. The environment wins
    over the file for ``registry_dir``.
    """
    data: dict = {}
    if path is not None:
        with open(path) as f:
            data = yaml.safe_load(f) or {}

    registry_dir = os.environ.get(REGISTRY_DIR_ENV) or data.get(
        "registry_dir", DEFAULT_REGISTRY_DIR
    )
    return Settings(
        registry_dir=str(registry_dir),
        owner=data.get("owner", ""),
        exchange=data.get("exchange", ""),
    )


def load_markets(path: str | Path) -> list[MarketSpec]:
    """Load market definitions from a YAML seed file.

    Expected shape::

        markets:
          - name: Domains
            verifier: domain_no_subdomain
            base_cost: 1000000000000000000
            price_rise: 100000000000000000
            trading_fee_rate: 100
            platform_fee_rate: 50
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}

    specs = []
    for i, entry in enumerate(data.get("markets", [])):
        missing = [k for k in _REQUIRED_MARKET_KEYS if k not in entry]
        if missing:
            raise InvalidParameters(
                f"Market {i + 1} missing required field(s): {', '.join(missing)}"
            )
        specs.append(
            MarketSpec(
                name=entry["name"],
                base_cost=_as_int(entry["base_cost"], "base_cost", i),
                price_rise=_as_int(entry["price_rise"], "price_rise", i),
                trading_fee_rate=_as_int(entry["trading_fee_rate"], "trading_fee_rate", i),
                platform_fee_rate=_as_int(entry.get("platform_fee_rate", 0), "platform_fee_rate", i),
                verifier=entry.get("verifier") or "",
            )
        )
    return specs
