"""Name verifiers — per-market token name admission policies.

A market holds a reference to one verifier (or none, which admits any name).
Verifiers are looked up by their ``key`` when markets are created from the
CLI, the HTTP API, seed files, or persisted state.
"""

from __future__ import annotations

from typing import Optional, Union

from ideamarket.errors import InvalidParameters
from ideamarket.verifiers.base import AlwaysValidNameVerifier, BaseNameVerifier, NameVerifier
from ideamarket.verifiers.domain import DomainNoSubdomainNameVerifier
from ideamarket.verifiers.social import TwitterHandleNameVerifier

_CATALOG: dict[str, type] = {
    AlwaysValidNameVerifier.key: AlwaysValidNameVerifier,
    DomainNoSubdomainNameVerifier.key: DomainNoSubdomainNameVerifier,
    TwitterHandleNameVerifier.key: TwitterHandleNameVerifier,
}


def available_verifiers() -> list[str]:
    """Return the catalog keys in sorted order."""
    return sorted(_CATALOG)


def get_verifier(key: str) -> NameVerifier:
    """Instantiate the verifier registered under *key*.

    Raises ``InvalidParameters`` for unknown keys.
    """
    try:
        return _CATALOG[key]()
    except KeyError:
        raise InvalidParameters(f"unknown name verifier '{key}'") from None


def resolve_verifier(ref: Union[NameVerifier, str, None]) -> Optional[NameVerifier]:
    """Turn a verifier reference (instance, catalog key, or None) into an instance."""
    if ref is None or ref == "":
        return None
    if isinstance(ref, str):
        return get_verifier(ref)
    if not isinstance(ref, NameVerifier):
        raise InvalidParameters(f"not a name verifier: {ref!r}")
    return ref


__all__ = [
    "AlwaysValidNameVerifier",
    "BaseNameVerifier",
    "DomainNoSubdomainNameVerifier",
    "NameVerifier",
    "TwitterHandleNameVerifier",
    "available_verifiers",
    "get_verifier",
    "resolve_verifier",
]
