"""Name verifier protocol and the permissive default."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Protocol, runtime_checkable


@runtime_checkable
class NameVerifier(Protocol):
    """Decides which token names a market admits.

    ``key`` identifies the strategy in the verifier catalog and in persisted
    registry state.
    """

    key: str

    def is_valid(self, name: str) -> bool: ...


class BaseNameVerifier(ABC):
    """Value semantics shared by the stateless catalog verifiers."""

    key = ""

    @abstractmethod
    def is_valid(self, name: str) -> bool:
        """Return True if *name* is admitted."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

    def __eq__(self, other: object) -> bool:
        return type(other) is type(self)

    def __hash__(self) -> int:
        return hash(self.key)


class AlwaysValidNameVerifier(BaseNameVerifier):
    """Accepts any non-empty name."""

    key = "always_valid"

    def is_valid(self, name: str) -> bool:
        return bool(name)
