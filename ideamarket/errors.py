"""Registry error taxonomy.

Every error carries a machine-readable ``code`` and a stable ``message`` so
callers and tests can assert on the failure cause.
"""

from __future__ import annotations


class RegistryError(Exception):
    """Base class for every registry failure."""

    code = "REGISTRY_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class Unauthorized(RegistryError):
    code = "UNAUTHORIZED"


class AlreadyInitialized(RegistryError):
    code = "ALREADY_INITIALIZED"


class AlreadyExists(RegistryError):
    code = "ALREADY_EXISTS"


class InvalidParameters(RegistryError):
    code = "INVALID_PARAMETERS"


class NotFound(RegistryError):
    code = "NOT_FOUND"


class MarketNotFound(RegistryError):
    code = "MARKET_NOT_FOUND"


class NameVerificationFailed(RegistryError):
    """Token name rejected by the market's verifier or already taken.

    Both causes surface as the same error; ``reason`` tells them apart.
    """

    code = "NAME_VERIFICATION_FAILED"

    REJECTED = "rejected"
    TAKEN = "taken"

    def __init__(self, message: str, reason: str = REJECTED) -> None:
        super().__init__(message)
        self.reason = reason
