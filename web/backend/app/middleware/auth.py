"""Request dependencies -- caller identity and the shared registry.

The caller identity is read from the ``X-Caller`` header. The registry
checks it against the owner for privileged operations; this layer does not
authenticate it.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Header, HTTPException, status

from ideamarket.config import default_registry_dir
from ideamarket.errors import (
    AlreadyExists,
    AlreadyInitialized,
    MarketNotFound,
    NotFound,
    RegistryError,
    Unauthorized,
)
from ideamarket.events import EventLog
from ideamarket.registry import IdeaTokenFactory, RegistryStore
from web.backend.app.models.api import ErrorResponse

# Shared factory instance
_factory: Optional[IdeaTokenFactory] = None

_STATUS_BY_ERROR: dict[type, int] = {
    Unauthorized: status.HTTP_403_FORBIDDEN,
    NotFound: status.HTTP_404_NOT_FOUND,
    MarketNotFound: status.HTTP_404_NOT_FOUND,
    AlreadyExists: status.HTTP_409_CONFLICT,
    AlreadyInitialized: status.HTTP_409_CONFLICT,
}


# Documented error bodies for routes that surface registry errors
ERROR_RESPONSES: dict = {
    status.HTTP_403_FORBIDDEN: {"model": ErrorResponse, "description": "Caller is not the owner"},
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse, "description": "Market or token not found"},
    status.HTTP_409_CONFLICT: {"model": ErrorResponse, "description": "Already exists or initialized"},
}


def get_factory() -> IdeaTokenFactory:
    """Return the singleton IdeaTokenFactory backed by the registry directory."""
    global _factory
    if _factory is None:
        registry_dir = default_registry_dir()
        _factory = IdeaTokenFactory(
            store=RegistryStore(registry_dir), events=EventLog(registry_dir)
        )
    return _factory


async def get_caller(x_caller: Optional[str] = Header(None, alias="X-Caller")) -> Optional[str]:
    """FastAPI dependency returning the identity the request acts as, if any."""
    return x_caller or None


def registry_http_error(exc: RegistryError) -> HTTPException:
    """Translate a registry error into an HTTP error with a structured detail.

    ``InvalidParameters`` and ``NameVerificationFailed`` map to 422.
    """
    return HTTPException(
        status_code=_STATUS_BY_ERROR.get(type(exc), status.HTTP_422_UNPROCESSABLE_ENTITY),
        detail=exc.to_dict(),
    )
