"""Registry router -- one-time setup and registry-wide information."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ideamarket.errors import RegistryError
from ideamarket.registry import IdeaTokenFactory
from ideamarket.verifiers import available_verifiers
from web.backend.app.middleware.auth import ERROR_RESPONSES, get_factory, registry_http_error
from web.backend.app.models.api import InitializeRequest, RegistryInfoResponse

router = APIRouter(prefix="/api/registry", tags=["registry"], responses=ERROR_RESPONSES)


def _info(factory: IdeaTokenFactory) -> RegistryInfoResponse:
    return RegistryInfoResponse(
        owner=factory.get_owner(),
        exchange=factory.get_exchange(),
        num_markets=factory.get_num_markets(),
        verifiers=available_verifiers(),
    )


@router.get(
    "",
    response_model=RegistryInfoResponse,
    summary="Registry information",
)
async def registry_info(factory: IdeaTokenFactory = Depends(get_factory)):
    """Return the owner, the exchange, the market count and the verifier keys."""
    return _info(factory)


@router.post(
    "/initialize",
    response_model=RegistryInfoResponse,
    summary="Initialize the registry",
)
async def initialize_registry(
    body: InitializeRequest,
    factory: IdeaTokenFactory = Depends(get_factory),
):
    """Set the owner and exchange identities. Only the first call succeeds."""
    try:
        factory.initialize(body.owner, body.exchange)
    except RegistryError as exc:
        raise registry_http_error(exc)
    return _info(factory)
