"""FastAPI application for the ideamarket registry.

Provides REST API endpoints wrapping the ideamarket package for:
- One-time registry setup (owner and exchange)
- Market creation, lookup and fee updates
- Token listing and lookup
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ideamarket import __version__
from web.backend.app.routers import markets, registry, tokens

app = FastAPI(
    title="ideamarket API",
    description=(
        "REST API for the ideamarket registry. "
        "Provides endpoints for registry setup, market administration, "
        "and token listing."
    ),
    version=__version__,
)

# ---------------------------------------------------------------------------
# CORS middleware (allow all origins for development)
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Include routers
# ---------------------------------------------------------------------------
app.include_router(registry.router)
app.include_router(markets.router)
app.include_router(tokens.router)


# ---------------------------------------------------------------------------
# Root and health-check endpoints
# ---------------------------------------------------------------------------


@app.get("/", tags=["meta"])
async def root():
    """Return basic API information."""
    return {
        "name": "ideamarket API",
        "version": __version__,
        "description": "Market and token registry REST API",
        "docs": "/docs",
        "openapi": "/openapi.json",
    }


@app.get("/health", tags=["meta"])
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
