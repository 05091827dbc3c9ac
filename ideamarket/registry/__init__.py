"""Registry — markets, tokens, and the owner-administered factory surface.

The registry provides:
- Markets: named venues with pricing-curve inputs and owner-set fees
- Tokens: market-scoped assets with globally unique, verifier-checked names
- Persistence: JSON snapshots of committed state
"""

from ideamarket.registry.factory import IdeaTokenFactory
from ideamarket.registry.models import Market, MarketRecord, Token, TokenRecord
from ideamarket.registry.store import RegistryStore

__all__ = [
    "IdeaTokenFactory",
    "Market",
    "MarketRecord",
    "RegistryStore",
    "Token",
    "TokenRecord",
]
