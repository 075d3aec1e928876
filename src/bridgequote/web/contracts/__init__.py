"""Request and response contracts for the web layer.

These Pydantic models define the API interface for web clients.
All contracts are for READ-ONLY operations.
"""

from bridgequote.web.contracts.quotes import (
    ErrorResponse,
    QuoteQuery,
    QuoteResponse,
)
from bridgequote.web.contracts.tokens import (
    TokenInfo,
    TokenListResponse,
)

__all__ = [
    # Quote contracts
    "QuoteQuery",
    "QuoteResponse",
    "ErrorResponse",
    # Token contracts
    "TokenInfo",
    "TokenListResponse",
]
