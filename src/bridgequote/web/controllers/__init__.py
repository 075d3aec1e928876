"""HTTP controllers for web API endpoints.

SECURITY: These controllers MUST NOT:
- Access private keys
- Sign or broadcast transactions

All operations are read-only.
"""

from bridgequote.web.controllers.quotes import router as quotes_router
from bridgequote.web.controllers.tokens import router as tokens_router

__all__ = [
    "quotes_router",
    "tokens_router",
]
