"""Quote services.

SECURITY: These services MUST NOT sign or broadcast transactions.
They only query route providers and compute fees.
"""

from bridgequote.services.quote_service import (
    ProtectionFlags,
    QuoteRequest,
    QuoteResult,
    QuoteService,
)

__all__ = [
    "ProtectionFlags",
    "QuoteRequest",
    "QuoteResult",
    "QuoteService",
]
