"""Quote API endpoints."""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from bridgequote.config import Settings
from bridgequote.errors import QuoteError, QuoteValidationError
from bridgequote.services.quote_service import QuoteService
from bridgequote.web.contracts.quotes import ErrorResponse, QuoteQuery, QuoteResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["quotes"])

GENERIC_QUOTE_ERROR = "Failed to fetch quote. Please try again later."


def get_quote_service(request: Request) -> QuoteService:
    return request.app.state.quote_service


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


@router.get("/quote", response_model=QuoteResponse, response_model_by_alias=True)
async def get_quote(
    from_chain: str = Query("", alias="fromChain"),
    to_chain: str = Query("", alias="toChain"),
    amount_in: Optional[str] = Query(None, alias="amountIn"),
    amount: Optional[str] = Query(None),
    token: Optional[str] = Query(None),
    dest_token: Optional[str] = Query(None, alias="destToken"),
    routing: Optional[str] = Query(None),
    slippage: Optional[str] = Query(None),
    mev: Optional[str] = Query(None),
    refuel: Optional[str] = Query(None),
    service: QuoteService = Depends(get_quote_service),
    settings: Settings = Depends(get_app_settings),
):
    """Get a cross-chain transfer quote.

    This is a READ-ONLY operation - nothing is signed or broadcast.
    """
    raw_amount = amount_in if amount_in is not None else amount
    if not from_chain.strip() or not to_chain.strip() or not (raw_amount or "").strip():
        return _error(400, "Missing parameters")

    query = QuoteQuery(
        from_chain=from_chain,
        to_chain=to_chain,
        amount=raw_amount,
        token=token,
        dest_token=dest_token,
        routing=routing,
        slippage=slippage,
        mev=mev,
        refuel=refuel,
    )

    try:
        quote_request = query.to_quote_request(settings.default_token_symbol)
        # The engine defines no timeout of its own
        result = await asyncio.wait_for(
            service.get_quote(quote_request),
            timeout=settings.quote_timeout_seconds,
        )
    except QuoteValidationError as e:
        return _error(400, e.public_detail)
    except QuoteError as e:
        logger.error(f"Quote failed: {e!r} ({getattr(e, 'detail', '')})")
        return _error(502, e.public_message)
    except asyncio.TimeoutError:
        logger.error(f"Quote timed out after {settings.quote_timeout_seconds}s")
        return _error(504, GENERIC_QUOTE_ERROR)
    except Exception as e:
        logger.exception(f"Unexpected quote error: {e}")
        return _error(500, GENERIC_QUOTE_ERROR)

    return QuoteResponse.from_result(result)


@router.post("/swap")
async def swap_not_implemented() -> JSONResponse:
    """Swap execution placeholder.

    Execution happens client-side; this endpoint only keeps the UI contract.
    """
    return _error(501, "Swap route not implemented yet. Please try again later.")
