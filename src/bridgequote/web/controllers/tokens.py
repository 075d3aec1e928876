"""Token whitelist API endpoints."""

from fastapi import APIRouter, Depends, Request

from bridgequote.tokens import TokenRegistry
from bridgequote.web.contracts.tokens import TokenInfo, TokenListResponse

router = APIRouter(tags=["tokens"])


def get_token_registry(request: Request) -> TokenRegistry:
    return request.app.state.quote_service.registry


@router.get("/tokens", response_model=TokenListResponse)
async def get_tokens(registry: TokenRegistry = Depends(get_token_registry)) -> TokenListResponse:
    """Get the supported networks and tokens.

    Returns every (network, symbol) pair a quote can be requested for.
    """
    tokens = [TokenInfo.from_descriptor(t) for t in registry.tokens()]
    return TokenListResponse(
        success=True,
        networks=registry.networks,
        tokens=tokens,
        total=len(tokens),
    )
