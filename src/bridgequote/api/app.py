"""FastAPI application factory."""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bridgequote import __version__
from bridgequote.config import Settings, get_settings
from bridgequote.routing.base import RouteProvider
from bridgequote.routing.factory import create_route_provider
from bridgequote.services.quote_service import QuoteService
from bridgequote.tokens import TokenRegistry

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    provider: Optional[RouteProvider] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Configuration (defaults to environment settings)
        provider: Route provider (defaults to the configured provider)
    """
    settings = settings or get_settings()
    provider = provider or create_route_provider(settings)

    app = FastAPI(
        title="BridgeQuote API",
        description="Cross-chain transfer quote API",
        version=__version__,
        debug=settings.debug,
    )

    app.state.settings = settings
    app.state.quote_service = QuoteService(
        settings=settings,
        provider=provider,
        registry=TokenRegistry.from_settings(settings),
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.debug else settings.cors_origins,
        allow_credentials=not settings.debug,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    # Register routes
    from bridgequote.api.routes import health
    from bridgequote.web.controllers import quotes_router, tokens_router

    app.include_router(health.router, tags=["Health"])
    app.include_router(quotes_router, prefix="/api")
    app.include_router(tokens_router, prefix="/api")

    logger.info(
        f"App created: provider={provider.name}, fee={settings.fee_bps} bps, "
        f"networks={','.join(settings.networks)}"
    )
    return app
