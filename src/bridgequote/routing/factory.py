"""Factory for creating the upstream route provider.

Creates the live Mayan provider when dry-run mode is off, otherwise
falls back to the simulated provider.
"""

import logging

from bridgequote.config import Settings
from bridgequote.routing.base import RouteProvider

logger = logging.getLogger(__name__)


def create_mayan_provider(settings: Settings) -> RouteProvider:
    """Create the Mayan provider from settings."""
    from bridgequote.routing.mayan import MayanProvider

    return MayanProvider(
        base_url=settings.price_api_url,
        timeout=settings.upstream_timeout_seconds,
        solana_program=settings.solana_program,
        forwarder_address=settings.forwarder_address,
    )


def create_route_provider(settings: Settings) -> RouteProvider:
    """Create the route provider for the configured mode."""
    if not settings.dry_run:
        provider = create_mayan_provider(settings)
        logger.info(f"Using {provider.name} route provider ({settings.price_api_url})")
        return provider

    from bridgequote.routing.dry_run import DryRunRouteProvider

    logger.warning("DRY_RUN enabled - using simulated routes")
    return DryRunRouteProvider()
