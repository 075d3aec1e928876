"""Routing module for cross-chain transfer routes.

Providers:
- Mayan: live cross-chain route API (SWIFT, MCTP, Wormhole)
- Dry run: deterministic simulated routes for development
"""

from bridgequote.routing.base import (
    AUTO_SLIPPAGE,
    RouteCandidate,
    RouteProvider,
    RoutingPolicy,
    UpstreamQuoteParams,
)
from bridgequote.routing.dry_run import DryRunRouteProvider
from bridgequote.routing.factory import create_mayan_provider, create_route_provider
from bridgequote.routing.mayan import MayanProvider
from bridgequote.routing.normalizer import normalize_routes
from bridgequote.routing.selector import select_route

__all__ = [
    # Base types
    "AUTO_SLIPPAGE",
    "RouteCandidate",
    "RouteProvider",
    "RoutingPolicy",
    "UpstreamQuoteParams",
    # Providers
    "DryRunRouteProvider",
    "MayanProvider",
    # Factory functions
    "create_route_provider",
    "create_mayan_provider",
    # Normalization and selection
    "normalize_routes",
    "select_route",
]
