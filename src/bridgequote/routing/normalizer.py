"""Normalize raw provider responses into an ordered list of routes.

A provider response takes one of three shapes:

    [route, route, ...]            RouteList
    {"routes": [route, ...]}       RoutesEnvelope
    {"bestRoute": route}           BestRouteEnvelope

Shapes are tried in that order and the first one yielding at least one
route wins. Nothing downstream of this module inspects the shape again.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional, Sequence, Union

from bridgequote.amounts import MAX_SMALLEST_UNIT_DIGITS
from bridgequote.errors import NoRoutesError
from bridgequote.routing.base import RouteCandidate

logger = logging.getLogger(__name__)

# Field names recognised on a route object, in priority order
LABEL_FIELDS = ("type", "provider", "bridge", "name")
ETA_FIELDS = ("etaSeconds", "eta", "estimatedSeconds", "estimatedTime")
FEE_USD_FIELDS = ("feeUsd", "totalFeeUsd", "feeEstimateUsd", "fee")
NET_AMOUNT_FIELDS = ("expectedAmountOutBaseUnits", "netAmountSmallest", "amountOutBaseUnits", "toAmount")


@dataclass(frozen=True)
class RouteList:
    routes: tuple[Mapping[str, Any], ...]


@dataclass(frozen=True)
class RoutesEnvelope:
    routes: tuple[Mapping[str, Any], ...]


@dataclass(frozen=True)
class BestRouteEnvelope:
    route: Mapping[str, Any]

    @property
    def routes(self) -> tuple[Mapping[str, Any], ...]:
        return (self.route,)


ProviderResponse = Union[RouteList, RoutesEnvelope, BestRouteEnvelope]


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _route_objects(items: Sequence[Any]) -> tuple[Mapping[str, Any], ...]:
    routes = []
    for index, item in enumerate(items):
        if isinstance(item, Mapping):
            routes.append(item)
        else:
            logger.warning(f"Skipping route #{index}: expected an object, got {type(item).__name__}")
    return tuple(routes)


def classify_response(raw: Any) -> Optional[ProviderResponse]:
    """Match a raw response against the known shapes.

    Returns:
        The first shape carrying at least one route object, or None
    """
    if _is_sequence(raw):
        routes = _route_objects(raw)
        return RouteList(routes) if routes else None

    if not isinstance(raw, Mapping):
        return None

    nested = raw.get("routes")
    if _is_sequence(nested):
        routes = _route_objects(nested)
        if routes:
            return RoutesEnvelope(routes)

    best = raw.get("bestRoute")
    if isinstance(best, Mapping):
        return BestRouteEnvelope(best)

    return None


def _first(route: Mapping[str, Any], fields: Sequence[str]) -> Any:
    for name in fields:
        value = route.get(name)
        if value is not None and value != "":
            return value
    return None


def _to_decimal(value: Any) -> Optional[Decimal]:
    if value is None or isinstance(value, bool):
        return None
    try:
        parsed = Decimal(repr(value)) if isinstance(value, float) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if not parsed.is_finite() or parsed < 0:
        return None
    # Exponents past the uint256 range are not real metrics
    if parsed and parsed.adjusted() >= MAX_SMALLEST_UNIT_DIGITS:
        return None
    return parsed


def _to_seconds(value: Any) -> Optional[int]:
    parsed = _to_decimal(value)
    return int(parsed) if parsed is not None else None


def _to_smallest(value: Any) -> Optional[int]:
    parsed = _to_decimal(value)
    if parsed is None or parsed != parsed.to_integral_value():
        return None
    return int(parsed)


def to_candidate(route: Mapping[str, Any], default_label: str = "unknown") -> RouteCandidate:
    """Extract the selection fields from one route object."""
    label = _first(route, LABEL_FIELDS)
    return RouteCandidate(
        provider_label=str(label) if label is not None else default_label,
        estimated_seconds=_to_seconds(_first(route, ETA_FIELDS)),
        fee_estimate_usd=_to_decimal(_first(route, FEE_USD_FIELDS)),
        net_amount_smallest=_to_smallest(_first(route, NET_AMOUNT_FIELDS)),
        raw=route,
    )


def normalize_routes(raw: Any, default_label: str = "unknown") -> list[RouteCandidate]:
    """Turn a raw provider response into a non-empty, ordered route list.

    Args:
        raw: Provider response in any of the supported shapes
        default_label: Label used for routes that do not name themselves

    Raises:
        NoRoutesError: If no shape yields at least one route
    """
    response = classify_response(raw)
    if response is None:
        logger.warning(f"No usable routes in provider response ({type(raw).__name__})")
        raise NoRoutesError()

    candidates = [to_candidate(route, default_label) for route in response.routes]
    logger.debug(f"Normalized {len(candidates)} route(s) from {type(response).__name__}")
    return candidates
