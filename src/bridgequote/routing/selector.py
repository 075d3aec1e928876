"""Route selection policies."""

import logging
from typing import Callable, Optional, Sequence, TypeVar

from bridgequote.errors import NoRoutesError
from bridgequote.routing.base import RouteCandidate, RoutingPolicy

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _missing_last(value: Optional[T]) -> tuple:
    # Routes that do not report a metric lose to any route that does
    if value is None:
        return (True, 0)
    return (False, value)


def _minimize(
    candidates: Sequence[RouteCandidate],
    metric: Callable[[RouteCandidate], Optional[T]],
    metric_name: str,
) -> RouteCandidate:
    if all(metric(c) is None for c in candidates):
        logger.warning(f"No route reports {metric_name}; keeping provider order")
    # min() keeps the first of equal keys, so provider order breaks ties
    return min(candidates, key=lambda c: _missing_last(metric(c)))


def select_route(candidates: Sequence[RouteCandidate], policy: RoutingPolicy) -> RouteCandidate:
    """Pick exactly one route according to the policy.

    - cheapest: lowest fee_estimate_usd
    - fastest: lowest estimated_seconds
    - safest / default: the provider's first route

    Raises:
        NoRoutesError: If candidates is empty
    """
    if not candidates:
        raise NoRoutesError()

    policy = RoutingPolicy(policy)
    if policy == RoutingPolicy.CHEAPEST:
        selected = _minimize(candidates, lambda c: c.fee_estimate_usd, "fee_estimate_usd")
    elif policy == RoutingPolicy.FASTEST:
        selected = _minimize(candidates, lambda c: c.estimated_seconds, "estimated_seconds")
    else:
        selected = candidates[0]

    logger.debug(
        f"Selected {selected.provider_label} by {policy.value} policy "
        f"(fee_usd={selected.fee_estimate_usd}, eta={selected.estimated_seconds}s) "
        f"out of {len(candidates)} route(s)"
    )
    return selected
