"""Quote service: turns a transfer intent into a normalized, fee-applied quote.

Flow per request:
    validate -> resolve tokens -> convert amount -> one upstream call
    -> normalize routes -> select route -> apply protocol fee -> result

Everything that can be rejected locally is rejected before the upstream
call. The service holds no per-request state, so any number of quotes may
run concurrently. It defines no timeout; callers wrap get_quote if needed.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional, Union

from bridgequote.amounts import HumanAmount, SmallestUnitAmount, to_smallest_units
from bridgequote.config import Settings
from bridgequote.errors import InvalidSlippageError, QuoteError, UpstreamCallError
from bridgequote.fees import FeeResult, apply_fee
from bridgequote.routing.base import (
    AUTO_SLIPPAGE,
    RouteCandidate,
    RouteProvider,
    RoutingPolicy,
    UpstreamQuoteParams,
)
from bridgequote.routing.normalizer import normalize_routes
from bridgequote.routing.selector import select_route
from bridgequote.tokens import TokenDescriptor, TokenRegistry

logger = logging.getLogger(__name__)

MAX_SLIPPAGE_BPS = 5000


@dataclass(frozen=True)
class ProtectionFlags:
    """Optional transfer protections requested by the user."""

    mev: bool = False
    refuel: bool = False


@dataclass(frozen=True)
class QuoteRequest:
    """A user's transfer intent."""

    source_network: str
    dest_network: str
    token_symbol: str
    human_amount: HumanAmount
    dest_token_symbol: Optional[str] = None
    routing_policy: Union[RoutingPolicy, str] = RoutingPolicy.DEFAULT
    slippage_bps: Optional[int] = None
    protection: ProtectionFlags = field(default_factory=ProtectionFlags)

    @property
    def resolved_dest_symbol(self) -> str:
        return self.dest_token_symbol or self.token_symbol


@dataclass(frozen=True)
class QuoteResult:
    """Selected route plus the independently computed protocol fee."""

    selected_route: RouteCandidate
    fee: FeeResult
    source_token: TokenDescriptor
    dest_token: TokenDescriptor
    routing_policy: RoutingPolicy
    slippage_bps: Union[int, str]
    protection: ProtectionFlags
    route_count: int

    @property
    def amount_in(self) -> SmallestUnitAmount:
        return self.fee.gross

    @property
    def net_amount(self) -> SmallestUnitAmount:
        return self.fee.net

    @property
    def fee_amount(self) -> SmallestUnitAmount:
        return self.fee.fee


def validate_slippage_bps(slippage_bps: Optional[int]) -> Union[int, str]:
    """Return the slippage to send upstream: explicit bps or the auto sentinel.

    Raises:
        InvalidSlippageError: If slippage is outside 0-5000 bps
    """
    if slippage_bps is None:
        return AUTO_SLIPPAGE
    if isinstance(slippage_bps, bool) or not isinstance(slippage_bps, int):
        raise InvalidSlippageError(f"Slippage must be an integer number of bps, got {slippage_bps!r}")
    if not 0 <= slippage_bps <= MAX_SLIPPAGE_BPS:
        raise InvalidSlippageError(f"Slippage must be between 0 and {MAX_SLIPPAGE_BPS} bps, got {slippage_bps}")
    return slippage_bps


class QuoteService:
    """Service for cross-chain transfer quotes.

    This is a READ-ONLY service: it never signs or broadcasts anything.
    """

    def __init__(
        self,
        settings: Settings,
        provider: RouteProvider,
        registry: Optional[TokenRegistry] = None,
    ):
        """Initialize quote service.

        Args:
            settings: Fee rate, referrer identity and network whitelist
            provider: Upstream route provider
            registry: Token registry (built from settings if omitted)
        """
        self.settings = settings
        self.provider = provider
        self.registry = registry or TokenRegistry.from_settings(settings)

    def _validate(self, request: QuoteRequest):
        source = self.registry.lookup(request.source_network, request.token_symbol)
        dest = self.registry.lookup(request.dest_network, request.resolved_dest_symbol)
        policy = RoutingPolicy.parse(request.routing_policy)
        slippage = validate_slippage_bps(request.slippage_bps)
        amount_in = to_smallest_units(request.human_amount, source.decimals)

        return source, dest, policy, slippage, amount_in

    def build_upstream_params(
        self,
        source: TokenDescriptor,
        dest: TokenDescriptor,
        amount_in: SmallestUnitAmount,
        slippage: Union[int, str],
        protection: ProtectionFlags,
    ) -> UpstreamQuoteParams:
        """Build the parameters for the single upstream call."""
        return UpstreamQuoteParams(
            from_token=source,
            to_token=dest,
            amount_in=amount_in,
            slippage_bps=slippage,
            gas_drop=self.settings.refuel_gas_drop if protection.refuel else Decimal("0"),
            referrer=self.settings.referrer_address,
            referrer_bps=self.settings.referrer_bps,
            mev_protection=protection.mev,
        )

    async def get_quote(self, request: QuoteRequest) -> QuoteResult:
        """Get a normalized quote for a transfer.

        Args:
            request: Transfer intent

        Returns:
            QuoteResult with the selected route and protocol fee split

        Raises:
            QuoteValidationError: If the request is rejected locally (no upstream call made)
            UpstreamCallError: If the route provider fails
            NoRoutesError: If the provider returns no usable route
        """
        try:
            source, dest, policy, slippage, amount_in = self._validate(request)
        except QuoteError as e:
            logger.warning(f"Rejected quote request: {e}")
            raise

        logger.info(
            f"Quote request: {request.human_amount} {source.symbol} {source.network} -> "
            f"{dest.symbol} {dest.network} (policy={policy.value}, slippage={slippage})"
        )

        params = self.build_upstream_params(source, dest, amount_in, slippage, request.protection)

        try:
            raw = await self.provider.fetch_routes(params)
        except UpstreamCallError as e:
            logger.warning(f"{self.provider.name} quote failed: {e}")
            raise
        except Exception as e:
            logger.warning(f"{self.provider.name} quote failed: {type(e).__name__}: {e}")
            raise UpstreamCallError(f"{type(e).__name__}: {e}") from e

        candidates = normalize_routes(raw, default_label=self.provider.name)
        selected = select_route(candidates, policy)

        # Protocol fee applies to the user's input, independent of route economics
        fee = apply_fee(amount_in, self.settings.fee_bps)

        logger.info(
            f"Selected {selected.provider_label} route from {self.provider.name} "
            f"({len(candidates)} candidate(s)); protocol fee {fee.fee.value} of {fee.gross.value} "
            f"at {fee.fee_bps} bps"
        )

        return QuoteResult(
            selected_route=selected,
            fee=fee,
            source_token=source,
            dest_token=dest,
            routing_policy=policy,
            slippage_bps=slippage,
            protection=request.protection,
            route_count=len(candidates),
        )
