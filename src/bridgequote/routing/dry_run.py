"""Dry-run route provider with deterministic simulated routes."""

import logging
from decimal import Decimal, localcontext
from typing import Any, Optional

from bridgequote.routing.base import RouteProvider, UpstreamQuoteParams

logger = logging.getLogger(__name__)


# Simulated market prices in USD
# For demonstration only, never for real transfers
SIMULATED_PRICES: dict[str, Decimal] = {
    "USDC": Decimal("1.00"),
    "USDT": Decimal("1.00"),
    "ETH": Decimal("3900.00"),
    "SOL": Decimal("225.00"),
}

# (route type, fixed relayer fee USD, proportional fee, eta seconds)
SIMULATED_ROUTES: list[tuple[str, Decimal, Decimal, int]] = [
    ("SWIFT", Decimal("1.20"), Decimal("0.0005"), 15),
    ("MCTP", Decimal("0.40"), Decimal("0"), 1080),
    ("WH", Decimal("2.10"), Decimal("0.0002"), 960),
]

RESPONSE_SHAPES = ("list", "routes", "bestRoute")


class DryRunRouteProvider(RouteProvider):
    """
    Simulated route provider for development and tests.

    Produces one route per entry in SIMULATED_ROUTES, priced from
    SIMULATED_PRICES, in a configurable response shape.
    """

    def __init__(self, response_shape: str = "list"):
        if response_shape not in RESPONSE_SHAPES:
            raise ValueError(f"response_shape must be one of {RESPONSE_SHAPES}, got {response_shape!r}")
        self.response_shape = response_shape
        self._prices = SIMULATED_PRICES.copy()
        self.calls = 0

    @property
    def name(self) -> str:
        return "dry_run"

    def set_price(self, symbol: str, price: Decimal) -> None:
        """Set simulated price for a token."""
        self._prices[symbol.upper()] = price

    def get_price(self, symbol: str) -> Optional[Decimal]:
        """Get simulated price for a token."""
        return self._prices.get(symbol.upper())

    def _simulate(self, params: UpstreamQuoteParams) -> list[dict[str, Any]]:
        from_price = self.get_price(params.from_token.symbol)
        to_price = self.get_price(params.to_token.symbol)
        if from_price is None or to_price is None:
            logger.debug(f"No simulated price for {params.from_token.symbol} or {params.to_token.symbol}")
            return []

        routes = []
        with localcontext() as ctx:
            ctx.prec = 80
            usd_value = Decimal(params.amount_in.value) * from_price / (Decimal(10) ** params.from_token.decimals)

            for route_type, fixed_fee, fee_rate, eta in SIMULATED_ROUTES:
                fee_usd = fixed_fee + usd_value * fee_rate
                out_usd = usd_value - fee_usd
                if out_usd <= 0:
                    continue
                out_units = int(out_usd / to_price * (Decimal(10) ** params.to_token.decimals))
                routes.append({
                    "type": route_type,
                    "etaSeconds": eta,
                    "feeUsd": str(fee_usd.quantize(Decimal("0.01"))),
                    "expectedAmountOutBaseUnits": str(out_units),
                    "fromToken": params.from_token.on_chain_id,
                    "toToken": params.to_token.on_chain_id,
                    "fromChain": params.from_network,
                    "toChain": params.to_network,
                    "slippageBps": params.slippage_bps,
                    "gasDrop": str(params.gas_drop),
                    "simulated": True,
                })
        return routes

    async def fetch_routes(self, params: UpstreamQuoteParams) -> Any:
        """Generate simulated routes in the configured response shape."""
        self.calls += 1
        routes = self._simulate(params)

        if self.response_shape == "routes":
            return {"routes": routes}
        if self.response_shape == "bestRoute":
            return {"bestRoute": routes[0]} if routes else {}
        return routes
