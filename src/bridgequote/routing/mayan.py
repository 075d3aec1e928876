"""Mayan cross-chain route provider.

Queries the Mayan price API for transfer routes between chains.
API: https://price-api.mayan.finance/v3/quote
"""

import logging
from typing import Any, Optional

import httpx

from bridgequote.errors import UpstreamCallError
from bridgequote.routing.base import RouteProvider, UpstreamQuoteParams

logger = logging.getLogger(__name__)

MAYAN_PRICE_API = "https://price-api.mayan.finance/v3/quote"

# Route families requested from the API
ROUTE_TYPES = ("swift", "mctp", "wormhole")


class MayanProvider(RouteProvider):
    """Route provider backed by the Mayan price API.

    Makes exactly one HTTP request per quote and never retries.
    """

    def __init__(
        self,
        base_url: str = MAYAN_PRICE_API,
        timeout: float = 30.0,
        solana_program: Optional[str] = None,
        forwarder_address: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize Mayan provider.

        Args:
            base_url: Quote endpoint URL
            timeout: HTTP timeout in seconds
            solana_program: Optional Solana program id forwarded to the API
            forwarder_address: Optional EVM forwarder address forwarded to the API
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url
        self.timeout = timeout
        self.solana_program = solana_program
        self.forwarder_address = forwarder_address
        self._transport = transport

    @property
    def name(self) -> str:
        return "Mayan"

    def _get_headers(self) -> dict:
        return {"Accept": "application/json"}

    def build_query(self, params: UpstreamQuoteParams) -> dict[str, str]:
        """Translate quote parameters into API query parameters."""
        query = {
            "amountIn64": params.amount_in64,
            "fromToken": params.from_token.on_chain_id,
            "toToken": params.to_token.on_chain_id,
            "fromChain": params.from_network,
            "toChain": params.to_network,
            "slippageBps": str(params.slippage_bps),
            "gasDrop": str(params.gas_drop),
            "referrerBps": str(params.referrer_bps),
        }
        for route_type in ROUTE_TYPES:
            query[route_type] = "true"
        if params.referrer:
            query["referrer"] = params.referrer
        if self.solana_program:
            query["solanaProgram"] = self.solana_program
        if self.forwarder_address:
            query["forwarderAddress"] = self.forwarder_address
        return query

    async def fetch_routes(self, params: UpstreamQuoteParams) -> Any:
        """Fetch candidate routes from Mayan.

        Returns:
            The decoded response; a ``{"quotes": [...]}`` envelope is unwrapped
            into a bare list

        Raises:
            UpstreamCallError: On transport failure, non-200 status,
                invalid JSON or an API error payload
        """
        query = self.build_query(params)
        logger.debug(
            f"Requesting Mayan quote: {params.amount_in64} {params.from_token.symbol} "
            f"{params.from_network} -> {params.to_token.symbol} {params.to_network}"
        )

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(self.base_url, headers=self._get_headers(), params=query)
        except httpx.HTTPError as e:
            logger.warning(f"Mayan request failed: {type(e).__name__}: {e}")
            raise UpstreamCallError(f"{type(e).__name__}: {e}") from e

        if response.status_code != 200:
            logger.warning(f"Mayan API error: {response.status_code} - {response.text}")
            raise UpstreamCallError(response.text[:500], status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamCallError("Invalid JSON in Mayan response") from e

        if isinstance(data, dict):
            if "quotes" in data:
                return data["quotes"]
            if "code" in data and "msg" in data:
                # API-level error delivered with HTTP 200
                raise UpstreamCallError(f"{data.get('code')}: {data.get('msg')}")

        return data
