"""Quote request and response contracts."""

from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from bridgequote.amounts import to_human
from bridgequote.errors import InvalidSlippageError
from bridgequote.services.quote_service import ProtectionFlags, QuoteRequest, QuoteResult

TRUE_STRINGS = {"1", "true", "yes", "on"}
MAX_SLIPPAGE_PERCENT = Decimal("50")


def parse_flag(value: Optional[str]) -> bool:
    """Parse a boolean-like query string value."""
    if value is None:
        return False
    return value.strip().lower() in TRUE_STRINGS


def slippage_percent_to_bps(value: Optional[str]) -> Optional[int]:
    """Convert a slippage percentage (0-50) into whole basis points.

    Raises:
        InvalidSlippageError: If the value is not a number in range
    """
    if value is None or not value.strip():
        return None
    try:
        percent = Decimal(value.strip())
    except InvalidOperation as e:
        raise InvalidSlippageError(f"Invalid slippage: {value!r}") from e
    if not percent.is_finite() or not 0 <= percent <= MAX_SLIPPAGE_PERCENT:
        raise InvalidSlippageError(f"Slippage must be between 0 and 50 percent, got {value}")
    return int(percent * 100)


class QuoteQuery(BaseModel):
    """Raw inbound quote query. Values stay strings until converted."""

    from_chain: str = Field(default="", description="Source network (solana, ethereum, ...)")
    to_chain: str = Field(default="", description="Destination network")
    amount: str = Field(default="", description="Human-readable amount (e.g. 90.5)")
    token: Optional[str] = Field(None, description="Source token symbol")
    dest_token: Optional[str] = Field(None, description="Destination token symbol (defaults to token)")
    routing: Optional[str] = Field(None, description="fastest, cheapest, safest or default")
    slippage: Optional[str] = Field(None, description="Slippage tolerance in percent (0-50)")
    mev: Optional[str] = Field(None, description="MEV protection flag")
    refuel: Optional[str] = Field(None, description="Destination gas refuel flag")

    def to_quote_request(self, default_token: str) -> QuoteRequest:
        """Convert to a domain request.

        Raises:
            InvalidSlippageError: If the slippage value is malformed
        """
        token = (self.token or "").strip() or default_token
        return QuoteRequest(
            source_network=self.from_chain.strip().lower(),
            dest_network=self.to_chain.strip().lower(),
            token_symbol=token.upper(),
            dest_token_symbol=self.dest_token.strip().upper() if self.dest_token and self.dest_token.strip() else None,
            human_amount=self.amount.strip(),
            routing_policy=self.routing or "",
            slippage_bps=slippage_percent_to_bps(self.slippage),
            protection=ProtectionFlags(mev=parse_flag(self.mev), refuel=parse_flag(self.refuel)),
        )


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProtectionInfo(CamelModel):
    mev: bool = False
    refuel: bool = False


class QuoteResponse(CamelModel):
    """Response containing the selected route and protocol fee."""

    success: bool = Field(True, description="Whether quote was successful")
    selected_route: dict[str, Any] = Field(default_factory=dict, description="Provider route payload")
    provider: str = Field(..., description="Selected route label (SWIFT, MCTP, ...)")
    amount_in: str = Field(..., description="Input amount in smallest units")
    net_amount: str = Field(..., description="Input minus protocol fee, smallest units")
    fee_amount: str = Field(..., description="Protocol fee, smallest units")
    net_amount_human: str = Field(..., description="Net amount for display")
    fee_amount_human: str = Field(..., description="Fee amount for display")
    fee_bps: int = Field(..., description="Protocol fee rate")
    estimated_seconds: Optional[int] = Field(None, description="Provider time estimate")
    fee_estimate_usd: Optional[str] = Field(None, description="Provider fee estimate in USD")
    route_net_amount: Optional[str] = Field(None, description="Provider's expected output, smallest units")
    routing_policy: str = Field(..., description="Policy used for selection")
    slippage_bps: str = Field(..., description="Slippage sent upstream (bps or auto)")
    route_count: int = Field(..., description="Number of candidate routes")
    protection: ProtectionInfo = Field(default_factory=ProtectionInfo)

    @classmethod
    def from_result(cls, result: QuoteResult) -> "QuoteResponse":
        route = result.selected_route
        return cls(
            selected_route=dict(route.raw),
            provider=route.provider_label,
            amount_in=str(result.amount_in.value),
            net_amount=str(result.net_amount.value),
            fee_amount=str(result.fee_amount.value),
            net_amount_human=to_human(result.net_amount),
            fee_amount_human=to_human(result.fee_amount),
            fee_bps=result.fee.fee_bps,
            estimated_seconds=route.estimated_seconds,
            fee_estimate_usd=str(route.fee_estimate_usd) if route.fee_estimate_usd is not None else None,
            route_net_amount=str(route.net_amount_smallest) if route.net_amount_smallest is not None else None,
            routing_policy=result.routing_policy.value,
            slippage_bps=str(result.slippage_bps),
            route_count=result.route_count,
            protection=ProtectionInfo(mev=result.protection.mev, refuel=result.protection.refuel),
        )


class ErrorResponse(BaseModel):
    """Failure response. Carries a short message only."""

    success: bool = False
    error: str
