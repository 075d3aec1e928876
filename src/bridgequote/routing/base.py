"""Routing types and the abstract route provider interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping, Optional, Union

from bridgequote.amounts import SmallestUnitAmount
from bridgequote.errors import InvalidRoutingPolicyError
from bridgequote.tokens import TokenDescriptor

AUTO_SLIPPAGE = "auto"


class RoutingPolicy(str, Enum):
    """Objective used to pick one route among candidates."""

    FASTEST = "fastest"
    CHEAPEST = "cheapest"
    SAFEST = "safest"
    DEFAULT = "default"

    @classmethod
    def parse(cls, value: Optional[str]) -> "RoutingPolicy":
        """Parse a policy name; empty means DEFAULT.

        Raises:
            InvalidRoutingPolicyError: If the name is not a declared policy
        """
        if isinstance(value, cls):
            return value
        if value is None or not str(value).strip():
            return cls.DEFAULT
        try:
            return cls(str(value).strip().lower())
        except ValueError as e:
            allowed = ", ".join(p.value for p in cls)
            raise InvalidRoutingPolicyError(
                f"Unknown routing policy '{value}' (expected one of: {allowed})"
            ) from e


@dataclass(frozen=True)
class RouteCandidate:
    """One normalized route from the upstream provider.

    Only the fields needed for selection are extracted; ``raw`` is the
    provider's payload, passed through to the caller untouched.
    """

    provider_label: str
    estimated_seconds: Optional[int]
    fee_estimate_usd: Optional[Decimal]
    net_amount_smallest: Optional[int]
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)


@dataclass(frozen=True)
class UpstreamQuoteParams:
    """Parameters for the single upstream quote call."""

    from_token: TokenDescriptor
    to_token: TokenDescriptor
    amount_in: SmallestUnitAmount
    slippage_bps: Union[int, str] = AUTO_SLIPPAGE
    gas_drop: Decimal = Decimal("0")
    referrer: Optional[str] = None
    referrer_bps: int = 0
    mev_protection: bool = False

    @property
    def from_network(self) -> str:
        return self.from_token.network

    @property
    def to_network(self) -> str:
        return self.to_token.network

    @property
    def amount_in64(self) -> str:
        """Amount in smallest units as a decimal string."""
        return str(self.amount_in.value)


class RouteProvider(ABC):
    """Abstract base class for upstream route providers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name identifier."""
        pass

    @abstractmethod
    async def fetch_routes(self, params: UpstreamQuoteParams) -> Any:
        """
        Request candidate routes for a transfer.

        Args:
            params: Resolved tokens, smallest-unit amount, slippage and referrer

        Returns:
            The provider's raw response: a list of route objects, an object
            with a ``routes`` list, or an object with a single ``bestRoute``

        Raises:
            UpstreamCallError: If the provider cannot be reached or fails
        """
        pass
