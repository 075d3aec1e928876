"""Exception taxonomy for quote requests.

Every error carries a short, stable ``public_message`` that is safe to show
to a caller. Upstream failures keep their raw detail on the exception for
logging only; it is never part of the public message.
"""

from typing import Optional


class QuoteError(Exception):
    """Base class for all quote failures. Scoped to a single request."""

    public_message = "Failed to fetch quote"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.public_message
        super().__init__(self.message)


class QuoteValidationError(QuoteError):
    """Raised for requests rejected locally, before any upstream call."""

    public_message = "Invalid quote request"

    @property
    def public_detail(self) -> str:
        # Validation messages describe caller input only, so they are safe to surface.
        return self.message


class UnsupportedTokenError(QuoteValidationError):
    """Raised when a (network, symbol) pair is not in the token whitelist."""

    public_message = "Unsupported token/network combination"

    def __init__(self, network: str, symbol: str):
        self.network = network
        self.symbol = symbol
        super().__init__(f"Unsupported token/network combination: {symbol} on {network}")


class InvalidAmountError(QuoteValidationError):
    """Raised for non-finite, non-positive or unparseable human amounts."""

    public_message = "Amount must be a positive number"


class NegativeAmountError(QuoteValidationError):
    """Raised when a smallest-unit amount is negative."""

    public_message = "Amount must be non-negative"


class PrecisionMismatchError(QuoteValidationError):
    """Raised when amounts of different decimal precision are combined."""

    public_message = "Amounts have different decimal precision"

    def __init__(self, left: int, right: int):
        super().__init__(f"Cannot combine amounts with {left} and {right} decimals without rescaling")


class InvalidSlippageError(QuoteValidationError):
    """Raised when slippage is outside the accepted bounds."""

    public_message = "Slippage must be between 0 and 50 percent"


class InvalidRoutingPolicyError(QuoteValidationError):
    """Raised for routing policy names that are not declared."""

    public_message = "Unknown routing policy"


class InvalidFeeConfigError(QuoteValidationError):
    """Raised when a protocol fee rate is negative or above 10000 bps.

    Configuration loading recovers from this by falling back to the default
    rate; only direct callers of the fee engine ever see it.
    """

    public_message = "Invalid protocol fee configuration"


class NoRoutesError(QuoteError):
    """Raised when the upstream response yields zero usable routes."""

    public_message = "No routes available for this transfer"


class UpstreamCallError(QuoteError):
    """Raised when the upstream route provider call fails."""

    public_message = "Failed to fetch quote from route provider"

    def __init__(self, detail: str = "", status_code: Optional[int] = None):
        self.detail = detail
        self.status_code = status_code
        super().__init__(self.public_message)

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.public_message}: HTTP {self.status_code} {self.detail}".rstrip()
        return f"{self.public_message}: {self.detail}" if self.detail else self.public_message
