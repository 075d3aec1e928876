"""Lossless conversion between human decimal amounts and smallest units.

All arithmetic in the smallest-unit domain uses Python integers. Decimal is
only used to parse the caller's human-readable input; it is never multiplied
by a precision factor, so the 28-digit Decimal context cannot round anything.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Union

from bridgequote.errors import InvalidAmountError, NegativeAmountError, PrecisionMismatchError


MAX_DECIMALS = 18
DISPLAY_FRACTION_DIGITS = 6

# uint256 ceiling shared by every supported chain
MAX_SMALLEST_UNITS = 2**256 - 1
MAX_SMALLEST_UNIT_DIGITS = len(str(MAX_SMALLEST_UNITS))

HumanAmount = Union[Decimal, str, int, float]


@dataclass(frozen=True)
class SmallestUnitAmount:
    """An integer token amount at full on-chain precision."""

    value: int
    decimals: int

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise InvalidAmountError(f"Smallest-unit amount must be an integer, got {self.value!r}")
        if self.value < 0:
            raise NegativeAmountError(f"Smallest-unit amount must be non-negative, got {self.value}")
        if not 0 <= self.decimals <= MAX_DECIMALS:
            raise InvalidAmountError(f"Decimals must be between 0 and {MAX_DECIMALS}, got {self.decimals}")

    def _check_precision(self, other: "SmallestUnitAmount") -> None:
        if self.decimals != other.decimals:
            raise PrecisionMismatchError(self.decimals, other.decimals)

    def __add__(self, other: "SmallestUnitAmount") -> "SmallestUnitAmount":
        self._check_precision(other)
        return SmallestUnitAmount(self.value + other.value, self.decimals)

    def __sub__(self, other: "SmallestUnitAmount") -> "SmallestUnitAmount":
        self._check_precision(other)
        return SmallestUnitAmount(self.value - other.value, self.decimals)

    def __lt__(self, other: "SmallestUnitAmount") -> bool:
        self._check_precision(other)
        return self.value < other.value

    def __le__(self, other: "SmallestUnitAmount") -> bool:
        self._check_precision(other)
        return self.value <= other.value

    def rescale(self, decimals: int) -> "SmallestUnitAmount":
        """Re-express this amount at another precision, truncating on downscale."""
        if decimals == self.decimals:
            return self
        if decimals > self.decimals:
            return SmallestUnitAmount(self.value * 10 ** (decimals - self.decimals), decimals)
        return SmallestUnitAmount(self.value // 10 ** (self.decimals - decimals), decimals)

    def __str__(self) -> str:
        return str(self.value)


def parse_human_amount(raw: HumanAmount) -> Decimal:
    """Parse a human-readable amount into a Decimal.

    Floats go through their shortest repr so ``0.1`` parses as ``Decimal("0.1")``.

    Raises:
        InvalidAmountError: If the input is not a number
    """
    if isinstance(raw, bool):
        raise InvalidAmountError(f"Invalid amount: {raw!r}")
    if isinstance(raw, Decimal):
        return raw
    try:
        if isinstance(raw, float):
            return Decimal(repr(raw))
        return Decimal(str(raw).strip())
    except (InvalidOperation, ValueError) as e:
        raise InvalidAmountError(f"Invalid amount: {raw!r}") from e


def to_smallest_units(human_amount: HumanAmount, decimals: int) -> SmallestUnitAmount:
    """Convert a human amount to smallest units.

    Fractional digits beyond ``decimals`` are truncated, never rounded up,
    so a transfer is never overstated.

    Args:
        human_amount: Amount in token units (e.g. "90.5" USDC)
        decimals: Token decimal precision (0-18)

    Returns:
        SmallestUnitAmount at the given precision

    Raises:
        InvalidAmountError: If the amount is not finite, not positive, or
            truncates to zero smallest units
    """
    if not 0 <= decimals <= MAX_DECIMALS:
        raise InvalidAmountError(f"Decimals must be between 0 and {MAX_DECIMALS}, got {decimals}")

    value = parse_human_amount(human_amount)
    if not value.is_finite():
        raise InvalidAmountError(f"Amount must be finite, got {value}")
    if value <= 0:
        raise InvalidAmountError(f"Amount must be positive, got {value}")

    # Reject exponents outside the uint256 range before building a power of ten
    if value.adjusted() + decimals >= MAX_SMALLEST_UNIT_DIGITS:
        raise InvalidAmountError(f"Amount is too large: {value}")
    if value.adjusted() + decimals < 0:
        raise InvalidAmountError(f"Amount {value} is below the smallest unit for {decimals} decimals")

    _, digits, exponent = value.as_tuple()
    coefficient = int("".join(str(d) for d in digits))
    shift = exponent + decimals
    if shift >= 0:
        units = coefficient * 10**shift
    else:
        units = coefficient // 10 ** (-shift)

    if units == 0:
        raise InvalidAmountError(f"Amount {value} is below the smallest unit for {decimals} decimals")
    if units > MAX_SMALLEST_UNITS:
        raise InvalidAmountError(f"Amount is too large: {value}")

    return SmallestUnitAmount(units, decimals)


def to_human(amount: SmallestUnitAmount, max_fraction_digits: int = DISPLAY_FRACTION_DIGITS) -> str:
    """Format a smallest-unit amount for display.

    The fractional part is truncated to ``max_fraction_digits`` and trailing
    zeros are stripped: 1_500_000 at 6 decimals -> "1.5".
    """
    if amount.decimals == 0:
        return str(amount.value)

    whole, frac = divmod(amount.value, 10**amount.decimals)
    frac_str = str(frac).zfill(amount.decimals)[:max_fraction_digits].rstrip("0")
    return f"{whole}.{frac_str}" if frac_str else str(whole)
