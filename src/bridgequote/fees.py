"""Protocol fee engine.

BPS = basis points: 1% = 100 bps, 0.5% = 50 bps.

    fee = floor(gross * fee_bps / 10_000)
    net = gross - fee

Integer floor division only, so ``fee + net == gross`` holds exactly.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from bridgequote.amounts import SmallestUnitAmount
from bridgequote.errors import InvalidFeeConfigError, PrecisionMismatchError

logger = logging.getLogger(__name__)

DEFAULT_FEE_BPS = 50
BPS_DENOMINATOR = 10_000


@dataclass(frozen=True)
class FeeResult:
    """Gross amount split into protocol fee and net amount."""

    gross: SmallestUnitAmount
    fee: SmallestUnitAmount
    net: SmallestUnitAmount
    fee_bps: int

    def __post_init__(self):
        if not self.gross.decimals == self.fee.decimals == self.net.decimals:
            raise PrecisionMismatchError(self.gross.decimals, self.fee.decimals)
        if self.fee.value + self.net.value != self.gross.value:
            raise ValueError(
                f"Fee split does not conserve the gross amount: "
                f"{self.fee.value} + {self.net.value} != {self.gross.value}"
            )


def validate_fee_bps(fee_bps: int) -> int:
    """Check a fee rate is an integer in [0, 10000].

    Raises:
        InvalidFeeConfigError: If the rate is out of range or not an integer
    """
    if isinstance(fee_bps, bool) or not isinstance(fee_bps, int):
        raise InvalidFeeConfigError(f"Fee rate must be an integer number of bps, got {fee_bps!r}")
    if fee_bps < 0:
        raise InvalidFeeConfigError(f"Fee rate must be non-negative, got {fee_bps} bps")
    if fee_bps > BPS_DENOMINATOR:
        raise InvalidFeeConfigError(f"Fee rate cannot exceed {BPS_DENOMINATOR} bps, got {fee_bps}")
    return fee_bps


def apply_fee(gross: SmallestUnitAmount, fee_bps: int) -> FeeResult:
    """Split a smallest-unit amount into protocol fee and net amount.

    Example:
        fee_bps=50, gross=1_000_000 -> fee=5_000, net=995_000

    Raises:
        InvalidFeeConfigError: If fee_bps is negative or above 10000
        NegativeAmountError: If gross is negative (raised by SmallestUnitAmount)
    """
    validate_fee_bps(fee_bps)

    fee_value = gross.value * fee_bps // BPS_DENOMINATOR
    fee = SmallestUnitAmount(fee_value, gross.decimals)
    net = gross - fee
    return FeeResult(gross=gross, fee=fee, net=net, fee_bps=fee_bps)


def resolve_fee_bps(raw: Any, default: int = DEFAULT_FEE_BPS) -> int:
    """Resolve an externally configured fee rate.

    Absent, malformed, fractional or out-of-range values fall back to
    ``default`` with a warning instead of failing.
    """
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return default

    try:
        parsed = Decimal(str(raw).strip())
        if not parsed.is_finite() or parsed != parsed.to_integral_value():
            raise InvalidFeeConfigError(f"Fee rate must be a whole number of bps, got {raw!r}")
        if not 0 <= parsed <= BPS_DENOMINATOR:
            raise InvalidFeeConfigError(f"Fee rate must be between 0 and {BPS_DENOMINATOR} bps, got {raw!r}")
        return validate_fee_bps(int(parsed))
    except (InvalidOperation, ValueError, InvalidFeeConfigError) as e:
        logger.warning(f"Invalid fee configuration {raw!r} ({e}); using default {default} bps")
        return default
