"""Money helpers converting Decimal amounts to integer smallest units.

Amounts are rounded to ``scale`` fractional digits with ROUND_HALF_EVEN, once,
before any integer arithmetic happens. Unit counts are bounded by a signed
128-bit range so that every split fits a fixed-width ledger column.
"""

from collections.abc import Iterable
from decimal import (
    ROUND_DOWN,
    ROUND_HALF_EVEN,
    Context,
    Decimal,
    DivisionByZero,
    InvalidOperation,
    Overflow,
    localcontext,
)
from typing import Final

from rateio.domain.errors import InvalidAmountError, ScaleOverflowError

MAX_SCALE: Final[int] = 28
MAX_UNITS: Final[int] = 2**127 - 1
SPLIT_ROUNDING: Final[str] = ROUND_HALF_EVEN

# Enough digits for MAX_UNITS (39) plus headroom for quantize.
_UNIT_DIGITS_LIMIT: Final[int] = 40
_UNIT_CONTEXT: Final[Context] = Context(
    prec=80,
    rounding=SPLIT_ROUNDING,
    traps=[InvalidOperation, DivisionByZero, Overflow],
)


def is_valid_scale(scale: int) -> bool:
    """Return whether scale is inside the supported precision range."""

    return 0 <= scale <= MAX_SCALE


def unit_quantum(scale: int) -> Decimal:
    """Return one smallest unit at scale, e.g. ``Decimal("0.01")`` for 2."""

    return Decimal((0, (1,), -scale))


def to_units(amount: Decimal, scale: int) -> int:
    """Convert amount into a signed count of smallest units at scale."""

    if not amount.is_finite():
        raise InvalidAmountError(details={"amount": str(amount)})
    if amount.is_zero():
        return 0
    if amount.adjusted() + scale + 1 > _UNIT_DIGITS_LIMIT:
        raise ScaleOverflowError(
            details={"amount": str(amount), "scale": scale},
        )

    units = _signed_coefficient(rescale(amount, scale))
    if abs(units) > MAX_UNITS:
        raise ScaleOverflowError(
            details={"amount": str(amount), "scale": scale, "units": str(units)},
        )
    return units


def from_units(units: int, scale: int) -> Decimal:
    """Build a Decimal carrying exactly ``scale`` fractional digits."""

    digits = tuple(int(char) for char in str(abs(units)))
    return Decimal((1 if units < 0 else 0, digits, -scale))


def quantize_to_scale(amount: Decimal, scale: int) -> Decimal:
    """Return amount rounded to scale with the split rounding policy."""

    return from_units(to_units(amount, scale), scale)


def fractional_digits(value: Decimal) -> int:
    """Return how many fractional digits the Decimal representation carries."""

    exponent = value.as_tuple().exponent
    if not isinstance(exponent, int):
        raise ValueError(f"Non-finite decimal has no fractional digits: {value}")
    return max(0, -exponent)


def truncate_significant(amount: Decimal, digits: int) -> Decimal:
    """Round amount toward zero keeping ``digits`` significant digits."""

    if digits < 1:
        raise ValueError(f"digits must be positive, got {digits}")
    if amount.is_zero():
        return amount

    exponent = amount.adjusted() - digits + 1
    with localcontext(_UNIT_CONTEXT):
        truncated = amount.quantize(Decimal((0, (1,), exponent)), rounding=ROUND_DOWN)
    return truncated


def significant_digits(amount: Decimal) -> int:
    """Return the count of significant digits, ignoring trailing zeros."""

    if amount.is_zero():
        return 0
    return len(amount.normalize(_UNIT_CONTEXT).as_tuple().digits)


def exact_sum(values: Iterable[Decimal]) -> Decimal:
    """Sum Decimals without the default 28-digit context rounding."""

    total = Decimal(0)
    with localcontext(_UNIT_CONTEXT):
        for value in values:
            total += value
    return total


def rescale(amount: Decimal, scale: int, rounding: str = SPLIT_ROUNDING) -> Decimal:
    """Quantize amount to scale with enough precision for its magnitude."""

    with localcontext(_UNIT_CONTEXT) as context:
        context.prec = max(_UNIT_CONTEXT.prec, amount.adjusted() + scale + 2)
        return amount.quantize(unit_quantum(scale), rounding=rounding)


def units_toward_zero(amount: Decimal, scale: int) -> int:
    """Return the signed unit count at scale, dropping extra digits, unbounded."""

    if amount.is_zero():
        return 0
    return _signed_coefficient(rescale(amount, scale, ROUND_DOWN))


def _signed_coefficient(value: Decimal) -> int:
    sign, digits, _ = value.as_tuple()
    coefficient = int("".join(str(digit) for digit in digits))
    return -coefficient if sign else coefficient
