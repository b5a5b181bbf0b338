"""Conservation-preserving split of an amount among recipients."""

from __future__ import annotations

from collections.abc import Callable
from decimal import Decimal

from rateio.domain.errors import (
    InvalidAmountError,
    InvalidScaleError,
    NegativeAmountError,
    ZeroRecipientsError,
)
from rateio.domain.money import MAX_SCALE, is_valid_scale, to_units
from rateio.domain.value_objects import ShareSet, SplitRequest

Splitter = Callable[[Decimal, int, int], ShareSet]


def split(
    amount: Decimal,
    recipients: int,
    scale: int,
    *,
    allow_negative: bool = True,
) -> ShareSet:
    """Split amount into ``recipients`` shares at ``scale`` fractional digits.

    The amount is rounded half-even to scale once, then divided as an integer
    count of smallest units. The first ``remainder`` recipients receive one
    extra unit. Negative amounts split their magnitude and every share takes
    the sign of the amount, so lower indices absorb the extra unit of
    magnitude in both directions.
    """
    if recipients < 1:
        raise ZeroRecipientsError(details={"recipients": recipients})
    if not is_valid_scale(scale):
        raise InvalidScaleError(details={"scale": scale, "max_scale": MAX_SCALE})
    if not amount.is_finite():
        raise InvalidAmountError(details={"amount": str(amount)})
    if amount.is_signed() and not amount.is_zero() and not allow_negative:
        raise NegativeAmountError(details={"amount": str(amount)})

    total_units = to_units(amount, scale)
    sign = -1 if total_units < 0 else 1
    base, remainder = divmod(abs(total_units), recipients)

    units = [
        sign * (base + 1) if index < remainder else sign * base
        for index in range(recipients)
    ]
    return ShareSet.from_units(units, scale)


def split_request(request: SplitRequest, *, allow_negative: bool = True) -> ShareSet:
    """Split a request value object."""
    return split(
        request.amount,
        request.recipients,
        request.scale,
        allow_negative=allow_negative,
    )
