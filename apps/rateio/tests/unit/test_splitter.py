from collections.abc import Iterable
from decimal import Decimal

import pytest

from rateio import split as public_split
from rateio.domain.errors import (
    InvalidAmountError,
    InvalidScaleError,
    NegativeAmountError,
    ScaleOverflowError,
    ZeroRecipientsError,
)
from rateio.domain.value_objects import SplitRequest
from rateio.services.splitter import split, split_request


def _as_text(values: Iterable[Decimal]) -> list[str]:
    return [str(value) for value in values]


def test_split_gives_remainder_unit_to_first_recipient() -> None:
    shares = split(Decimal("100.01"), 4, 2)

    assert _as_text(shares) == ["25.01", "25.00", "25.00", "25.00"]
    assert shares.total() == Decimal("100.01")


def test_split_single_unit_among_five() -> None:
    shares = split(Decimal("0.01"), 5, 2)

    assert _as_text(shares) == ["0.01", "0.00", "0.00", "0.00", "0.00"]
    assert shares.total() == Decimal("0.01")


def test_split_spreads_remainder_over_lowest_indices() -> None:
    shares = split(Decimal("12.34"), 5, 2)

    assert shares.units() == [247, 247, 247, 247, 246]
    assert _as_text(shares) == ["2.47", "2.47", "2.47", "2.47", "2.46"]
    assert shares.total() == Decimal("12.34")


def test_split_large_amount_at_cent_scale_conserves_exactly() -> None:
    amount = Decimal("999999999999999999.99")

    shares = split(amount, 10, 2)

    assert len(shares) == 10
    assert shares.total() == amount
    assert shares[0] == Decimal("100000000000000000.00")
    assert shares[9] == Decimal("99999999999999999.99")


def test_split_large_amount_overflows_at_max_scale() -> None:
    with pytest.raises(ScaleOverflowError) as exc_info:
        split(Decimal("999999999999999999.99"), 10, 28)

    assert exc_info.value.code == "SCALE_OVERFLOW"
    assert exc_info.value.details["scale"] == 28


def test_split_rejects_zero_recipients() -> None:
    with pytest.raises(ZeroRecipientsError) as exc_info:
        split(Decimal("100.00"), 0, 2)

    assert exc_info.value.code == "ZERO_RECIPIENTS"
    assert exc_info.value.status_code == 422


def test_split_rejects_negative_recipients() -> None:
    with pytest.raises(ZeroRecipientsError):
        split(Decimal("100.00"), -3, 2)


@pytest.mark.parametrize("scale", [-1, 29])
def test_split_rejects_scale_outside_supported_range(scale: int) -> None:
    with pytest.raises(InvalidScaleError):
        split(Decimal("1"), 2, scale)


@pytest.mark.parametrize("amount", ["NaN", "Infinity", "-Infinity"])
def test_split_rejects_non_finite_amounts(amount: str) -> None:
    with pytest.raises(InvalidAmountError):
        split(Decimal(amount), 2, 2)


def test_recipients_check_precedes_scale_check() -> None:
    with pytest.raises(ZeroRecipientsError):
        split(Decimal("1"), 0, 99)


def test_split_rounds_half_even_before_dividing() -> None:
    shares = split(Decimal("10.005"), 2, 2)

    assert _as_text(shares) == ["5.00", "5.00"]
    assert split(Decimal("10.015"), 2, 2).total() == Decimal("10.02")


def test_split_zero_amount_gives_zero_shares() -> None:
    shares = split(Decimal("0"), 3, 2)

    assert _as_text(shares) == ["0.00", "0.00", "0.00"]


def test_split_with_more_recipients_than_units() -> None:
    shares = split(Decimal("0.03"), 5, 2)

    assert shares.units() == [1, 1, 1, 0, 0]


def test_split_negative_amount_applies_sign_to_every_share() -> None:
    shares = split(Decimal("-100.01"), 4, 2)

    assert _as_text(shares) == ["-25.01", "-25.00", "-25.00", "-25.00"]
    assert shares.total() == Decimal("-100.01")


def test_split_rejects_negative_amount_when_disabled() -> None:
    with pytest.raises(NegativeAmountError):
        split(Decimal("-1.00"), 2, 2, allow_negative=False)

    assert _as_text(split(Decimal("-0"), 2, 2, allow_negative=False)) == [
        "0.00",
        "0.00",
    ]


def test_split_at_scale_zero_uses_whole_units() -> None:
    shares = split(Decimal("7"), 3, 0)

    assert _as_text(shares) == ["3", "2", "2"]


def test_split_request_and_public_export_agree() -> None:
    request = SplitRequest(amount=Decimal("12.34"), recipients=5, scale=2)

    assert split_request(request) == public_split(Decimal("12.34"), 5, 2)
