from decimal import Decimal

import pytest
from pydantic import ValidationError

from rateio.domain.errors import ScaleOverflowError
from rateio.domain.money import MAX_SCALE, MAX_UNITS, fractional_digits, to_units
from rateio.properties.generator import (
    MONETARY_SCALES,
    GeneratorBounds,
    Strategy,
    derive_case_seed,
    draw_case,
    generate,
    iter_cases,
)


@pytest.mark.parametrize("strategy", list(Strategy))
def test_same_seed_generates_same_sequence(strategy: Strategy) -> None:
    first = [request.key() for request in generate(1234, strategy, 64)]
    second = [request.key() for request in generate(1234, strategy, 64)]

    assert first == second
    assert len(first) == 64


def test_different_seeds_generate_different_sequences() -> None:
    first = [request.key() for request in generate(1, Strategy.UNIFORM, 32)]
    second = [request.key() for request in generate(2, Strategy.UNIFORM, 32)]

    assert first != second


def test_case_seed_depends_on_strategy_and_index() -> None:
    seeds = {
        derive_case_seed(7, strategy, index)
        for strategy in Strategy
        for index in range(100)
    }

    assert len(seeds) == len(Strategy) * 100


def test_iter_cases_resumes_from_start_index() -> None:
    full = list(iter_cases(99, Strategy.MONETARY, 10))
    tail = list(iter_cases(99, Strategy.MONETARY, 10, start=6))

    assert [(seed, index) for seed, index, _ in tail] == [
        (seed, index) for seed, index, _ in full[6:]
    ]


def test_case_can_be_redrawn_from_its_seed_and_index() -> None:
    for case_seed, index, request in iter_cases(5, Strategy.BOUNDARY, 16):
        assert draw_case(case_seed, Strategy.BOUNDARY, index).key() == request.key()


def test_uniform_cases_respect_bounds() -> None:
    bounds = GeneratorBounds(
        min_amount=Decimal("10"),
        max_amount=Decimal("500"),
        min_recipients=2,
        max_recipients=9,
        max_scale=3,
    )

    for request in generate(42, Strategy.UNIFORM, 200, bounds):
        assert Decimal("10") <= request.amount <= Decimal("500")
        assert 2 <= request.recipients <= 9
        assert 0 <= request.scale <= 3
        assert fractional_digits(request.amount) == request.scale


def test_monetary_cases_use_currency_scales() -> None:
    for request in generate(42, Strategy.MONETARY, 200):
        assert request.scale in MONETARY_SCALES
        assert request.amount > 0
        assert request.recipients >= 1


def test_negative_amounts_only_when_allowed() -> None:
    default_amounts = [req.amount for req in generate(3, Strategy.UNIFORM, 200)]
    signed_amounts = [
        req.amount for req in generate(3, Strategy.UNIFORM, 200, allow_negative=True)
    ]

    assert all(amount >= 0 for amount in default_amounts)
    assert any(amount < 0 for amount in signed_amounts)


def test_boundary_cases_are_never_sign_flipped() -> None:
    plain = list(generate(4, Strategy.BOUNDARY, 16))
    signed = list(generate(4, Strategy.BOUNDARY, 16, allow_negative=True))

    assert signed == plain


def test_boundary_strategy_cycles_edge_inputs_by_index() -> None:
    cases = [request for _, _, request in iter_cases(11, Strategy.BOUNDARY, 8)]
    (
        zero_amount,
        one_unit,
        max_amount,
        single_recipient,
        exceeding,
        zero_recipients,
        above_max_scale,
        overflow,
    ) = cases

    assert zero_amount.amount.is_zero()
    assert to_units(one_unit.amount, one_unit.scale) == 1
    assert to_units(max_amount.amount, max_amount.scale) == MAX_UNITS
    assert single_recipient.recipients == 1
    assert exceeding.recipients == to_units(exceeding.amount, exceeding.scale) + 1
    assert zero_recipients.recipients == 0
    assert above_max_scale.scale == MAX_SCALE + 1
    with pytest.raises(ScaleOverflowError):
        to_units(overflow.amount, overflow.scale)


def test_bounds_reject_inverted_ranges() -> None:
    with pytest.raises(ValidationError):
        GeneratorBounds(min_amount=Decimal("10"), max_amount=Decimal("1"))
    with pytest.raises(ValidationError):
        GeneratorBounds(min_recipients=5, max_recipients=2)


def test_negative_count_is_rejected() -> None:
    with pytest.raises(ValueError):
        list(iter_cases(1, Strategy.UNIFORM, -1))


def test_bounds_reject_max_amount_beyond_unit_range() -> None:
    with pytest.raises(ValidationError, match="max_amount"):
        GeneratorBounds(max_amount=Decimal("1e35"))
    with pytest.raises(ValidationError, match="max_amount"):
        GeneratorBounds(max_amount=Decimal("1e20"), max_scale=28)


def test_bounds_accept_max_amount_within_unit_range() -> None:
    bounds = GeneratorBounds(max_amount=Decimal("1e20"), max_scale=6)

    requests = list(generate(2, Strategy.UNIFORM, 20, bounds))

    assert all(request.amount <= Decimal("1e20") for request in requests)
