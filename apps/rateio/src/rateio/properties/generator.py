"""Seeded split request generation for property runs."""

from __future__ import annotations

import math
from collections.abc import Iterator
from decimal import Decimal
from enum import StrEnum
from random import Random

from pydantic import BaseModel, Field, model_validator

from rateio.domain.errors import ScaleOverflowError
from rateio.domain.money import MAX_SCALE, MAX_UNITS, from_units, to_units
from rateio.domain.value_objects import SplitRequest

_MASK_64 = (1 << 64) - 1
MONETARY_SCALES = (0, 2, 3)
SMALL_GROUP_RANGE = (2, 12)


class Strategy(StrEnum):
    """Named case generation strategies."""

    UNIFORM = "uniform"
    BOUNDARY = "boundary"
    MONETARY = "monetary"


class BoundaryKind(StrEnum):
    """Canonical edge inputs emitted by the boundary strategy, in order."""

    ZERO_AMOUNT = "zero_amount"
    ONE_UNIT = "one_unit"
    MAX_AMOUNT = "max_amount"
    SINGLE_RECIPIENT = "single_recipient"
    RECIPIENTS_EXCEED_UNITS = "recipients_exceed_units"
    ZERO_RECIPIENTS = "zero_recipients"
    SCALE_ABOVE_MAX = "scale_above_max"
    OVERFLOW_AMOUNT = "overflow_amount"


BOUNDARY_KINDS = tuple(BoundaryKind)


class GeneratorBounds(BaseModel):
    """Ranges used by the random strategies."""

    min_amount: Decimal = Field(default=Decimal("0"), ge=0)
    max_amount: Decimal = Field(default=Decimal("1000000"), gt=0)
    min_recipients: int = Field(default=1, ge=1)
    max_recipients: int = Field(default=100, ge=1, le=100_000)
    max_scale: int = Field(default=6, ge=0, le=MAX_SCALE)

    @model_validator(mode="after")
    def validate_ranges(self) -> GeneratorBounds:
        if self.min_amount > self.max_amount:
            raise ValueError("min_amount must not exceed max_amount")
        if self.min_recipients > self.max_recipients:
            raise ValueError("min_recipients must not exceed max_recipients")
        return self

    @model_validator(mode="after")
    def validate_representable(self) -> GeneratorBounds:
        # Uniform draws go up to max_scale, monetary draws up to the widest
        # currency scale; max_amount must fit the unit range at both.
        widest_scale = max(self.max_scale, MONETARY_SCALES[-1])
        try:
            to_units(self.max_amount, widest_scale)
        except ScaleOverflowError as exc:
            raise ValueError(
                f"max_amount {self.max_amount} exceeds {MAX_UNITS} units "
                f"at scale {widest_scale}"
            ) from exc
        return self


def derive_case_seed(seed: int, strategy: Strategy, index: int) -> int:
    """Mix run seed, strategy, and index into an independent case seed."""
    ordinal = list(Strategy).index(strategy)
    value = seed * 0x9E3779B97F4A7C15 + ordinal * 0xD1B54A32D192ED03 + index
    value &= _MASK_64
    value = ((value ^ (value >> 30)) * 0xBF58476D1CE4E5B9) & _MASK_64
    value = ((value ^ (value >> 27)) * 0x94D049BB133111EB) & _MASK_64
    return value ^ (value >> 31)


def draw_case(
    case_seed: int,
    strategy: Strategy,
    index: int,
    bounds: GeneratorBounds | None = None,
    *,
    allow_negative: bool = False,
) -> SplitRequest:
    """Draw the request identified by ``(case_seed, strategy, index)``.

    With ``allow_negative`` the uniform and monetary strategies flip the sign
    of about half their amounts. Boundary inputs are never flipped.
    """
    bounds = bounds or GeneratorBounds()
    rng = Random(case_seed)
    if strategy == Strategy.UNIFORM:
        request = _draw_uniform(rng, bounds)
    elif strategy == Strategy.MONETARY:
        request = _draw_monetary(rng, bounds)
    else:
        return _draw_boundary(rng, bounds, BOUNDARY_KINDS[index % len(BOUNDARY_KINDS)])

    if allow_negative and rng.random() < 0.5:
        request = request.with_changes(amount=-request.amount)
    return request


def iter_cases(
    seed: int,
    strategy: Strategy,
    count: int,
    bounds: GeneratorBounds | None = None,
    *,
    start: int = 0,
    allow_negative: bool = False,
) -> Iterator[tuple[int, int, SplitRequest]]:
    """Yield ``(case_seed, index, request)`` for indices ``start..count-1``."""
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")
    for index in range(start, count):
        case_seed = derive_case_seed(seed, strategy, index)
        request = draw_case(
            case_seed, strategy, index, bounds, allow_negative=allow_negative
        )
        yield case_seed, index, request


def generate(
    seed: int,
    strategy: Strategy,
    count: int,
    bounds: GeneratorBounds | None = None,
    *,
    allow_negative: bool = False,
) -> Iterator[SplitRequest]:
    """Lazily generate ``count`` requests; same arguments give same sequence."""
    cases = iter_cases(seed, strategy, count, bounds, allow_negative=allow_negative)
    for _, _, request in cases:
        yield request


def _draw_uniform(rng: Random, bounds: GeneratorBounds) -> SplitRequest:
    scale = rng.randint(0, bounds.max_scale)
    low_units = to_units(bounds.min_amount, scale)
    high_units = to_units(bounds.max_amount, scale)
    units = rng.randint(low_units, high_units)
    recipients = rng.randint(bounds.min_recipients, bounds.max_recipients)
    return SplitRequest(
        amount=from_units(units, scale),
        recipients=recipients,
        scale=scale,
    )


def _draw_monetary(rng: Random, bounds: GeneratorBounds) -> SplitRequest:
    scale = rng.choice(MONETARY_SCALES)
    high_units = max(1, to_units(bounds.max_amount, scale))
    low_units = max(1, to_units(bounds.min_amount, scale))
    if low_units >= high_units:
        units = high_units
    else:
        exponent = rng.uniform(math.log10(low_units), math.log10(high_units))
        units = min(high_units, max(low_units, int(10**exponent)))

    small_low, small_high = SMALL_GROUP_RANGE
    small_high = min(small_high, bounds.max_recipients)
    small_low = max(small_low, bounds.min_recipients)
    if small_low <= small_high and rng.random() < 0.8:
        recipients = rng.randint(small_low, small_high)
    else:
        recipients = rng.randint(bounds.min_recipients, bounds.max_recipients)
    return SplitRequest(
        amount=from_units(units, scale),
        recipients=recipients,
        scale=scale,
    )


def _draw_boundary(
    rng: Random,
    bounds: GeneratorBounds,
    kind: BoundaryKind,
) -> SplitRequest:
    scale = rng.randint(0, MAX_SCALE)
    recipients = rng.randint(bounds.min_recipients, bounds.max_recipients)

    if kind == BoundaryKind.ZERO_AMOUNT:
        zero = from_units(0, scale)
        return SplitRequest(amount=zero, recipients=recipients, scale=scale)
    if kind == BoundaryKind.ONE_UNIT:
        unit = from_units(1, scale)
        return SplitRequest(amount=unit, recipients=recipients, scale=scale)
    if kind == BoundaryKind.MAX_AMOUNT:
        return SplitRequest(
            amount=from_units(MAX_UNITS, scale),
            recipients=recipients,
            scale=scale,
        )
    if kind == BoundaryKind.SINGLE_RECIPIENT:
        units = rng.randint(0, MAX_UNITS)
        return SplitRequest(amount=from_units(units, scale), recipients=1, scale=scale)
    if kind == BoundaryKind.RECIPIENTS_EXCEED_UNITS:
        units = rng.randint(0, max(0, bounds.max_recipients - 1))
        return SplitRequest(
            amount=from_units(units, scale),
            recipients=units + 1,
            scale=scale,
        )
    if kind == BoundaryKind.ZERO_RECIPIENTS:
        return SplitRequest(amount=from_units(1, scale), recipients=0, scale=scale)
    if kind == BoundaryKind.SCALE_ABOVE_MAX:
        return SplitRequest(
            amount=from_units(1, MAX_SCALE),
            recipients=recipients,
            scale=MAX_SCALE + 1,
        )
    return SplitRequest(
        amount=from_units(MAX_UNITS + 1, scale),
        recipients=recipients,
        scale=scale,
    )
