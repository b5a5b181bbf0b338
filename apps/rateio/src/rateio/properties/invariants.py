"""Invariant predicates and case evaluation against a splitter."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import StrEnum

from rateio.domain.errors import (
    DomainError,
    InvalidAmountError,
    InvalidScaleError,
    NegativeAmountError,
    ScaleOverflowError,
    SplitError,
    ZeroRecipientsError,
)
from rateio.domain.money import (
    fractional_digits,
    is_valid_scale,
    quantize_to_scale,
    to_units,
)
from rateio.domain.value_objects import ShareSet, SplitRequest
from rateio.services.splitter import Splitter

logger = logging.getLogger(__name__)

REJECTS_INVALID_INPUT = "rejects_invalid_input"


class Invariant(StrEnum):
    """Properties every split must satisfy."""

    CONSERVATION = "conservation"
    SCALE_FIDELITY = "scale_fidelity"
    BOUNDED_SPREAD = "bounded_spread"
    DETERMINISM = "determinism"
    REMAINDER_PLACEMENT = "remainder_placement"


DEFAULT_INVARIANTS = frozenset(
    {
        Invariant.CONSERVATION,
        Invariant.SCALE_FIDELITY,
        Invariant.BOUNDED_SPREAD,
        Invariant.DETERMINISM,
    }
)


class OutcomeKind(StrEnum):
    """How a single case ended."""

    PASSED = "passed"
    INVARIANT_VIOLATION = "invariant_violation"
    UNEXPECTED_ERROR = "unexpected_error"


@dataclass(frozen=True, slots=True)
class Outcome:
    """Result of evaluating one request; ``violation`` names what failed."""

    kind: OutcomeKind
    violation: str | None = None

    @classmethod
    def passed(cls) -> Outcome:
        return cls(kind=OutcomeKind.PASSED)

    @classmethod
    def violated(cls, invariant: str) -> Outcome:
        return cls(kind=OutcomeKind.INVARIANT_VIOLATION, violation=invariant)

    @classmethod
    def errored(cls, error_code: str) -> Outcome:
        return cls(kind=OutcomeKind.UNEXPECTED_ERROR, violation=error_code)

    @property
    def is_failure(self) -> bool:
        return self.kind != OutcomeKind.PASSED


InvariantCheck = Callable[[SplitRequest, ShareSet, Splitter], bool]


def expected_rejection(request: SplitRequest, *, allow_negative: bool) -> str | None:
    """Return the error code the splitter must raise, or None if it must split.

    Codes are checked in the same precedence the splitter applies them.
    """
    if request.recipients < 1:
        return ZeroRecipientsError().code
    if not is_valid_scale(request.scale):
        return InvalidScaleError().code
    if not request.amount.is_finite():
        return InvalidAmountError().code
    if (
        request.amount.is_signed()
        and not request.amount.is_zero()
        and not allow_negative
    ):
        return NegativeAmountError().code
    try:
        to_units(request.amount, request.scale)
    except ScaleOverflowError as exc:
        return exc.code
    return None


def check_conservation(
    request: SplitRequest, shares: ShareSet, splitter: Splitter
) -> bool:
    """Shares are one per recipient and sum to the amount rounded to scale."""
    if len(shares) != request.recipients:
        return False
    return shares.total() == quantize_to_scale(request.amount, request.scale)


def check_scale_fidelity(
    request: SplitRequest, shares: ShareSet, splitter: Splitter
) -> bool:
    """No share carries more fractional digits than the requested scale."""
    if shares.scale != request.scale:
        return False
    return all(
        share.is_finite() and fractional_digits(share) <= request.scale
        for share in shares
    )


def check_bounded_spread(
    request: SplitRequest, shares: ShareSet, splitter: Splitter
) -> bool:
    """Largest and smallest share differ by at most one smallest unit."""
    units = shares.units()
    if not units:
        return False
    return max(units) - min(units) <= 1


def check_determinism(
    request: SplitRequest, shares: ShareSet, splitter: Splitter
) -> bool:
    """A second call with the same input returns the same representation."""
    again = splitter(request.amount, request.recipients, request.scale)
    return [str(share) for share in again] == [str(share) for share in shares]


def check_remainder_placement(
    request: SplitRequest, shares: ShareSet, splitter: Splitter
) -> bool:
    """Exactly the lowest-index recipients hold the extra unit."""
    total_units = to_units(request.amount, request.scale)
    sign = -1 if total_units < 0 else 1
    base, remainder = divmod(abs(total_units), request.recipients)
    expected = [
        sign * (base + 1) if index < remainder else sign * base
        for index in range(request.recipients)
    ]
    return shares.units() == expected


INVARIANT_CHECKS: dict[Invariant, InvariantCheck] = {
    Invariant.CONSERVATION: check_conservation,
    Invariant.SCALE_FIDELITY: check_scale_fidelity,
    Invariant.BOUNDED_SPREAD: check_bounded_spread,
    Invariant.DETERMINISM: check_determinism,
    Invariant.REMAINDER_PLACEMENT: check_remainder_placement,
}


def ordered_invariants(invariants: Iterable[Invariant]) -> list[Invariant]:
    """Return invariants in declaration order so evaluation is stable."""
    selected = set(invariants)
    return [invariant for invariant in Invariant if invariant in selected]


def evaluate(
    request: SplitRequest,
    splitter: Splitter,
    invariants: Iterable[Invariant],
    *,
    allow_negative: bool,
) -> Outcome:
    """Run the splitter on request and classify the result."""
    expected_code = expected_rejection(request, allow_negative=allow_negative)
    try:
        shares = splitter(request.amount, request.recipients, request.scale)
    except SplitError as exc:
        if exc.code == expected_code:
            return Outcome.passed()
        return Outcome.errored(exc.code)
    except Exception as exc:
        logger.warning(
            "splitter_raised_unexpected_exception",
            extra={"request": request.describe(), "error_type": type(exc).__name__},
        )
        return Outcome.errored(type(exc).__name__)

    if expected_code is not None:
        return Outcome.violated(REJECTS_INVALID_INPUT)

    for invariant in ordered_invariants(invariants):
        check = INVARIANT_CHECKS[invariant]
        try:
            holds = check(request, shares, splitter)
        except (DomainError, ArithmeticError, ValueError):
            holds = False
        if not holds:
            return Outcome.violated(invariant.value)
    return Outcome.passed()


def failure_predicate(
    outcome: Outcome,
    splitter: Splitter,
    invariants: Iterable[Invariant],
    *,
    allow_negative: bool,
) -> Callable[[SplitRequest], bool]:
    """Build a predicate telling whether a request reproduces ``outcome``."""
    selected = ordered_invariants(invariants)

    def still_fails(request: SplitRequest) -> bool:
        candidate = evaluate(
            request,
            splitter,
            selected,
            allow_negative=allow_negative,
        )
        return candidate == outcome

    return still_fails
