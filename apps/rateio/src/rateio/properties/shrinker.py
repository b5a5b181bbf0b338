"""Work-list minimisation of failing split requests.

Each step tries the transformations in priority order and accepts the first
candidate that still reproduces the failure, then restarts from the first
transformation. The search stops at a local fixed point, when every candidate
of a step either passes, was already visited, or is ill-formed, or when the
evaluation or time budget runs out.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from time import monotonic

from rateio.domain.money import (
    from_units,
    rescale,
    significant_digits,
    truncate_significant,
    units_toward_zero,
)
from rateio.domain.value_objects import SplitRequest

logger = logging.getLogger(__name__)

FailurePredicate = Callable[[SplitRequest], bool]
Transformation = Callable[[SplitRequest], Iterator[SplitRequest]]

DEFAULT_MAX_STEPS = 10_000


@dataclass(frozen=True, slots=True)
class ShrinkTrace:
    """Accepted requests from the original failure down to the minimal one."""

    steps: tuple[SplitRequest, ...]
    transformations: tuple[str, ...] = ()
    evaluations: int = 0
    exhausted: bool = False

    def __post_init__(self) -> None:
        if not self.steps:
            raise ValueError("A shrink trace needs at least the original request")
        if len(self.transformations) != len(self.steps) - 1:
            raise ValueError("Each accepted step needs exactly one transformation")

    @property
    def original(self) -> SplitRequest:
        return self.steps[0]

    @property
    def minimal(self) -> SplitRequest:
        return self.steps[-1]


def halve_amount(request: SplitRequest) -> Iterator[SplitRequest]:
    """Move the amount's magnitude toward zero."""
    amount = request.amount
    if amount.is_zero() or not amount.is_finite():
        return
    sign = -1 if amount.is_signed() else 1
    magnitude_units = abs(units_toward_zero(amount, request.scale))

    for units in (0, 1, magnitude_units // 2, magnitude_units - 1):
        if 0 <= units < magnitude_units:
            yield request.with_changes(amount=from_units(sign * units, request.scale))


def fewer_recipients(request: SplitRequest) -> Iterator[SplitRequest]:
    """Move recipients toward one."""
    for recipients in (1, request.recipients // 2, request.recipients - 1):
        if 1 <= recipients < request.recipients:
            yield request.with_changes(recipients=recipients)


def lower_scale(request: SplitRequest) -> Iterator[SplitRequest]:
    """Move scale toward zero, re-rounding the amount to the new scale."""
    for scale in (0, request.scale // 2, request.scale - 1):
        if not 0 <= scale < request.scale:
            continue
        amount = request.amount
        if amount.is_finite():
            amount = rescale(amount, scale)
        yield request.with_changes(amount=amount, scale=scale)


def fewer_digits(request: SplitRequest) -> Iterator[SplitRequest]:
    """Round the amount toward zero to fewer significant digits."""
    amount = request.amount
    if not amount.is_finite():
        return
    for digits in range(1, significant_digits(amount)):
        rounded = rescale(truncate_significant(amount, digits), request.scale)
        yield request.with_changes(amount=rounded)


TRANSFORMATIONS: tuple[tuple[str, Transformation], ...] = (
    ("halve_amount", halve_amount),
    ("fewer_recipients", fewer_recipients),
    ("lower_scale", lower_scale),
    ("fewer_digits", fewer_digits),
)


@dataclass(slots=True)
class Shrinker:
    """Shrinks failing requests within an evaluation and wall-clock budget."""

    max_steps: int = DEFAULT_MAX_STEPS
    timeout_seconds: float | None = None
    clock: Callable[[], float] = field(default=monotonic)

    def shrink(
        self,
        request: SplitRequest,
        still_fails: FailurePredicate,
    ) -> ShrinkTrace:
        """Return the trace from ``request`` to a locally minimal failure."""
        started_at = self.clock()
        current = request
        steps = [request]
        transformations: list[str] = []
        visited = {request.key()}
        evaluations = 0
        exhausted = False

        while True:
            accepted: tuple[str, SplitRequest] | None = None
            for name, candidate in _candidates(current):
                key = candidate.key()
                if key in visited:
                    continue
                if self._budget_spent(evaluations, started_at):
                    exhausted = True
                    break
                visited.add(key)
                evaluations += 1
                if still_fails(candidate):
                    accepted = (name, candidate)
                    break

            if accepted is None:
                break
            name, current = accepted
            steps.append(current)
            transformations.append(name)

        if exhausted:
            logger.info(
                "shrink_budget_exhausted",
                extra={
                    "evaluations": evaluations,
                    "accepted_steps": len(transformations),
                    "minimal_input": current.describe(),
                },
            )
        return ShrinkTrace(
            steps=tuple(steps),
            transformations=tuple(transformations),
            evaluations=evaluations,
            exhausted=exhausted,
        )

    def _budget_spent(self, evaluations: int, started_at: float) -> bool:
        if evaluations >= self.max_steps:
            return True
        if self.timeout_seconds is None:
            return False
        return self.clock() - started_at >= self.timeout_seconds


def shrink(
    request: SplitRequest,
    still_fails: FailurePredicate,
    *,
    max_steps: int = DEFAULT_MAX_STEPS,
    timeout_seconds: float | None = None,
) -> ShrinkTrace:
    """Shrink ``request`` with a default-configured :class:`Shrinker`."""
    shrinker = Shrinker(max_steps=max_steps, timeout_seconds=timeout_seconds)
    return shrinker.shrink(request, still_fails)


def is_locally_minimal(request: SplitRequest, still_fails: FailurePredicate) -> bool:
    """Return whether no single transformation step still reproduces the failure."""
    return not any(still_fails(candidate) for _, candidate in _candidates(request))


def _candidates(request: SplitRequest) -> Iterator[tuple[str, SplitRequest]]:
    for name, transformation in TRANSFORMATIONS:
        for candidate in transformation(request):
            if candidate.is_well_formed() and candidate.key() != request.key():
                yield name, candidate

