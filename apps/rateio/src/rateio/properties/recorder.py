"""Accumulates per-case metadata and structured events for a property run."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from rateio.domain.value_objects import SplitRequest
from rateio.properties.generator import GeneratorBounds, Strategy
from rateio.properties.invariants import Invariant, Outcome, OutcomeKind
from rateio.properties.schemas import FailureRecord, Report, RequestSnapshot
from rateio.properties.shrinker import ShrinkTrace

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TestCase:
    """One generated request and how the splitter fared on it."""

    __test__ = False

    seed: int
    strategy: Strategy
    index: int
    input: SplitRequest
    outcome: Outcome


@dataclass(frozen=True, slots=True)
class CaseRecord:
    """Stored entry for one case; failing cases carry their shrink trace."""

    case: TestCase
    trace: ShrinkTrace | None = None

    @property
    def minimal_input(self) -> SplitRequest:
        if self.trace is None:
            return self.case.input
        return self.trace.minimal

    def to_failure(self) -> FailureRecord:
        """Serialize a failing case with full reproduction data."""
        outcome = self.case.outcome
        if not outcome.is_failure or outcome.violation is None:
            raise ValueError("Only failing cases can be exported as failures")
        trace = self.trace or ShrinkTrace(steps=(self.case.input,))
        return FailureRecord(
            seed=self.case.seed,
            strategy=self.case.strategy,
            index=self.case.index,
            kind=outcome.kind,
            violation=outcome.violation,
            original_input=RequestSnapshot.from_request(self.case.input),
            minimal_input=RequestSnapshot.from_request(trace.minimal),
            shrink_trace=[RequestSnapshot.from_request(step) for step in trace.steps],
            transformations=list(trace.transformations),
            shrink_evaluations=trace.evaluations,
            shrink_exhausted=trace.exhausted,
        )


@dataclass(frozen=True, slots=True)
class RecorderEvent:
    """Structured event emitted while a run progresses."""

    name: str
    seed: int | None
    fields: dict[str, Any] = field(default_factory=dict)


class MetadataRecorder:
    """Keeps one record per case seed; interpretation is left to the report."""

    def __init__(self) -> None:
        self._records: dict[int, CaseRecord] = {}
        self._events: list[RecorderEvent] = []

    @property
    def records(self) -> list[CaseRecord]:
        return list(self._records.values())

    @property
    def events(self) -> list[RecorderEvent]:
        return list(self._events)

    def get(self, seed: int) -> CaseRecord | None:
        return self._records.get(seed)

    def record(self, case: TestCase, trace: ShrinkTrace | None = None) -> CaseRecord:
        """Store the case and, for failures, emit its trace summary."""
        if case.seed in self._records:
            raise ValueError(f"Case seed {case.seed} was already recorded")

        entry = CaseRecord(case=case, trace=trace)
        self._records[case.seed] = entry
        if case.outcome.is_failure:
            self.emit(
                "case_failed",
                seed=case.seed,
                strategy=case.strategy.value,
                index=case.index,
                kind=case.outcome.kind.value,
                violation=case.outcome.violation,
                original_input=case.input.describe(),
            )
        if trace is not None:
            self.emit(
                "case_shrunk",
                seed=case.seed,
                steps=len(trace.steps) - 1,
                evaluations=trace.evaluations,
                exhausted=trace.exhausted,
                minimal_input=trace.minimal.describe(),
            )
        return entry

    def emit(self, name: str, *, seed: int | None = None, **fields: Any) -> None:
        """Append a structured event and forward it to the module logger."""
        self._events.append(RecorderEvent(name=name, seed=seed, fields=fields))
        logger.info(name, extra={"case_seed": seed, **fields})

    def export(
        self,
        *,
        seed: int,
        trials: int,
        strategies: Iterable[Strategy],
        invariants: Iterable[Invariant],
        allow_negative: bool = True,
        bounds: GeneratorBounds | None = None,
    ) -> Report:
        """Aggregate recorded cases into a report."""
        passed = 0
        failed = 0
        errored = 0
        failures: list[FailureRecord] = []
        for entry in self._records.values():
            outcome = entry.case.outcome
            if not outcome.is_failure:
                passed += 1
                continue
            failed += 1
            if outcome.kind == OutcomeKind.UNEXPECTED_ERROR:
                errored += 1
            failures.append(entry.to_failure())

        return Report(
            seed=seed,
            trials=trials,
            strategies=list(strategies),
            invariants=list(invariants),
            passed=passed,
            failed=failed,
            errored=errored,
            failures=failures,
            allow_negative=allow_negative,
            bounds=bounds or GeneratorBounds(),
        )
