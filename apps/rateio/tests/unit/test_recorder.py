from __future__ import annotations

import logging
from decimal import Decimal

import pytest

from rateio.domain.value_objects import SplitRequest
from rateio.properties.generator import Strategy
from rateio.properties.invariants import Invariant, Outcome, OutcomeKind
from rateio.properties.recorder import CaseRecord, MetadataRecorder, TestCase
from rateio.properties.shrinker import ShrinkTrace


def _case(seed: int, outcome: Outcome, index: int = 0) -> TestCase:
    return TestCase(
        seed=seed,
        strategy=Strategy.UNIFORM,
        index=index,
        input=SplitRequest(amount=Decimal("123.45"), recipients=7, scale=2),
        outcome=outcome,
    )


def test_record_rejects_duplicate_case_seed() -> None:
    recorder = MetadataRecorder()
    recorder.record(_case(1, Outcome.passed()))

    with pytest.raises(ValueError):
        recorder.record(_case(1, Outcome.passed(), index=1))


def test_failing_case_emits_failure_and_shrink_events(
    caplog: pytest.LogCaptureFixture,
) -> None:
    recorder = MetadataRecorder()
    case = _case(9, Outcome.violated(Invariant.CONSERVATION.value))
    minimal = SplitRequest(amount=Decimal("0.01"), recipients=2, scale=2)
    trace = ShrinkTrace(
        steps=(case.input, minimal),
        transformations=("halve_amount",),
        evaluations=3,
    )

    with caplog.at_level(logging.INFO, logger="rateio.properties.recorder"):
        entry = recorder.record(case, trace)

    assert entry.minimal_input == minimal
    assert [event.name for event in recorder.events] == ["case_failed", "case_shrunk"]
    assert recorder.events[0].fields["violation"] == "conservation"
    assert recorder.events[1].fields["steps"] == 1
    assert {record.message for record in caplog.records} >= {
        "case_failed",
        "case_shrunk",
    }


def test_passing_case_emits_nothing() -> None:
    recorder = MetadataRecorder()

    entry = recorder.record(_case(2, Outcome.passed()))

    assert recorder.events == []
    assert recorder.get(2) == entry
    assert entry.minimal_input == entry.case.input


def test_export_counts_and_serializes_failures() -> None:
    recorder = MetadataRecorder()
    recorder.record(_case(1, Outcome.passed()))
    failing = _case(2, Outcome.violated(Invariant.BOUNDED_SPREAD.value), index=1)
    recorder.record(failing, ShrinkTrace(steps=(failing.input,)))
    recorder.record(_case(3, Outcome.errored("ZeroDivisionError"), index=2))

    report = recorder.export(
        seed=42,
        trials=3,
        strategies=[Strategy.UNIFORM],
        invariants=[Invariant.BOUNDED_SPREAD],
    )

    assert (report.passed, report.failed, report.errored) == (1, 2, 1)
    assert not report.ok
    assert [failure.kind for failure in report.failures] == [
        OutcomeKind.INVARIANT_VIOLATION,
        OutcomeKind.UNEXPECTED_ERROR,
    ]
    unshrunk = report.failures[1]
    assert unshrunk.shrink_trace == [unshrunk.original_input]
    assert unshrunk.minimal_input.amount == Decimal("123.45")


def test_passing_record_cannot_be_exported_as_failure() -> None:
    with pytest.raises(ValueError):
        CaseRecord(case=_case(5, Outcome.passed())).to_failure()
