"""Property run orchestration: generate, evaluate, shrink, record."""

from __future__ import annotations

import logging
import secrets
from collections.abc import Iterable, Iterator
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from decimal import Decimal
from functools import partial

from rateio.domain.value_objects import SplitRequest
from rateio.properties.generator import Strategy, draw_case, iter_cases
from rateio.properties.invariants import (
    Invariant,
    evaluate,
    failure_predicate,
    ordered_invariants,
)
from rateio.properties.recorder import CaseRecord, MetadataRecorder, TestCase
from rateio.properties.schemas import HarnessConfig, Report
from rateio.properties.shrinker import Shrinker, ShrinkTrace
from rateio.services.splitter import Splitter, split

logger = logging.getLogger(__name__)

_SEED_BITS = 63


@dataclass(frozen=True, slots=True)
class PlannedCase:
    """Coordinates of one case before it is evaluated."""

    seed: int
    strategy: Strategy
    index: int
    request: SplitRequest


@dataclass(frozen=True, slots=True)
class CaseRunner:
    """Evaluates single cases with a fixed splitter and configuration."""

    splitter: Splitter
    invariants: tuple[Invariant, ...]
    allow_negative: bool
    shrinker: Shrinker

    def run(self, planned: PlannedCase) -> tuple[TestCase, ShrinkTrace | None]:
        outcome = evaluate(
            planned.request,
            self.splitter,
            self.invariants,
            allow_negative=self.allow_negative,
        )
        case = TestCase(
            seed=planned.seed,
            strategy=planned.strategy,
            index=planned.index,
            input=planned.request,
            outcome=outcome,
        )
        if not outcome.is_failure:
            return case, None

        still_fails = failure_predicate(
            outcome,
            self.splitter,
            self.invariants,
            allow_negative=self.allow_negative,
        )
        return case, self.shrinker.shrink(planned.request, still_fails)

    def run_chunk(
        self, chunk: list[PlannedCase]
    ) -> list[tuple[TestCase, ShrinkTrace | None]]:
        return [self.run(planned) for planned in chunk]


def ordered_strategies(strategies: Iterable[Strategy]) -> list[Strategy]:
    """Return strategies in declaration order so plans are stable."""
    selected = set(strategies)
    return [strategy for strategy in Strategy if strategy in selected]


def plan_trials(trials: int, strategies: list[Strategy]) -> list[tuple[Strategy, int]]:
    """Divide trials among strategies, earlier strategies taking the remainder."""
    if not strategies:
        raise ValueError("At least one strategy is required")
    counts = split(Decimal(trials), len(strategies), 0).units()
    return list(zip(strategies, counts, strict=True))


def run(
    config: HarnessConfig | None = None,
    *,
    splitter: Splitter | None = None,
) -> Report:
    """Run a property campaign and return the aggregated report."""
    config = config or HarnessConfig.from_settings()
    seed = config.seed if config.seed is not None else secrets.randbits(_SEED_BITS)
    strategies = ordered_strategies(config.strategies)
    invariants = ordered_invariants(config.invariants)
    runner = _build_runner(config, invariants, splitter)
    recorder = MetadataRecorder()

    logger.info(
        "property_run_started",
        extra={
            "seed": seed,
            "trials": config.trials,
            "strategies": [strategy.value for strategy in strategies],
            "invariants": [invariant.value for invariant in invariants],
            "workers": config.workers,
            "fail_fast": config.fail_fast,
        },
    )

    planned_cases = _plan_cases(seed, config, strategies)
    if config.fail_fast or config.workers == 1:
        for planned in planned_cases:
            case, trace = runner.run(planned)
            recorder.record(case, trace)
            if config.fail_fast and case.outcome.is_failure:
                recorder.emit("property_run_stopped_early", seed=case.seed)
                break
    else:
        chunks = _chunk(list(planned_cases), config.workers)
        with ThreadPoolExecutor(max_workers=config.workers) as executor:
            for results in executor.map(runner.run_chunk, chunks):
                for case, trace in results:
                    recorder.record(case, trace)

    report = recorder.export(
        seed=seed,
        trials=config.trials,
        strategies=strategies,
        invariants=invariants,
        allow_negative=config.allow_negative,
        bounds=config.bounds,
    )
    logger.info(
        "property_run_completed",
        extra={
            "seed": seed,
            "passed": report.passed,
            "failed": report.failed,
            "errored": report.errored,
        },
    )
    return report


def run_properties(config: HarnessConfig | None = None) -> Report:
    """Check the splitter against the configured invariants."""
    return run(config)


def replay_case(
    seed: int,
    strategy: Strategy,
    index: int,
    config: HarnessConfig | None = None,
    *,
    splitter: Splitter | None = None,
) -> CaseRecord:
    """Re-derive one case from its recorded seed and index and evaluate it."""
    config = config or HarnessConfig.from_settings()
    invariants = ordered_invariants(config.invariants)
    runner = _build_runner(config, invariants, splitter)
    request = draw_case(
        seed, strategy, index, config.bounds, allow_negative=config.allow_negative
    )
    case, trace = runner.run(
        PlannedCase(seed=seed, strategy=strategy, index=index, request=request)
    )
    return CaseRecord(case=case, trace=trace)


def _build_runner(
    config: HarnessConfig,
    invariants: list[Invariant],
    splitter: Splitter | None,
) -> CaseRunner:
    return CaseRunner(
        splitter=splitter or partial(split, allow_negative=config.allow_negative),
        invariants=tuple(invariants),
        allow_negative=config.allow_negative,
        shrinker=Shrinker(
            max_steps=config.max_shrink_steps,
            timeout_seconds=config.shrink_timeout_seconds,
        ),
    )


def _plan_cases(
    seed: int,
    config: HarnessConfig,
    strategies: list[Strategy],
) -> Iterator[PlannedCase]:
    for strategy, count in plan_trials(config.trials, strategies):
        for case_seed, index, request in iter_cases(
            seed,
            strategy,
            count,
            config.bounds,
            allow_negative=config.allow_negative,
        ):
            yield PlannedCase(
                seed=case_seed,
                strategy=strategy,
                index=index,
                request=request,
            )


def _chunk(items: list[PlannedCase], parts: int) -> list[list[PlannedCase]]:
    sizes = split(Decimal(len(items)), parts, 0).units()
    chunks: list[list[PlannedCase]] = []
    start = 0
    for size in sizes:
        chunks.append(items[start : start + size])
        start += size
    return chunks
