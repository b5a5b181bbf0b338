"""Pydantic models for harness configuration and run reports."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field

from rateio.core.settings import Settings, get_settings
from rateio.domain.value_objects import SplitRequest
from rateio.properties.generator import GeneratorBounds, Strategy
from rateio.properties.invariants import DEFAULT_INVARIANTS, Invariant, OutcomeKind
from rateio.properties.shrinker import DEFAULT_MAX_STEPS

MAX_SEED = 2**63 - 1


class RequestSnapshot(BaseModel):
    """Serializable form of one split request."""

    amount: Decimal
    recipients: int
    scale: int

    @classmethod
    def from_request(cls, request: SplitRequest) -> RequestSnapshot:
        return cls(
            amount=request.amount,
            recipients=request.recipients,
            scale=request.scale,
        )

    def to_request(self) -> SplitRequest:
        return SplitRequest(
            amount=self.amount,
            recipients=self.recipients,
            scale=self.scale,
        )


class HarnessConfig(BaseModel):
    """Options recognised by a property run."""

    trials: int = Field(default=1000, ge=0)
    seed: int | None = Field(default=None, ge=0, le=MAX_SEED)
    strategies: frozenset[Strategy] = Field(
        default_factory=lambda: frozenset(Strategy),
        min_length=1,
    )
    fail_fast: bool = False
    invariants: frozenset[Invariant] = Field(
        default_factory=lambda: DEFAULT_INVARIANTS,
        min_length=1,
    )
    workers: int = Field(default=1, ge=1, le=64)
    max_shrink_steps: int = Field(default=DEFAULT_MAX_STEPS, ge=0)
    shrink_timeout_seconds: float | None = Field(default=None, gt=0)
    allow_negative: bool = True
    bounds: GeneratorBounds = Field(default_factory=GeneratorBounds)

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        **overrides: Any,
    ) -> HarnessConfig:
        """Build a config whose defaults come from environment settings."""
        settings = settings or get_settings()
        values: dict[str, Any] = {
            "trials": settings.default_trials,
            "workers": settings.workers,
            "max_shrink_steps": settings.max_shrink_steps,
            "shrink_timeout_seconds": settings.shrink_timeout_seconds,
            "allow_negative": settings.allow_negative,
        }
        values.update(
            {key: value for key, value in overrides.items() if value is not None}
        )
        return cls.model_validate(values)


class FailureRecord(BaseModel):
    """Everything needed to replay and inspect one failing case."""

    seed: int
    strategy: Strategy
    index: int = Field(ge=0)
    kind: OutcomeKind
    violation: str
    original_input: RequestSnapshot
    minimal_input: RequestSnapshot
    shrink_trace: list[RequestSnapshot] = Field(min_length=1)
    transformations: list[str] = Field(default_factory=list)
    shrink_evaluations: int = Field(default=0, ge=0)
    shrink_exhausted: bool = False


class Report(BaseModel):
    """Aggregated result of a property run."""

    seed: int
    trials: int = Field(ge=0)
    strategies: list[Strategy]
    invariants: list[Invariant]
    passed: int = Field(ge=0)
    failed: int = Field(ge=0)
    errored: int = Field(ge=0)
    failures: list[FailureRecord] = Field(default_factory=list)
    allow_negative: bool = True
    bounds: GeneratorBounds = Field(default_factory=GeneratorBounds)

    @property
    def ok(self) -> bool:
        return self.failed == 0
