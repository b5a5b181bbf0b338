"""Pydantic schemas for property run endpoints."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from rateio.db.models.property_run import PropertyRun
from rateio.properties.schemas import HarnessConfig, Report
from rateio.properties.shrinker import DEFAULT_MAX_STEPS

MAX_API_TRIALS = 100_000
MAX_API_SHRINK_STEPS = 100_000


class CreatePropertyRunRequest(HarnessConfig):
    """Harness options accepted over HTTP, with request-sized limits."""

    trials: int = Field(default=1000, ge=0, le=MAX_API_TRIALS)
    max_shrink_steps: int = Field(
        default=DEFAULT_MAX_STEPS, ge=0, le=MAX_API_SHRINK_STEPS
    )


class PropertyRunResponse(BaseModel):
    """Stored property run with its full report."""

    id: UUID
    created_at: datetime
    report: Report

    @classmethod
    def from_model(cls, property_run: PropertyRun) -> PropertyRunResponse:
        return cls(
            id=property_run.id,
            created_at=property_run.created_at,
            report=Report.model_validate(property_run.report),
        )


class PropertyRunSummary(BaseModel):
    """Compact listing entry for a stored run."""

    id: UUID
    created_at: datetime
    seed: int
    trials: int
    passed: int
    failed: int
    errored: int

    @classmethod
    def from_model(cls, property_run: PropertyRun) -> PropertyRunSummary:
        return cls(
            id=property_run.id,
            created_at=property_run.created_at,
            seed=property_run.seed,
            trials=property_run.trials,
            passed=property_run.passed,
            failed=property_run.failed,
            errored=property_run.errored,
        )


class PropertyRunListResponse(BaseModel):
    """Most recent stored runs."""

    property_runs: list[PropertyRunSummary]

    @classmethod
    def from_models(cls, property_runs: list[PropertyRun]) -> PropertyRunListResponse:
        return cls(
            property_runs=[
                PropertyRunSummary.from_model(item) for item in property_runs
            ]
        )
