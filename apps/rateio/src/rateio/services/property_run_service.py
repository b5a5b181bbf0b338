"""Business service running property campaigns and storing their reports."""

from __future__ import annotations

import logging
from collections.abc import Callable
from uuid import UUID

from sqlalchemy.orm import Session

from rateio.db.models.property_run import PropertyRun
from rateio.domain.errors import PropertyRunNotFoundError
from rateio.properties.harness import run_properties
from rateio.properties.schemas import HarnessConfig, Report
from rateio.repositories.property_run_repository import PropertyRunRepository

logger = logging.getLogger(__name__)

ReportRunner = Callable[[HarnessConfig], Report]


class PropertyRunService:
    """Runs the harness and hands its report to the report store."""

    def __init__(
        self,
        *,
        property_run_repository: PropertyRunRepository,
        session: Session,
        report_runner: ReportRunner | None = None,
    ) -> None:
        self._property_run_repository = property_run_repository
        self._session = session
        self._report_runner = report_runner or run_properties

    def create_run(self, config: HarnessConfig) -> PropertyRun:
        """Execute a property run and persist its report."""
        report = self._report_runner(config)
        try:
            property_run = self._property_run_repository.add(
                PropertyRun(
                    seed=report.seed,
                    trials=report.trials,
                    passed=report.passed,
                    failed=report.failed,
                    errored=report.errored,
                    report=report.model_dump(mode="json"),
                )
            )
            self._session.commit()
            self._session.refresh(property_run)
        except Exception:
            self._session.rollback()
            raise

        logger.info(
            "property_run_stored",
            extra={
                "property_run_id": str(property_run.id),
                "seed": report.seed,
                "failed": report.failed,
            },
        )
        return property_run

    def get_run(self, run_id: UUID) -> PropertyRun:
        """Return a stored run or raise when it does not exist."""
        property_run = self._property_run_repository.get(run_id)
        if property_run is None:
            raise PropertyRunNotFoundError(details={"run_id": str(run_id)})
        return property_run

    def list_runs(self, limit: int = 20) -> list[PropertyRun]:
        """Return the most recent stored runs."""
        return self._property_run_repository.list_recent(limit)
