from __future__ import annotations

from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from rateio.db.models.property_run import PropertyRun
from rateio.domain.money import to_units
from rateio.domain.value_objects import ShareSet
from rateio.properties.generator import Strategy
from rateio.properties.harness import run
from rateio.properties.schemas import HarnessConfig, Report
from rateio.repositories.property_run_repository import PropertyRunRepository
from rateio.services.property_run_service import PropertyRunService


def remainder_dropping_split(amount: Decimal, recipients: int, scale: int) -> ShareSet:
    base = to_units(amount, scale) // recipients
    return ShareSet.from_units([base] * recipients, scale)


def test_failing_report_round_trips_through_the_store(
    sqlite_session_factory: sessionmaker[Session],
) -> None:
    config = HarnessConfig(
        trials=24, seed=13, strategies=frozenset({Strategy.MONETARY})
    )

    with sqlite_session_factory() as session:
        service = PropertyRunService(
            property_run_repository=PropertyRunRepository(session),
            session=session,
            report_runner=lambda cfg: run(cfg, splitter=remainder_dropping_split),
        )
        created = service.create_run(config)
        created_id = created.id

    with sqlite_session_factory() as session:
        stored = session.scalars(
            select(PropertyRun).where(PropertyRun.id == created_id)
        ).one()
        report = Report.model_validate(stored.report)

    assert stored.failed == report.failed > 0
    assert stored.errored == 0
    minimal = report.failures[0].minimal_input
    assert to_units(minimal.amount, minimal.scale) == 1


def test_list_runs_honours_limit(
    sqlite_session_factory: sessionmaker[Session],
) -> None:
    with sqlite_session_factory() as session:
        service = PropertyRunService(
            property_run_repository=PropertyRunRepository(session),
            session=session,
        )
        for seed in (1, 2, 3):
            service.create_run(HarnessConfig(trials=3, seed=seed))

        runs = service.list_runs(limit=2)
        first = service.get_run(runs[0].id)

    assert len(runs) == 2
    assert all(property_run.passed == 3 for property_run in runs)
    assert first.seed == runs[0].seed
