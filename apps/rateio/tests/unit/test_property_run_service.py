"""Unit tests for property run service."""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID, uuid4

import pytest

from rateio.db.models.property_run import PropertyRun
from rateio.domain.errors import PropertyRunNotFoundError
from rateio.properties.generator import Strategy
from rateio.properties.invariants import DEFAULT_INVARIANTS
from rateio.properties.schemas import HarnessConfig, Report
from rateio.services.property_run_service import PropertyRunService


class FakeSession:
    def __init__(self) -> None:
        self.committed = False
        self.rolled_back = False

    def commit(self) -> None:
        self.committed = True

    def rollback(self) -> None:
        self.rolled_back = True

    def refresh(self, instance: object) -> None:
        _ = instance


@dataclass
class FakePropertyRunRepository:
    stored: list[PropertyRun] = field(default_factory=list)
    fail_on_add: bool = False

    def add(self, property_run: PropertyRun) -> PropertyRun:
        if self.fail_on_add:
            raise RuntimeError("store offline")
        property_run.id = uuid4()
        self.stored.append(property_run)
        return property_run

    def get(self, run_id: UUID) -> PropertyRun | None:
        return next((run for run in self.stored if run.id == run_id), None)

    def list_recent(self, limit: int = 20) -> list[PropertyRun]:
        return self.stored[:limit]


def _fixed_report(config: HarnessConfig) -> Report:
    return Report(
        seed=config.seed or 0,
        trials=config.trials,
        strategies=list(Strategy),
        invariants=sorted(DEFAULT_INVARIANTS),
        passed=config.trials,
        failed=0,
        errored=0,
    )


def _service(
    repository: FakePropertyRunRepository, session: FakeSession
) -> PropertyRunService:
    return PropertyRunService(
        property_run_repository=repository,
        session=session,
        report_runner=_fixed_report,
    )


def test_create_run_persists_report_and_commits() -> None:
    repository = FakePropertyRunRepository()
    session = FakeSession()

    property_run = _service(repository, session).create_run(
        HarnessConfig(trials=12, seed=4)
    )

    assert session.committed
    assert repository.stored == [property_run]
    assert property_run.seed == 4
    assert property_run.passed == 12
    assert property_run.report["trials"] == 12


def test_create_run_rolls_back_when_store_fails() -> None:
    repository = FakePropertyRunRepository(fail_on_add=True)
    session = FakeSession()

    with pytest.raises(RuntimeError):
        _service(repository, session).create_run(HarnessConfig(trials=1, seed=1))

    assert session.rolled_back
    assert not session.committed


def test_get_run_raises_for_unknown_identifier() -> None:
    service = _service(FakePropertyRunRepository(), FakeSession())

    with pytest.raises(PropertyRunNotFoundError) as exc_info:
        service.get_run(uuid4())

    assert exc_info.value.status_code == 404
