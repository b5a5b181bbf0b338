"""Property run persistence operations."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from rateio.db.models.property_run import PropertyRun


class PropertyRunRepository:
    """Repository for stored property run reports."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def add(self, property_run: PropertyRun) -> PropertyRun:
        self._session.add(property_run)
        self._session.flush()
        return property_run

    def get(self, run_id: UUID) -> PropertyRun | None:
        return self._session.get(PropertyRun, run_id)

    def list_recent(self, limit: int = 20) -> list[PropertyRun]:
        statement = (
            select(PropertyRun)
            .order_by(PropertyRun.created_at.desc(), PropertyRun.id.asc())
            .limit(limit)
        )
        return list(self._session.scalars(statement).all())
