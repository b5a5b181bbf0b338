"""API dependency providers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from rateio.db.session import get_db_session
from rateio.repositories.property_run_repository import PropertyRunRepository
from rateio.services.property_run_service import PropertyRunService


def get_property_run_service(
    session: Annotated[Session, Depends(get_db_session)],
) -> PropertyRunService:
    """Build property run service with per-request session."""

    return PropertyRunService(
        property_run_repository=PropertyRunRepository(session),
        session=session,
    )
