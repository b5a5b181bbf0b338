"""Property run ORM model."""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import JSON, BigInteger, CheckConstraint, DateTime, Integer, func
from sqlalchemy.orm import Mapped, mapped_column

from rateio.db.base import Base


class PropertyRun(Base):
    """Persisted report of one property campaign against the splitter."""

    __tablename__ = "property_runs"
    __table_args__ = (
        CheckConstraint("passed >= 0", name="ck_property_runs_passed_non_negative"),
        CheckConstraint("failed >= 0", name="ck_property_runs_failed_non_negative"),
        CheckConstraint("errored <= failed", name="ck_property_runs_errored_subset"),
    )

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    seed: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    trials: Mapped[int] = mapped_column(Integer, nullable=False)
    passed: Mapped[int] = mapped_column(Integer, nullable=False)
    failed: Mapped[int] = mapped_column(Integer, nullable=False)
    errored: Mapped[int] = mapped_column(Integer, nullable=False)
    report: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
