"""ORM models for stored property runs."""

from rateio.db.models.property_run import PropertyRun

__all__ = ["PropertyRun"]
