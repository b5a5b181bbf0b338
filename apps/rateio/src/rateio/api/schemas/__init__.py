"""API request and response schemas."""

from rateio.api.schemas.property_runs import (
    CreatePropertyRunRequest,
    PropertyRunListResponse,
    PropertyRunResponse,
    PropertyRunSummary,
)
from rateio.api.schemas.splits import CreateSplitRequest, SplitResponse

__all__ = [
    "CreatePropertyRunRequest",
    "CreateSplitRequest",
    "PropertyRunListResponse",
    "PropertyRunResponse",
    "PropertyRunSummary",
    "SplitResponse",
]
