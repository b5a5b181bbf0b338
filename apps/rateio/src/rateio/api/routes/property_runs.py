"""Property run routes."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from rateio.api.dependencies import get_property_run_service
from rateio.api.schemas.property_runs import (
    CreatePropertyRunRequest,
    PropertyRunListResponse,
    PropertyRunResponse,
)
from rateio.services.property_run_service import PropertyRunService

router = APIRouter(prefix="/property-runs", tags=["Property runs"])

PropertyRunServiceDependency = Annotated[
    PropertyRunService, Depends(get_property_run_service)
]


@router.post(
    "",
    response_model=PropertyRunResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_property_run(
    payload: CreatePropertyRunRequest,
    service: PropertyRunServiceDependency,
) -> PropertyRunResponse:
    """Run the property harness and store its report."""

    property_run = service.create_run(payload)
    return PropertyRunResponse.from_model(property_run)


@router.get("", response_model=PropertyRunListResponse)
def list_property_runs(
    service: PropertyRunServiceDependency,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
) -> PropertyRunListResponse:
    """List the most recent stored property runs."""

    return PropertyRunListResponse.from_models(service.list_runs(limit))


@router.get("/{run_id}", response_model=PropertyRunResponse)
def get_property_run(
    run_id: UUID,
    service: PropertyRunServiceDependency,
) -> PropertyRunResponse:
    """Return one stored property run."""

    return PropertyRunResponse.from_model(service.get_run(run_id))
