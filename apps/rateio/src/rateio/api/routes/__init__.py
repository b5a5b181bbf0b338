"""API v1 router registration."""

from fastapi import APIRouter

from rateio.api.routes import property_runs, splits

v1_router = APIRouter(prefix="/v1")
v1_router.include_router(splits.router)
v1_router.include_router(property_runs.router)
