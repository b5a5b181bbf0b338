"""Split routes."""

from __future__ import annotations

from decimal import Decimal

from fastapi import APIRouter

from rateio.api.schemas.splits import CreateSplitRequest, SplitResponse
from rateio.core.settings import get_settings
from rateio.services.splitter import split

router = APIRouter(prefix="/splits", tags=["Splits"])


@router.post("", response_model=SplitResponse)
def create_split(payload: CreateSplitRequest) -> SplitResponse:
    """Split an amount among recipients at the requested scale."""

    share_set = split(
        Decimal(payload.amount),
        payload.recipients,
        payload.scale,
        allow_negative=get_settings().allow_negative,
    )
    return SplitResponse.from_share_set(share_set)
