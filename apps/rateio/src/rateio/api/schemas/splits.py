"""Pydantic schemas for split endpoints."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from pydantic import BaseModel, Field, field_validator

from rateio.domain.value_objects import ShareSet

MAX_RECIPIENTS = 100_000


class CreateSplitRequest(BaseModel):
    """Amount to divide and how to divide it."""

    amount: str = Field(min_length=1, max_length=80)
    recipients: int = Field(le=MAX_RECIPIENTS)
    scale: int = 2

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, value: str) -> str:
        trimmed = value.strip()
        try:
            amount_decimal = Decimal(trimmed)
        except InvalidOperation as exc:
            raise ValueError("Amount must be a decimal number.") from exc
        if not amount_decimal.is_finite():
            raise ValueError("Amount must be a finite decimal number.")
        return trimmed


class SplitResponse(BaseModel):
    """Shares in recipient order with their exact total."""

    recipients: int = Field(ge=1)
    scale: int = Field(ge=0)
    total: str
    shares: list[str]

    @classmethod
    def from_share_set(cls, share_set: ShareSet) -> SplitResponse:
        return cls(
            recipients=len(share_set),
            scale=share_set.scale,
            total=str(share_set.total()),
            shares=[str(share) for share in share_set],
        )
