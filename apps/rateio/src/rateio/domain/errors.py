"""Domain exceptions used across splitter, adapters, and the report store."""

from __future__ import annotations

from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any


def compose_error_message(*, cause: str, action: str) -> str:
    """Build a user-facing error message with cause and corrective action."""

    return f"Cause: {cause} Action: {action}"


@dataclass(slots=True)
class DomainError(Exception):
    """Base exception for predictable domain failures."""

    code: str
    message: str
    status_code: int
    details: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return self.message


class SplitError(DomainError):
    """Base class for inputs the splitter refuses to split."""


class ZeroRecipientsError(SplitError):
    """Raised when a split is requested for no recipients."""

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code="ZERO_RECIPIENTS",
            message=message
            or compose_error_message(
                cause="A split needs at least one recipient.",
                action="Provide a recipients count of 1 or more.",
            ),
            status_code=HTTPStatus.UNPROCESSABLE_ENTITY,
            details=details or {},
        )


class InvalidScaleError(SplitError):
    """Raised when scale is negative or above the supported precision."""

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code="INVALID_SCALE",
            message=message
            or compose_error_message(
                cause="Scale is outside the supported range.",
                action="Use a scale between 0 and 28 fractional digits.",
            ),
            status_code=HTTPStatus.UNPROCESSABLE_ENTITY,
            details=details or {},
        )


class ScaleOverflowError(SplitError):
    """Raised when the amount does not fit the integer unit range at scale."""

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code="SCALE_OVERFLOW",
            message=message
            or compose_error_message(
                cause="Amount has too many smallest units at this scale.",
                action="Lower the scale or split a smaller amount.",
            ),
            status_code=HTTPStatus.UNPROCESSABLE_ENTITY,
            details=details or {},
        )


class NegativeAmountError(SplitError):
    """Raised when negative amounts are disabled and one is received."""

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code="NEGATIVE_AMOUNT",
            message=message
            or compose_error_message(
                cause="Negative amounts are not accepted by this splitter.",
                action="Send the absolute amount or enable negative amounts.",
            ),
            status_code=HTTPStatus.UNPROCESSABLE_ENTITY,
            details=details or {},
        )


class InvalidAmountError(SplitError):
    """Raised when the amount is NaN or infinite."""

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code="INVALID_AMOUNT",
            message=message
            or compose_error_message(
                cause="Amount is not a finite decimal number.",
                action="Provide a finite decimal amount.",
            ),
            status_code=HTTPStatus.UNPROCESSABLE_ENTITY,
            details=details or {},
        )


class PropertyRunNotFoundError(DomainError):
    """Raised when a stored property run cannot be resolved."""

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code="PROPERTY_RUN_NOT_FOUND",
            message=message
            or compose_error_message(
                cause="No property run is stored under this identifier.",
                action="Check the run identifier returned when the run was created.",
            ),
            status_code=HTTPStatus.NOT_FOUND,
            details=details or {},
        )
