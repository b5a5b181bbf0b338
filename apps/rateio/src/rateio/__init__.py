"""Exact splitting of decimal amounts and property checks for the splitter."""

from rateio.domain.errors import (
    InvalidAmountError,
    InvalidScaleError,
    NegativeAmountError,
    ScaleOverflowError,
    SplitError,
    ZeroRecipientsError,
)
from rateio.domain.value_objects import ShareSet, SplitRequest
from rateio.properties.harness import run_properties
from rateio.properties.schemas import HarnessConfig, Report
from rateio.services.splitter import split, split_request

__all__ = [
    "HarnessConfig",
    "InvalidAmountError",
    "InvalidScaleError",
    "NegativeAmountError",
    "Report",
    "ScaleOverflowError",
    "ShareSet",
    "SplitError",
    "SplitRequest",
    "ZeroRecipientsError",
    "run_properties",
    "split",
    "split_request",
]
