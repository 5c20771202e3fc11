"""Connector-independent building blocks: ids, patterns, dates and errors."""

from .dates import DateRange, parse_rfc3339, parse_target_date
from .errors import (
    ConnectorError,
    InvalidConfiguration,
    InvalidDateFormat,
    MalformedVendorPayload,
    MissingEnrichmentParams,
    MissingOrUnparseableTimestamp,
    UnsupportedContextType,
    UnsupportedEventType,
    VendorAPIError,
)
from .ids import make_activity_id, make_id
from .patterns import matches_any_pattern, validate_pattern

__all__ = [
    "DateRange",
    "parse_rfc3339",
    "parse_target_date",
    "ConnectorError",
    "InvalidConfiguration",
    "InvalidDateFormat",
    "MalformedVendorPayload",
    "MissingEnrichmentParams",
    "MissingOrUnparseableTimestamp",
    "UnsupportedContextType",
    "UnsupportedEventType",
    "VendorAPIError",
    "make_activity_id",
    "make_id",
    "matches_any_pattern",
    "validate_pattern",
]
