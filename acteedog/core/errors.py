"""
Error taxonomy for Acteedog connectors.

Pipeline-level errors (configuration, date, vendor failures) abort a fetch or
enrich call. Item-level errors (unsupported event, missing timestamp) are
raised by the transformers and dropped by the orchestrating fetcher.
"""

from typing import Optional


class ConnectorError(Exception):
    """Base class for every error raised by a connector."""


class InvalidConfiguration(ConnectorError):
    """A required configuration field is missing or malformed."""


class InvalidDateFormat(ConnectorError):
    """The target date is neither RFC3339 nor YYYY-MM-DD."""


class VendorAPIError(ConnectorError):
    """The vendor answered with a non-2xx status or reported a failure."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedVendorPayload(ConnectorError):
    """A vendor response could not be decoded or lacks a required field."""


class UnsupportedEventType(ConnectorError):
    """The vendor event type has no registered transformer."""


class MissingOrUnparseableTimestamp(ConnectorError):
    """A vendor event carries no usable timestamp."""


class MissingEnrichmentParams(ConnectorError):
    """A context does not carry the enrichment_params needed to re-fetch it."""


class UnsupportedContextType(ConnectorError):
    """No enrichment exists for the context's resource type."""
