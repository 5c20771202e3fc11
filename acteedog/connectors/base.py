"""
Base connector interface for Acteedog.

This module defines the abstract interface every connector implements, plus
the pieces of the fetch pipeline that do not depend on the vendor: the
paginated fetch loop, the event-type registry and the per-item skip policy.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..core.dates import DateRange, TimestampGetter
from ..core.errors import (
    InvalidConfiguration,
    MalformedVendorPayload,
    MissingEnrichmentParams,
    MissingOrUnparseableTimestamp,
    UnsupportedEventType,
)
from ..models import Activity, Context


SettingsT = TypeVar("SettingsT", bound=BaseModel)

RawEvent = Dict[str, Any]


def load_settings(settings_cls: Type[SettingsT], cfg: Any) -> SettingsT:
    """
    Validate a connector configuration dictionary.

    Args:
        settings_cls: The pydantic settings model to build
        cfg: Raw configuration as supplied by the caller

    Returns:
        The validated settings

    Raises:
        InvalidConfiguration: If the configuration is not a mapping or fails validation
    """
    if not isinstance(cfg, dict):
        raise InvalidConfiguration("invalid configuration format")

    try:
        return settings_cls.model_validate(cfg)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'config'}: {error['msg']}"
            for error in e.errors()
        )
        raise InvalidConfiguration(problems) from e


class ConnectorLogger(logging.LoggerAdapter):
    """Prefixes every message with the connector id, e.g. ``[github] ...``."""

    def process(self, msg, kwargs):
        return f"[{self.extra['connector_id']}] {msg}", kwargs


@dataclass
class Page:
    """One page of raw vendor events."""

    items: List[RawEvent] = field(default_factory=list)
    is_last: bool = False


def fetch_pages(fetch_page: Callable[[int], Page], max_pages: int, date_range: DateRange,
                timestamp_of: TimestampGetter, logger: logging.LoggerAdapter) -> List[RawEvent]:
    """
    Page through a vendor API until the target day has been covered.

    Pages are fetched strictly in order, starting at 1. The loop stops on an
    empty page, when the date filter reports that older events have been
    reached, when the vendor reports the last page, or after ``max_pages``.
    Errors raised by ``fetch_page`` propagate and no partial result is returned.

    Args:
        fetch_page: Fetches one page by its 1-based number
        max_pages: Vendor pagination ceiling
        date_range: The target day
        timestamp_of: Reads a raw event's timestamp
        logger: Connector logger

    Returns:
        Events inside the target day, in fetch order
    """
    kept_events: List[RawEvent] = []

    for page_number in range(1, max_pages + 1):
        page = fetch_page(page_number)

        if not page.items:
            logger.debug(f"No more events found at page {page_number}, stopping pagination")
            break

        kept, should_stop = date_range.filter_page(page.items, timestamp_of)
        kept_events.extend(kept)

        logger.debug(f"Page {page_number}: {len(page.items)} events fetched, {len(kept)} kept")

        if should_stop:
            logger.debug("Reached events outside date range, stopping pagination")
            break

        if page.is_last:
            logger.debug("Reached last page, stopping pagination")
            break

    return kept_events


Handler = Tuple[Type[BaseModel], Callable[[Any], Activity]]


class EventTransformer:
    """
    Registry mapping a vendor event-type tag to its transform function.

    Each transform function receives the event already validated into the
    registered payload model and returns one Activity.
    """

    def __init__(self, type_field: str = "type", default_type: Optional[str] = None):
        """
        Initialize an empty registry.

        Args:
            type_field: Key of the raw event that holds the type tag
            default_type: Tag assumed when the raw event has none
        """
        self.type_field = type_field
        self.default_type = default_type
        self._handlers: Dict[str, Handler] = {}

    def register(self, event_type: str, model: Type[BaseModel]):
        """Decorator registering a transform function for an event type."""
        def decorator(func):
            self._handlers[event_type] = (model, func)
            return func
        return decorator

    def list_event_types(self) -> List[str]:
        return list(self._handlers.keys())

    def transform(self, raw_event: RawEvent) -> Activity:
        """
        Transform one raw vendor event into an Activity.

        Raises:
            UnsupportedEventType: If no transformer is registered for the tag
            MalformedVendorPayload: If the event does not fit its payload model
            MissingOrUnparseableTimestamp: If the event has no usable timestamp
        """
        event_type = raw_event.get(self.type_field, self.default_type)
        handler = self._handlers.get(event_type) if isinstance(event_type, str) else None
        if handler is None:
            raise UnsupportedEventType(f"unsupported event type: {event_type}")

        model, func = handler
        try:
            event = model.model_validate(raw_event)
        except ValidationError as e:
            raise MalformedVendorPayload(
                f"invalid {event_type}: {e.error_count()} validation error(s)"
            ) from e

        return func(event)


def transform_events(events: Iterable[RawEvent], transformer: EventTransformer,
                     logger: logging.LoggerAdapter) -> List[Activity]:
    """
    Transform raw events, dropping (and logging) the ones that cannot be used.

    Returns:
        The activities, in the order of the input events
    """
    activities = []
    for raw_event in events:
        try:
            activities.append(transformer.transform(raw_event))
        except UnsupportedEventType as e:
            logger.debug(f"Skipping event: {e}")
        except (MalformedVendorPayload, MissingOrUnparseableTimestamp) as e:
            logger.warning(f"Skipping event: {e}")
    return activities


class BaseConnector(ABC):
    """
    Abstract base class for all connectors.

    Each connector pulls activity from one vendor and converts it into the
    vendor-neutral Activity / Context model. Subclasses set ``connector_id``
    and implement fetching and per-resource enrichment.
    """

    connector_id: str = ""

    def __init__(self, config: Dict[str, Any], logger: Optional[logging.Logger] = None):
        """
        Initialize the connector.

        Args:
            config: Connector configuration (credentials, filters, display params)
            logger: Logger to report through; defaults to this module's logger
        """
        self.config = config
        self.logger = ConnectorLogger(logger or logging.getLogger(__name__),
                                      {"connector_id": self.connector_id})

    @abstractmethod
    def fetch_activities(self, target_date: str) -> List[Activity]:
        """
        Fetch all activities of the configured account on the target day.

        Args:
            target_date: RFC3339 timestamp or YYYY-MM-DD

        Returns:
            List of Activity objects, newest first as delivered by the vendor
        """
        pass

    @abstractmethod
    def _enrich(self, context: Context, params: Dict[str, Any]) -> Context:
        """
        Re-fetch the resource behind a context and overwrite its display fields.

        Args:
            context: The context to enrich, modified in place
            params: The context's enrichment_params

        Returns:
            The enriched context
        """
        pass

    def enrich_context(self, context: Context) -> Context:
        """
        Enrich a single context.

        A context without enrichment_params is returned unmodified, since not
        every context needs enrichment. Vendor failures propagate.

        Args:
            context: The context to enrich

        Returns:
            The enriched (or untouched) context
        """
        self.logger.info(f"Enriching context {context.id}")

        try:
            params = self._enrichment_params(context)
        except MissingEnrichmentParams as e:
            self.logger.warning(f"No enrichment params for context {context.id}, skipping: {e}")
            return context

        return self._enrich(context, params)

    def _enrichment_params(self, context: Context) -> Dict[str, Any]:
        if "enrichment_params" not in context.metadata:
            raise MissingEnrichmentParams("enrichment_params not found")
        params = context.enrichment_params
        if params is None:
            raise MissingEnrichmentParams("enrichment_params is not a map")
        return params
