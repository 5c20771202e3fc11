"""
Slack connector.

Searches a member's messages for one day and turns them into Activities,
and enriches Slack contexts on demand.
"""

import logging
from contextlib import nullcontext
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from ...core.dates import DateRange
from ...core.errors import MalformedVendorPayload, MissingOrUnparseableTimestamp
from ...core.patterns import matches_any_pattern
from ...models import Activity, Context
from ...models.slack import SearchResponse
from ..base import BaseConnector, Page, fetch_pages, load_settings, transform_events
from .client import SlackClient
from .context import CONNECTOR_ID
from .enrich import SlackContextEnricher
from .settings import SlackEnrichSettings, SlackFetchSettings
from .transform import parse_slack_ts, transformer


MAX_PAGES = 100


def channel_name_of(message: Dict[str, Any]) -> str:
    channel = message.get("channel")
    if isinstance(channel, dict) and isinstance(channel.get("name"), str):
        return channel["name"]
    return ""


def search_page(body: Dict[str, Any], logger: Optional[logging.LoggerAdapter] = None) -> Page:
    """
    Turn a ``search.messages`` response into a Page.

    A response without matches is an empty page. Matches that are not
    objects are dropped. The page is the last one when Slack's paging says
    so, or when no paging is reported at all.
    """
    try:
        response = SearchResponse.model_validate(body)
    except ValidationError as e:
        raise MalformedVendorPayload(f"invalid search.messages response: {e.error_count()} validation error(s)") from e

    messages = response.messages
    if messages is None or not messages.matches:
        return Page()

    items = []
    for match in messages.matches:
        if isinstance(match, dict):
            items.append(match)
        elif logger is not None:
            logger.debug(f"Dropping search match that is not an object: {match!r}")
    paging = messages.paging
    is_last = paging is None or paging.page >= paging.pages
    return Page(items=items, is_last=is_last)


class SlackConnector(BaseConnector):
    """Connector for Slack messages."""

    connector_id = CONNECTOR_ID

    def __init__(self, config: Dict[str, Any], client: Optional[SlackClient] = None,
                 logger: Optional[logging.Logger] = None):
        super().__init__(config, logger)
        self.client = client

    def _open_client(self):
        if self.client is not None:
            return nullcontext(self.client)
        return SlackClient()

    def _message_timestamp(self, message: Dict[str, Any]) -> Optional[datetime]:
        try:
            return parse_slack_ts(message.get("ts"))
        except MissingOrUnparseableTimestamp as e:
            self.logger.warning(f"Skipping message: {e}")
            return None

    def fetch_activities(self, target_date: str) -> List[Activity]:
        settings = load_settings(SlackFetchSettings, self.config)
        date_range = DateRange.from_target_date(target_date)

        self.logger.info(f"Fetching messages for {settings.user_id} on {date_range.day}")

        with self._open_client() as client:
            def fetch_page(page: int) -> Page:
                self.logger.debug(f"Fetching page {page}")
                body = client.fetch_messages(settings.token, settings.user_id, date_range.day, page)
                return search_page(body, self.logger)

            messages = fetch_pages(fetch_page, MAX_PAGES, date_range, self._message_timestamp, self.logger)

        matching = []
        for message in messages:
            channel_name = channel_name_of(message)
            if matches_any_pattern(channel_name, settings.channel_patterns):
                matching.append(message)
            else:
                self.logger.debug(f"Skipping message {message.get('ts')}: channel #{channel_name} not matched")

        activities = transform_events(matching, transformer, self.logger)
        self.logger.info(f"Transformed {len(activities)} activities from {len(messages)} messages")
        return activities

    def _enrich(self, context: Context, params: Dict[str, Any]) -> Context:
        settings = load_settings(SlackEnrichSettings, self.config)
        with self._open_client() as client:
            enricher = SlackContextEnricher(client, settings.token, settings.workspace_url, self.logger)
            return enricher.enrich(context, params)
