"""
GitHub connector.

Fetches a user's events for one day from the GitHub events API and turns
them into Activities, and enriches GitHub contexts on demand.
"""

import logging
from contextlib import nullcontext
from datetime import datetime
from typing import Any, Dict, List, Optional

from ...core.dates import DateRange, parse_rfc3339
from ...core.errors import MissingOrUnparseableTimestamp
from ...core.patterns import matches_any_pattern
from ...models import Activity, Context
from ..base import BaseConnector, Page, fetch_pages, load_settings, transform_events
from .client import GitHubClient
from .context import CONNECTOR_ID
from .enrich import GitHubContextEnricher
from .settings import GitHubEnrichSettings, GitHubFetchSettings
from .transform import transformer


# The events API serves at most 300 events: 3 pages of 100
MAX_PAGES = 3


def repository_of(event: Dict[str, Any]) -> str:
    repo = event.get("repo")
    if isinstance(repo, dict) and isinstance(repo.get("name"), str):
        return repo["name"]
    return ""


class GitHubConnector(BaseConnector):
    """Connector for GitHub user activity."""

    connector_id = CONNECTOR_ID

    def __init__(self, config: Dict[str, Any], client: Optional[GitHubClient] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the connector.

        Args:
            config: Connector configuration dictionary
            client: GitHub client to use; a fresh one is opened per call if omitted
            logger: Logger to report through
        """
        super().__init__(config, logger)
        self.client = client

    def _open_client(self):
        if self.client is not None:
            return nullcontext(self.client)
        return GitHubClient()

    def _event_timestamp(self, event: Dict[str, Any]) -> Optional[datetime]:
        try:
            return parse_rfc3339(event.get("created_at"))
        except MissingOrUnparseableTimestamp as e:
            self.logger.warning(f"Skipping event {event.get('id')}: {e}")
            return None

    def fetch_activities(self, target_date: str) -> List[Activity]:
        settings = load_settings(GitHubFetchSettings, self.config)
        date_range = DateRange.from_target_date(target_date)

        self.logger.info(f"Fetching activities for {settings.username} on {date_range.day}")

        with self._open_client() as client:
            def fetch_page(page: int) -> Page:
                self.logger.debug(f"Fetching events page {page}")
                return Page(items=client.fetch_events(settings.token, settings.username, page))

            events = fetch_pages(fetch_page, MAX_PAGES, date_range, self._event_timestamp, self.logger)

        matching = []
        for event in events:
            repo_name = repository_of(event)
            if matches_any_pattern(repo_name, settings.repository_patterns):
                matching.append(event)
            else:
                self.logger.debug(f"Skipping event {event.get('id')}: repository {repo_name} not matched")

        activities = transform_events(matching, transformer, self.logger)
        self.logger.info(f"Fetched {len(activities)} activities from {len(events)} events")
        return activities

    def _enrich(self, context: Context, params: Dict[str, Any]) -> Context:
        settings = load_settings(GitHubEnrichSettings, self.config)
        with self._open_client() as client:
            enricher = GitHubContextEnricher(client, settings.token, self.logger)
            return enricher.enrich(context, params)
