"""Slack activity connector."""

from .client import SlackClient
from .connector import SlackConnector
from .context import CONNECTOR_ID, SlackContextGenerator
from .settings import SlackEnrichSettings, SlackFetchSettings
from .transform import transformer

__all__ = [
    "CONNECTOR_ID",
    "SlackClient",
    "SlackConnector",
    "SlackContextGenerator",
    "SlackEnrichSettings",
    "SlackFetchSettings",
    "transformer",
]
