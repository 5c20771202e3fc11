"""GitHub activity connector."""

from .client import GitHubClient
from .connector import GitHubConnector
from .context import CONNECTOR_ID, GitHubContextGenerator
from .settings import GitHubEnrichSettings, GitHubFetchSettings
from .transform import transformer

__all__ = [
    "CONNECTOR_ID",
    "GitHubClient",
    "GitHubConnector",
    "GitHubContextGenerator",
    "GitHubEnrichSettings",
    "GitHubFetchSettings",
    "transformer",
]
