"""
Acteedog: activity connectors for code hosting and team chat.

Pulls a user's daily activity from GitHub and Slack and normalizes it into
Activities carrying a chain of hierarchical Contexts.
"""

__version__ = "0.1.0"
__author__ = "Acteedog Project"

# Import main components
from .models import Activity, Context
from .connectors import BaseConnector, GitHubConnector, SlackConnector, create_connector
from .core.errors import ConnectorError

__all__ = [
    "Activity",
    "Context",
    "BaseConnector",
    "GitHubConnector",
    "SlackConnector",
    "create_connector",
    "ConnectorError",
]
