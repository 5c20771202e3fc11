"""Vendor connectors producing normalized activity."""

import logging
from typing import Any, Dict, Optional, Type

from .base import BaseConnector
from .github import GitHubConnector
from .slack import SlackConnector

CONNECTORS: Dict[str, Type[BaseConnector]] = {
    GitHubConnector.connector_id: GitHubConnector,
    SlackConnector.connector_id: SlackConnector,
}


def create_connector(connector_id: str, config: Dict[str, Any],
                     logger: Optional[logging.Logger] = None) -> BaseConnector:
    """
    Build a connector by its id.

    Raises:
        KeyError: If no connector is registered under that id
    """
    return CONNECTORS[connector_id](config, logger=logger)


__all__ = ["BaseConnector", "GitHubConnector", "SlackConnector", "CONNECTORS", "create_connector"]
