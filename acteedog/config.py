"""
Configuration management for Acteedog.

This module handles loading and accessing configuration values from config.yaml.
It provides a centralized way to manage HTTP settings, vendor API endpoints,
logging and per-connector credentials without changing code.
"""

import yaml
from pathlib import Path
from typing import Any, Dict, Optional
import logging


class ConfigManager:
    """
    Manages configuration loading and access for Acteedog.
    """

    def __init__(self, config_path: str = "config.yaml"):
        """
        Initialize the configuration manager.

        Args:
            config_path: Path to the configuration file
        """
        self.config_path = Path(config_path)
        self._config: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from YAML file, falling back to defaults."""
        if not self.config_path.exists():
            logging.info(f"Configuration file not found: {self.config_path}, using defaults")
            self._config = self._get_default_config()
            return

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logging.error(f"Failed to load configuration: {e}")
            self._config = self._get_default_config()
            return

        self._config = self._merge(self._get_default_config(), loaded)
        logging.info(f"Configuration loaded from {self.config_path}")

    def _merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively overlay file values on top of the defaults."""
        merged = dict(base)
        for key, value in override.items():
            if isinstance(value, dict) and isinstance(merged.get(key), dict):
                merged[key] = self._merge(merged[key], value)
            else:
                merged[key] = value
        return merged

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration values as fallback."""
        return {
            "http": {
                "timeout": 30.0,
                "user_agent_prefix": "acteedog"
            },
            "github": {
                "api_base_url": "https://api.github.com"
            },
            "slack": {
                "api_base_url": "https://slack.com/api"
            },
            "connectors": {
                "github": {},
                "slack": {}
            },
            "logging": {
                "level": "INFO",
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            },
            "paths": {
                "log_file": "acteedog.log"
            }
        }

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.

        Args:
            key_path: Dot-separated path to the configuration value (e.g., "http.timeout")
            default: Default value if key is not found

        Returns:
            The configuration value

        Examples:
            config.get("http.timeout")  # Returns 30.0
            config.get("github.api_base_url")  # Returns "https://api.github.com"
        """
        keys = key_path.split('.')
        value = self._config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def get_section(self, section: str) -> Dict[str, Any]:
        """
        Get an entire configuration section.

        Args:
            section: Name of the configuration section

        Returns:
            Dictionary containing the section configuration
        """
        return self._config.get(section, {})

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()

    # Convenience properties for commonly used values

    @property
    def http_timeout(self) -> float:
        """Get the HTTP request timeout in seconds."""
        return float(self.get("http.timeout", 30.0))

    @property
    def user_agent_prefix(self) -> str:
        """Get the User-Agent prefix sent to vendor APIs."""
        return self.get("http.user_agent_prefix", "acteedog")

    @property
    def github_api_base_url(self) -> str:
        """Get the GitHub REST API base URL."""
        return self.get("github.api_base_url", "https://api.github.com")

    @property
    def slack_api_base_url(self) -> str:
        """Get the Slack Web API base URL."""
        return self.get("slack.api_base_url", "https://slack.com/api")

    @property
    def log_filename(self) -> str:
        """Get log file name."""
        return self.get("paths.log_file", "acteedog.log")

    def get_connector_config(self, connector_id: str) -> Optional[Dict[str, Any]]:
        """
        Get the credentials and options of a connector.

        Args:
            connector_id: Connector namespace ("github" or "slack")

        Returns:
            The connector's configuration dictionary or None if not configured
        """
        connector_config = self.get(f"connectors.{connector_id}")
        if not connector_config:
            return None
        return dict(connector_config)


# Global configuration instance
config = ConfigManager()


def get_config() -> ConfigManager:
    """
    Get the global configuration instance.

    Returns:
        The global ConfigManager instance
    """
    return config
