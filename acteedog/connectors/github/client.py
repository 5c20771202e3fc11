"""
HTTP client for the GitHub REST API.

One method per resource kind the connector reads. Non-2xx answers become
VendorAPIError and undecodable bodies become MalformedVendorPayload; nothing
is retried.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from ...config import config
from ...core.errors import MalformedVendorPayload, VendorAPIError
from .context import CONNECTOR_ID


logger = logging.getLogger(__name__)

EVENTS_PER_PAGE = 100


class GitHubClient:
    """
    Thin synchronous wrapper around the GitHub endpoints used by the connector.
    """

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None,
                 http_client: Optional[httpx.Client] = None):
        """
        Initialize the client.

        Args:
            base_url: API base URL (defaults to config value)
            timeout: Request timeout in seconds (defaults to config value)
            http_client: Pre-built httpx client, e.g. one with a mock transport
        """
        self.base_url = (base_url or config.github_api_base_url).rstrip("/")
        self.client = http_client or httpx.Client(timeout=timeout or config.http_timeout)
        self.user_agent = f"{config.user_agent_prefix}/{CONNECTOR_ID}"

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()

    def close(self) -> None:
        self.client.close()

    def _headers(self, token: str) -> Dict[str, str]:
        return {
            "Authorization": f"token {token}",
            "Accept": "application/vnd.github+json",
            "User-Agent": self.user_agent,
        }

    def _get(self, token: str, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        GET a path under the API base URL and decode the JSON body.

        Raises:
            VendorAPIError: On connection failure or a non-2xx status
            MalformedVendorPayload: If the body is not valid JSON
        """
        url = f"{self.base_url}{path}"
        logger.debug(f"GET {url} params={params}")

        try:
            response = self.client.get(url, params=params, headers=self._headers(token))
        except httpx.RequestError as e:
            raise VendorAPIError(f"Failed to connect to GitHub: {e}") from e

        if not response.is_success:
            raise VendorAPIError(
                f"GitHub API error (status {response.status_code}): {response.text}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise MalformedVendorPayload(f"failed to parse GitHub API response: {e}") from e

    def _get_object(self, token: str, path: str) -> Dict[str, Any]:
        body = self._get(token, path)
        if not isinstance(body, dict):
            raise MalformedVendorPayload(f"expected a JSON object from {path}")
        return body

    def fetch_events(self, token: str, username: str, page: int) -> List[Dict[str, Any]]:
        """
        Fetch one page of a user's public and private events, newest first.

        Args:
            token: Personal access token
            username: GitHub login whose events are listed
            page: 1-based page number

        Returns:
            The raw events of the page
        """
        body = self._get(token, f"/users/{username}/events",
                         params={"per_page": EVENTS_PER_PAGE, "page": page})
        if not isinstance(body, list) or not all(isinstance(event, dict) for event in body):
            raise MalformedVendorPayload("failed to parse events: expected a JSON array of objects")
        return body

    def fetch_repository(self, token: str, repo: str) -> Dict[str, Any]:
        """Fetch ``/repos/{repo}``."""
        return self._get_object(token, f"/repos/{repo}")

    def fetch_pull_request(self, token: str, repo: str, number: str) -> Dict[str, Any]:
        """Fetch ``/repos/{repo}/pulls/{number}``."""
        return self._get_object(token, f"/repos/{repo}/pulls/{number}")

    def fetch_issue(self, token: str, repo: str, number: str) -> Dict[str, Any]:
        """Fetch ``/repos/{repo}/issues/{number}``."""
        return self._get_object(token, f"/repos/{repo}/issues/{number}")
