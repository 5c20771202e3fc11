"""
HTTP client for the Slack Web API.

Slack answers most failures with HTTP 200 and ``{"ok": false, "error": ...}``;
both that and a non-2xx status are reported as VendorAPIError.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from ...config import config
from ...core.errors import MalformedVendorPayload, VendorAPIError
from .context import CONNECTOR_ID


logger = logging.getLogger(__name__)

MESSAGES_PER_PAGE = 100


class SlackClient:
    """
    Thin synchronous wrapper around the Slack methods used by the connector.
    """

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None,
                 http_client: Optional[httpx.Client] = None):
        """
        Initialize the client.

        Args:
            base_url: Web API base URL (defaults to config value)
            timeout: Request timeout in seconds (defaults to config value)
            http_client: Pre-built httpx client, e.g. one with a mock transport
        """
        self.base_url = (base_url or config.slack_api_base_url).rstrip("/")
        self.client = http_client or httpx.Client(timeout=timeout or config.http_timeout)
        self.user_agent = f"{config.user_agent_prefix}/{CONNECTOR_ID}"

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self) -> None:
        self.client.close()

    def _call(self, token: str, method: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        Call a Web API method and return its decoded body.

        Raises:
            VendorAPIError: On connection failure, non-2xx status or ``ok: false``
            MalformedVendorPayload: If the body is not a JSON object
        """
        url = f"{self.base_url}/{method}"
        logger.debug(f"GET {url} params={params}")

        try:
            response = self.client.get(url, params=params, headers={
                "Authorization": f"Bearer {token}",
                "User-Agent": self.user_agent,
            })
        except httpx.RequestError as e:
            raise VendorAPIError(f"Failed to connect to Slack: {e}") from e

        if not response.is_success:
            raise VendorAPIError(
                f"Slack API error (status {response.status_code}): {response.text}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise MalformedVendorPayload(f"failed to parse Slack API response: {e}") from e

        if not isinstance(body, dict):
            raise MalformedVendorPayload(f"expected a JSON object from {method}")

        if not body.get("ok", False):
            raise VendorAPIError(f"Slack API error in {method}: {body.get('error', 'unknown error')}",
                                 status_code=response.status_code)

        return body

    def fetch_messages(self, token: str, user_id: str, target_date: str, page: int) -> Dict[str, Any]:
        """
        Search one page of a user's messages posted on a given day.

        Args:
            token: Slack user token
            user_id: Member id used in the ``from:`` modifier
            target_date: Day as YYYY-MM-DD, used in the ``on:`` modifier
            page: 1-based page number

        Returns:
            The ``search.messages`` response body, newest messages first
        """
        return self._call(token, "search.messages", {
            "query": f"from:@{user_id} on:{target_date}",
            "count": MESSAGES_PER_PAGE,
            "page": page,
            "sort": "timestamp",
            "sort_dir": "desc",
        })

    def fetch_channel(self, token: str, channel_id: str) -> Dict[str, Any]:
        """Fetch ``conversations.info`` for a channel."""
        return self._call(token, "conversations.info", {"channel": channel_id})

    def fetch_thread(self, token: str, channel_id: str, thread_ts: str) -> Dict[str, Any]:
        """Fetch the parent message of a thread through ``conversations.replies``."""
        return self._call(token, "conversations.replies", {
            "channel": channel_id,
            "ts": thread_ts,
            "limit": 1,
        })
