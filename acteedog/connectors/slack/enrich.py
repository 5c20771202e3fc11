"""
Context enrichment for the Slack connector.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ...core.errors import (
    MalformedVendorPayload,
    MissingEnrichmentParams,
    MissingOrUnparseableTimestamp,
    UnsupportedContextType,
)
from ...models import Context
from ...models.slack import ChannelInfo, ConversationsInfoResponse, ConversationsRepliesResponse, ThreadMessage
from .client import SlackClient
from .context import (
    RESOURCE_TYPE_CHANNEL,
    RESOURCE_TYPE_SOURCE,
    RESOURCE_TYPE_THREAD,
    SOURCE_DESCRIPTION,
    SOURCE_TITLE,
)
from .transform import format_slack_ts, parse_slack_ts


EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

ResponseT = TypeVar("ResponseT", bound=BaseModel)


def _require_param(params: Dict[str, Any], key: str) -> str:
    value = params.get(key)
    if not isinstance(value, str) or not value:
        raise MissingEnrichmentParams(f"{key} not found in enrichment_params")
    return value


def _parse_response(model: Type[ResponseT], body: Dict[str, Any]) -> ResponseT:
    try:
        return model.model_validate(body)
    except ValidationError as e:
        raise MalformedVendorPayload(f"invalid {model.__name__}: {e.error_count()} validation error(s)") from e


def apply_channel_enrichment(context: Context, channel: ChannelInfo, workspace_url: str) -> Context:
    # conversations.info reports 'created' in seconds but 'updated' in milliseconds
    try:
        created_at = EPOCH + timedelta(seconds=channel.created)
        updated_at = EPOCH + timedelta(milliseconds=channel.updated)
    except OverflowError as e:
        raise MalformedVendorPayload(f"channel times out of range: {channel.created}, {channel.updated}") from e

    context.title = f"#{channel.name or ''}"
    context.description = channel.topic.value
    context.url = f"https://{workspace_url}/archives/{channel.id or ''}"
    context.created_at = created_at
    context.updated_at = updated_at
    context.metadata.update({
        "name": channel.name,
        "is_private": channel.is_private,
        "is_channel": channel.is_channel,
        "is_group": channel.is_group,
        "is_im": channel.is_im,
        "topic": channel.topic.value,
        "purpose": channel.purpose.value,
        "context_team_id": channel.context_team_id,
    })
    return context


def apply_thread_enrichment(context: Context, parent: ThreadMessage, channel_id: str,
                            workspace_url: str) -> Context:
    if not parent.ts:
        raise MalformedVendorPayload("thread parent message missing ts")

    try:
        started_at = parse_slack_ts(parent.thread_ts)
    except MissingOrUnparseableTimestamp as e:
        raise MalformedVendorPayload(f"failed to parse createdAt for thread: {e}") from e

    context.title = f"Thread: {parent.text or ''}"
    context.description = parent.text
    context.url = f"https://{workspace_url}/archives/{channel_id}/p{format_slack_ts(parent.ts)}"
    # Slack reports no update time for threads
    context.created_at = started_at
    context.updated_at = started_at
    context.metadata.update({
        "parent_user": parent.user,
        "parent_ts": parent.ts,
        "thread_ts": parent.thread_ts,
        "team": parent.team,
        "reply_count": parent.reply_count,
        "reply_users_count": parent.reply_users_count,
    })
    return context


class SlackContextEnricher:
    """Enriches Slack contexts through the Web API."""

    def __init__(self, client: SlackClient, token: str, workspace_url: str,
                 logger: logging.LoggerAdapter):
        self.client = client
        self.token = token
        self.workspace_url = workspace_url
        self.logger = logger

    def enrich(self, context: Context, params: Dict[str, Any]) -> Context:
        """
        Enrich a context according to its resource type.

        Raises:
            UnsupportedContextType: If the resource type is not a Slack one
            MissingEnrichmentParams: If a parameter the resource needs is missing
            VendorAPIError: If the Slack call fails
            MalformedVendorPayload: If the Slack response cannot be used
        """
        resource_type = context.resource_type

        if resource_type == RESOURCE_TYPE_SOURCE:
            context.title = SOURCE_TITLE
            context.description = SOURCE_DESCRIPTION
            context.url = f"https://{self.workspace_url}"
            return context

        if resource_type == RESOURCE_TYPE_CHANNEL:
            channel_id = _require_param(params, "channel_id")
            self.logger.info(f"Enriching channel: {channel_id}")
            body = self.client.fetch_channel(self.token, channel_id)
            response = _parse_response(ConversationsInfoResponse, body)
            return apply_channel_enrichment(context, response.channel, self.workspace_url)

        if resource_type == RESOURCE_TYPE_THREAD:
            channel_id = _require_param(params, "channel_id")
            thread_ts = _require_param(params, "thread_ts")
            self.logger.info(f"Enriching thread: {thread_ts} in channel {channel_id}")
            body = self.client.fetch_thread(self.token, channel_id, thread_ts)
            response = _parse_response(ConversationsRepliesResponse, body)
            return apply_thread_enrichment(context, response.messages[0], channel_id, self.workspace_url)

        raise UnsupportedContextType(f"unsupported context type: {resource_type}")
