"""
Transform Slack search results into Activities.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional
from urllib.parse import parse_qs, urlparse

from ...core.errors import MalformedVendorPayload, MissingOrUnparseableTimestamp
from ...models import Activity
from ...models.slack import SearchMessage
from ..base import EventTransformer
from .context import CONNECTOR_ID, SlackContextGenerator, make_slack_activity_id


transformer = EventTransformer(type_field="type", default_type="message")

contexts = SlackContextGenerator()


def _is_ascii_number(text: str) -> bool:
    return text.isascii() and text.isdecimal()


def parse_slack_ts(ts: Any) -> datetime:
    """
    Convert a Slack timestamp ("<epoch seconds>.<microseconds>") to UTC.

    Raises:
        MissingOrUnparseableTimestamp: If the value is missing or not numeric
    """
    if not isinstance(ts, str) or not ts:
        raise MissingOrUnparseableTimestamp(f"message missing ts field: {ts!r}")

    seconds, _, fraction = ts.partition(".")
    if not _is_ascii_number(seconds) or (fraction and not _is_ascii_number(fraction)):
        raise MissingOrUnparseableTimestamp(f"failed to parse timestamp: {ts!r}")

    microseconds = int(fraction.ljust(6, "0")[:6]) if fraction else 0
    epoch = datetime(1970, 1, 1, tzinfo=timezone.utc)
    try:
        return epoch + timedelta(seconds=int(seconds), microseconds=microseconds)
    except OverflowError as e:
        raise MissingOrUnparseableTimestamp(f"timestamp out of range: {ts!r}") from e


def format_slack_ts(ts: str) -> str:
    """Format a timestamp for a permalink path: "1765611321.248519" -> "1765611321248519"."""
    return ts.replace(".", "")


def thread_ts_from_permalink(permalink: Optional[str]) -> Optional[str]:
    """Return the ``thread_ts`` query parameter of a reply's permalink, if any."""
    if not permalink:
        return None
    values = parse_qs(urlparse(permalink).query).get("thread_ts")
    return values[0] if values else None


@transformer.register("message", SearchMessage)
def transform_message(message: SearchMessage) -> Activity:
    """
    Replies carry their thread root in the permalink; a message without one
    is the root of its own thread.
    """
    timestamp = parse_slack_ts(message.ts)

    channel_id = message.channel.id
    channel_name = message.channel.name
    if not channel_id or not channel_name:
        raise MalformedVendorPayload(f"message {message.ts} channel missing id or name")

    thread_ts = thread_ts_from_permalink(message.permalink) or message.ts

    return Activity(
        id=make_slack_activity_id(message.ts),
        activity_type="message",
        title=f"Message in #{channel_name}",
        description=message.text,
        url=message.permalink,
        timestamp=timestamp,
        source=CONNECTOR_ID,
        metadata={
            "channel_id": channel_id,
            "channel_name": channel_name,
            "user": message.username,
            "thread_ts": thread_ts,
            "team": message.team,
        },
        contexts=[
            contexts.create_source_context(),
            contexts.create_channel_context(channel_id, channel_name),
            contexts.create_thread_context(channel_id, thread_ts),
        ],
    )
