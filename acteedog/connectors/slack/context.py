"""
Context generation for the Slack connector.

Slack messages hang off source (slack) -> channel -> thread. A standalone
message is its own thread root.
"""

from ...core.ids import make_activity_id, make_id
from ...models import Context, ENRICHMENT_PARAMS_KEY


CONNECTOR_ID = "slack"
SLACK_WEB_URL = "https://slack.com"

RESOURCE_TYPE_SOURCE = "source"
RESOURCE_TYPE_CHANNEL = "channel"
RESOURCE_TYPE_THREAD = "thread"

SOURCE_TITLE = "Slack"
SOURCE_DESCRIPTION = "Activity source from Slack"


def make_slack_activity_id(message_ts: str) -> str:
    return make_activity_id(CONNECTOR_ID, message_ts)


def make_source_context_id() -> str:
    return make_id(CONNECTOR_ID, RESOURCE_TYPE_SOURCE)


def make_channel_context_id(channel_id: str) -> str:
    return make_id(CONNECTOR_ID, RESOURCE_TYPE_CHANNEL, channel_id)


def make_thread_context_id(channel_id: str, thread_ts: str) -> str:
    return make_id(CONNECTOR_ID, RESOURCE_TYPE_THREAD, channel_id, thread_ts)


class SlackContextGenerator:
    """Factory for the standardized Slack Context objects."""

    connector_id = CONNECTOR_ID

    def create_source_context(self) -> Context:
        context_id = make_source_context_id()
        return Context(
            id=context_id,
            name=context_id,
            level=1,
            parent_id="",
            connector_id=self.connector_id,
            resource_type=RESOURCE_TYPE_SOURCE,
            title=SOURCE_TITLE,
            description=SOURCE_DESCRIPTION,
            url=SLACK_WEB_URL,
            metadata={ENRICHMENT_PARAMS_KEY: {}},
        )

    def create_channel_context(self, channel_id: str, channel_name: str) -> Context:
        """Create a level 2 channel context; the name is display-only."""
        return Context(
            id=make_channel_context_id(channel_id),
            name=f"channel #{channel_name}",
            level=2,
            parent_id=make_source_context_id(),
            connector_id=self.connector_id,
            resource_type=RESOURCE_TYPE_CHANNEL,
            title=f"#{channel_name}",
            metadata={ENRICHMENT_PARAMS_KEY: {"channel_id": channel_id}},
        )

    def create_thread_context(self, channel_id: str, thread_ts: str) -> Context:
        """Create a level 3 thread context keyed by the thread root's timestamp."""
        return Context(
            id=make_thread_context_id(channel_id, thread_ts),
            name=f"Thread {thread_ts}",
            level=3,
            parent_id=make_channel_context_id(channel_id),
            connector_id=self.connector_id,
            resource_type=RESOURCE_TYPE_THREAD,
            title=f"Thread {thread_ts}",
            metadata={ENRICHMENT_PARAMS_KEY: {"channel_id": channel_id, "thread_ts": thread_ts}},
        )
