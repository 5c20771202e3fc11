"""Configuration models for the Slack connector."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ...core.errors import InvalidConfiguration
from ...core.patterns import validate_pattern


class SlackEnrichSettings(BaseModel):
    """Settings needed to enrich Slack contexts."""

    model_config = ConfigDict(populate_by_name=True)

    token: str = Field(
        ...,
        alias="bot_token",
        min_length=1,
        description="Slack user token with search:read and channels:read scopes"
    )

    workspace_url: str = Field(
        ...,
        min_length=1,
        description="Workspace host, e.g. 'example.slack.com'"
    )


class SlackFetchSettings(SlackEnrichSettings):
    """Settings needed to fetch Slack messages."""

    user_id: str = Field(
        ...,
        min_length=1,
        description="Slack member id whose messages are fetched"
    )

    channel_patterns: List[str] = Field(
        default_factory=list,
        description="Channel name patterns to include (e.g. 'dev-*'); empty means all"
    )

    @field_validator("channel_patterns", mode="before")
    @classmethod
    def _default_patterns(cls, value: Optional[List[str]]) -> List[str]:
        if value is None:
            return []
        if not isinstance(value, list):
            raise ValueError("channel_patterns must be an array")
        return value

    @field_validator("channel_patterns")
    @classmethod
    def _check_patterns(cls, patterns: List[str]) -> List[str]:
        checked = []
        for index, pattern in enumerate(patterns):
            if not pattern:
                continue
            try:
                validate_pattern(pattern, segments=1)
            except InvalidConfiguration as e:
                raise ValueError(f"channel pattern at line {index + 1}: {e}") from e
            checked.append(pattern)
        return checked
