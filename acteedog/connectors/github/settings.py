"""Configuration models for the GitHub connector."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ...core.errors import InvalidConfiguration
from ...core.patterns import validate_pattern


class GitHubEnrichSettings(BaseModel):
    """Settings needed to enrich GitHub contexts."""

    model_config = ConfigDict(populate_by_name=True)

    token: str = Field(
        ...,
        alias="credential_personal_access_token",
        min_length=1,
        description="GitHub Personal Access Token for authentication"
    )


class GitHubFetchSettings(GitHubEnrichSettings):
    """Settings needed to fetch GitHub activity."""

    username: str = Field(
        ...,
        min_length=1,
        description="GitHub username to fetch activities for"
    )

    repository_patterns: List[str] = Field(
        default_factory=list,
        description="Repository patterns to include (e.g. 'myorg/*', 'user/repo'); empty means all"
    )

    @field_validator("repository_patterns", mode="before")
    @classmethod
    def _default_patterns(cls, value: Optional[List[str]]) -> List[str]:
        if value is None:
            return []
        if not isinstance(value, list):
            raise ValueError("repository_patterns must be an array")
        return value

    @field_validator("repository_patterns")
    @classmethod
    def _check_patterns(cls, patterns: List[str]) -> List[str]:
        checked = []
        for index, pattern in enumerate(patterns):
            if not pattern:
                continue
            try:
                validate_pattern(pattern, segments=2)
            except InvalidConfiguration as e:
                raise ValueError(f"repository pattern at line {index + 1}: {e}") from e
            checked.append(pattern)
        return checked
