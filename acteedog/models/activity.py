"""
Normalized activity models for Acteedog.

Every connector converts its vendor events into these vendor-neutral
structures: an Activity, plus the chain of Context nodes describing what the
activity is about.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


ENRICHMENT_PARAMS_KEY = "enrichment_params"


class Context(BaseModel):
    """
    A node in the resource-ownership tree (source -> container -> leaf).

    Contexts are rebuilt for every event, so two activities about the same
    repository or channel carry equal, but not identical, Context values.
    Consumers merge trees on ``id``.
    """

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    id: str = Field(
        ...,
        description="Stable identifier derived from connector, resource type and resource keys"
    )

    level: int = Field(
        ...,
        ge=1,
        le=3,
        description="1 for the source, 2 for a container, 3 for a leaf"
    )

    parent_id: str = Field(
        default="",
        alias="parentId",
        description="Id of the level-(n-1) node; empty at the root"
    )

    connector_id: str = Field(..., alias="connectorId")

    resource_type: str = Field(..., alias="resourceType")

    name: str = Field(..., description="Short machine-friendly display name")

    title: Optional[str] = None

    description: Optional[str] = None

    url: Optional[str] = None

    created_at: Optional[datetime] = Field(default=None, alias="createdAt")

    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    metadata: Dict[str, Any] = Field(
        default_factory=dict,
        description="Open key-value map; carries 'enrichment_params' for later enrichment"
    )

    @property
    def enrichment_params(self) -> Optional[Dict[str, Any]]:
        """The enrichment parameters, or None if absent or not a map."""
        params = self.metadata.get(ENRICHMENT_PARAMS_KEY)
        if isinstance(params, dict):
            return params
        return None

    def to_json_dict(self) -> Dict[str, Any]:
        """Serialize with the camelCase wire names and RFC3339 timestamps."""
        return self.model_dump(mode="json", by_alias=True)


class Activity(BaseModel):
    """
    One normalized occurrence of a vendor event.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str = Field(..., description="'<connectorId>:<vendorEventId>'")

    activity_type: str = Field(..., alias="activityType")

    title: str

    description: Optional[str] = None

    url: Optional[str] = None

    timestamp: datetime = Field(..., description="Event time in UTC")

    source: str = Field(..., description="Connector namespace that produced the activity")

    metadata: Dict[str, Any] = Field(default_factory=dict)

    contexts: List[Context] = Field(
        default_factory=list,
        description="Ownership chain, root first"
    )

    def to_json_dict(self) -> Dict[str, Any]:
        """Serialize with the camelCase wire names and RFC3339 timestamps."""
        return self.model_dump(mode="json", by_alias=True)
