"""
Slack payload models.

Covers ``search.messages`` results used for fetching and the
``conversations.info`` / ``conversations.replies`` responses used for
enrichment.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, Field


class ChannelRef(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None


class SearchMessage(BaseModel):
    """One entry of ``messages.matches`` in a search response."""

    type: str = "message"
    ts: Optional[str] = None
    text: Optional[str] = None
    permalink: Optional[str] = None
    user: Optional[str] = None
    username: Optional[str] = None
    team: Optional[str] = None
    channel: ChannelRef


class Paging(BaseModel):
    page: int = 0
    pages: int = 0


class SearchMessages(BaseModel):
    # Entries stay raw; non-object entries are dropped when paging
    matches: Optional[List[Any]] = None
    paging: Optional[Paging] = None


class SearchResponse(BaseModel):
    ok: bool = False
    error: Optional[str] = None
    messages: Optional[SearchMessages] = None


class TextValue(BaseModel):
    value: Optional[str] = None


class ChannelInfo(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    topic: TextValue = Field(default_factory=TextValue)
    purpose: TextValue = Field(default_factory=TextValue)
    created: int = 0
    updated: int = 0
    is_private: bool = False
    is_channel: bool = False
    is_group: bool = False
    is_im: bool = False
    context_team_id: Optional[str] = None


class ConversationsInfoResponse(BaseModel):
    ok: bool = False
    error: Optional[str] = None
    channel: ChannelInfo


class ThreadMessage(BaseModel):
    text: Optional[str] = None
    ts: Optional[str] = None
    thread_ts: Optional[str] = None
    user: Optional[str] = None
    team: Optional[str] = None
    reply_count: int = 0
    reply_users_count: int = 0


class ConversationsRepliesResponse(BaseModel):
    ok: bool = False
    error: Optional[str] = None
    messages: List[ThreadMessage] = Field(..., min_length=1)
