"""
GitHub payload models.

Events from the ``/users/{username}/events`` API and the resources fetched for
enrichment are validated into these models before any field is read. Only the
fields the connector uses are declared; everything else is ignored.
"""

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field


class Repo(BaseModel):
    name: str


class Account(BaseModel):
    login: Optional[str] = None


class Label(BaseModel):
    name: Optional[str] = None


class Branch(BaseModel):
    ref: Optional[str] = None
    sha: Optional[str] = None


class Milestone(BaseModel):
    title: Optional[str] = None


class PullRequestRef(BaseModel):
    """The pull request object embedded in event payloads."""

    number: Optional[int] = None
    base: Branch = Field(default_factory=Branch)
    head: Branch = Field(default_factory=Branch)


class ReviewedPullRequest(PullRequestRef):
    """Review events address the pull request by its own number."""

    number: int


class IssueRef(BaseModel):
    """
    The issue object embedded in issue and issue-comment payloads.

    GitHub sends comments on pull requests through the issues API; such
    issues carry a ``pull_request`` key.
    """

    number: int
    html_url: Optional[str] = None
    state: Optional[str] = None
    user: Account = Field(default_factory=Account)
    labels: List[Label] = Field(default_factory=list)
    pull_request: Optional[Dict[str, Any]] = None

    @property
    def is_pull_request(self) -> bool:
        return "pull_request" in self.model_fields_set


class Comment(BaseModel):
    id: Optional[int] = None
    body: Optional[str] = None
    html_url: Optional[str] = None
    user: Account = Field(default_factory=Account)
    created_at: Optional[str] = None
    path: Optional[str] = None
    commit_id: Optional[str] = None


class Review(BaseModel):
    body: Optional[str] = None
    html_url: Optional[str] = None
    state: Optional[str] = None
    user: Account = Field(default_factory=Account)
    submitted_at: Optional[str] = None


# Payloads

class PushPayload(BaseModel):
    ref: Optional[str] = None
    head: Optional[str] = None
    before: Optional[str] = None


class PullRequestPayload(BaseModel):
    action: Optional[str] = None
    number: int
    pull_request: PullRequestRef


class IssuesPayload(BaseModel):
    action: Optional[str] = None
    issue: IssueRef


class IssueCommentPayload(BaseModel):
    action: Optional[str] = None
    issue: IssueRef
    comment: Comment = Field(default_factory=Comment)


class DeletePayload(BaseModel):
    ref: Optional[str] = None
    ref_type: Optional[str] = None
    pusher_type: Optional[str] = None


class ReviewCommentPayload(BaseModel):
    action: Optional[str] = None
    pull_request: ReviewedPullRequest
    comment: Comment


class ReviewPayload(BaseModel):
    action: Optional[str] = None
    pull_request: ReviewedPullRequest
    review: Review


# Events

class GitHubEvent(BaseModel):
    """Fields shared by every event type."""

    id: Union[str, int]
    type: str
    created_at: Optional[str] = None
    repo: Repo
    actor: Account = Field(default_factory=Account)


class PushEvent(GitHubEvent):
    type: Literal["PushEvent"]
    payload: PushPayload


class PullRequestEvent(GitHubEvent):
    type: Literal["PullRequestEvent"]
    payload: PullRequestPayload


class IssuesEvent(GitHubEvent):
    type: Literal["IssuesEvent"]
    payload: IssuesPayload


class IssueCommentEvent(GitHubEvent):
    type: Literal["IssueCommentEvent"]
    payload: IssueCommentPayload


class DeleteEvent(GitHubEvent):
    type: Literal["DeleteEvent"]
    payload: DeletePayload


class PullRequestReviewCommentEvent(GitHubEvent):
    type: Literal["PullRequestReviewCommentEvent"]
    payload: ReviewCommentPayload


class PullRequestReviewEvent(GitHubEvent):
    type: Literal["PullRequestReviewEvent"]
    payload: ReviewPayload


# Enrichment resources

class RepositoryResource(BaseModel):
    """Response of ``GET /repos/{repo}``."""

    full_name: Optional[str] = None
    description: Optional[str] = None
    html_url: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    stargazers_count: Optional[int] = None
    language: Optional[str] = None
    topics: List[str] = Field(default_factory=list)
    default_branch: Optional[str] = None
    visibility: Optional[str] = None
    forks_count: Optional[int] = None
    open_issues_count: Optional[int] = None
    watchers_count: Optional[int] = None
    homepage: Optional[str] = None


class PullRequestResource(BaseModel):
    """Response of ``GET /repos/{repo}/pulls/{number}``."""

    title: Optional[str] = None
    body: Optional[str] = None
    html_url: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    state: Optional[str] = None
    user: Account = Field(default_factory=Account)
    assignees: List[Account] = Field(default_factory=list)
    requested_reviewers: List[Account] = Field(default_factory=list)
    labels: List[Label] = Field(default_factory=list)
    base: Branch = Field(default_factory=Branch)
    head: Branch = Field(default_factory=Branch)
    milestone: Optional[Milestone] = None
    additions: Optional[int] = None
    deletions: Optional[int] = None
    changed_files: Optional[int] = None
    commits: Optional[int] = None
    merged: Optional[bool] = None
    merged_at: Optional[str] = None
    merged_by: Optional[Account] = None


class IssueResource(BaseModel):
    """Response of ``GET /repos/{repo}/issues/{number}``."""

    title: Optional[str] = None
    body: Optional[str] = None
    html_url: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    state: Optional[str] = None
    user: Account = Field(default_factory=Account)
    assignees: List[Account] = Field(default_factory=list)
    labels: List[Label] = Field(default_factory=list)
    milestone: Optional[Milestone] = None
    comments: Optional[int] = None


def logins(accounts: List[Account]) -> List[str]:
    """Collect the logins of a list of accounts, skipping anonymous ones."""
    return [account.login for account in accounts if account.login]


def label_names(labels: List[Label]) -> List[str]:
    """Collect label names, skipping unnamed labels."""
    return [label.name for label in labels if label.name]
