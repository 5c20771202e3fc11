"""
Context enrichment for the GitHub connector.

The enricher re-fetches the repository, pull request or issue behind a
Context and overwrites its display fields with the current vendor data.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ...core.dates import parse_rfc3339
from ...core.errors import (
    MalformedVendorPayload,
    MissingEnrichmentParams,
    MissingOrUnparseableTimestamp,
    UnsupportedContextType,
)
from ...models import Context
from ...models.github import (
    IssueResource,
    PullRequestResource,
    RepositoryResource,
    label_names,
    logins,
)
from .client import GitHubClient
from .context import (
    GITHUB_WEB_URL,
    RESOURCE_TYPE_ISSUE,
    RESOURCE_TYPE_PULL_REQUEST,
    RESOURCE_TYPE_REPOSITORY,
    RESOURCE_TYPE_SOURCE,
    SOURCE_DESCRIPTION,
    SOURCE_TITLE,
)


ResourceT = TypeVar("ResourceT", bound=BaseModel)


def _require_param(params: Dict[str, Any], key: str) -> str:
    value = params.get(key)
    if not isinstance(value, str) or not value:
        raise MissingEnrichmentParams(f"{key} not found in enrichment_params")
    return value


def _parse_resource(model: Type[ResourceT], body: Dict[str, Any]) -> ResourceT:
    try:
        return model.model_validate(body)
    except ValidationError as e:
        raise MalformedVendorPayload(f"invalid {model.__name__}: {e.error_count()} validation error(s)") from e


def _resource_time(value: Optional[str], field: str) -> datetime:
    try:
        return parse_rfc3339(value)
    except MissingOrUnparseableTimestamp as e:
        raise MalformedVendorPayload(f"invalid {field} in GitHub response: {value!r}") from e


def apply_repository_enrichment(context: Context, repo: RepositoryResource) -> Context:
    created_at = _resource_time(repo.created_at, "created_at")
    updated_at = _resource_time(repo.updated_at, "updated_at")

    context.title = f"Repository: {repo.full_name or ''}"
    context.description = repo.description
    context.url = repo.html_url
    context.created_at = created_at
    context.updated_at = updated_at
    context.metadata.update({
        "stargazers_count": repo.stargazers_count,
        "language": repo.language,
        "topics": repo.topics,
        "default_branch": repo.default_branch,
        "visibility": repo.visibility,
        "forks_count": repo.forks_count,
        "open_issues_count": repo.open_issues_count,
        "watchers_count": repo.watchers_count,
        "homepage": repo.homepage,
    })
    return context


def apply_pull_request_enrichment(context: Context, pr: PullRequestResource) -> Context:
    created_at = _resource_time(pr.created_at, "created_at")
    updated_at = _resource_time(pr.updated_at, "updated_at")

    context.title = pr.title
    context.description = pr.body
    context.url = pr.html_url
    context.created_at = created_at
    context.updated_at = updated_at
    context.metadata.update({
        "state": pr.state,
        "author": pr.user.login,
        "assignees": logins(pr.assignees),
        "reviewers": logins(pr.requested_reviewers),
        "labels": label_names(pr.labels),
        "base_branch": pr.base.ref,
        "head_branch": pr.head.ref,
        "milestone": pr.milestone.title if pr.milestone else None,
        "additions": pr.additions,
        "deletions": pr.deletions,
        "changed_files": pr.changed_files,
        "commits_count": pr.commits,
        "merged": pr.merged,
        "merged_at": pr.merged_at,
        "merged_by": pr.merged_by.login if pr.merged_by else None,
    })
    return context


def apply_issue_enrichment(context: Context, issue: IssueResource) -> Context:
    created_at = _resource_time(issue.created_at, "created_at")
    updated_at = _resource_time(issue.updated_at, "updated_at")

    context.title = issue.title
    context.description = issue.body
    context.url = issue.html_url
    context.created_at = created_at
    context.updated_at = updated_at
    context.metadata.update({
        "state": issue.state,
        "author": issue.user.login,
        "assignees": logins(issue.assignees),
        "labels": label_names(issue.labels),
        "milestone": issue.milestone.title if issue.milestone else None,
        "comments": issue.comments,
    })
    return context


class GitHubContextEnricher:
    """
    Enriches GitHub contexts through the REST API.

    ``id``, ``level`` and ``parent_id`` of the context are never touched.
    """

    def __init__(self, client: GitHubClient, token: str, logger: logging.LoggerAdapter):
        self.client = client
        self.token = token
        self.logger = logger

    def enrich(self, context: Context, params: Dict[str, Any]) -> Context:
        """
        Enrich a context according to its resource type.

        Raises:
            UnsupportedContextType: If the resource type is not a GitHub one
            MissingEnrichmentParams: If a parameter the resource needs is missing
            VendorAPIError: If the GitHub request fails
            MalformedVendorPayload: If the GitHub response cannot be used
        """
        resource_type = context.resource_type

        if resource_type == RESOURCE_TYPE_SOURCE:
            context.title = SOURCE_TITLE
            context.description = SOURCE_DESCRIPTION
            context.url = GITHUB_WEB_URL
            return context

        if resource_type == RESOURCE_TYPE_REPOSITORY:
            repo = _require_param(params, "repo")
            self.logger.info(f"Enriching repository: {repo}")
            body = self.client.fetch_repository(self.token, repo)
            return apply_repository_enrichment(context, _parse_resource(RepositoryResource, body))

        if resource_type == RESOURCE_TYPE_PULL_REQUEST:
            repo = _require_param(params, "repo")
            number = _require_param(params, "pr_number")
            self.logger.info(f"Enriching pull request: {repo} #{number}")
            body = self.client.fetch_pull_request(self.token, repo, number)
            return apply_pull_request_enrichment(context, _parse_resource(PullRequestResource, body))

        if resource_type == RESOURCE_TYPE_ISSUE:
            repo = _require_param(params, "repo")
            number = _require_param(params, "issue_number")
            self.logger.info(f"Enriching issue: {repo} #{number}")
            body = self.client.fetch_issue(self.token, repo, number)
            return apply_issue_enrichment(context, _parse_resource(IssueResource, body))

        raise UnsupportedContextType(f"unsupported context type: {resource_type}")
