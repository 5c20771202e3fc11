"""
Transform GitHub events into Activities.

Each supported event type registers one function on ``transformer``; the
function receives the event already validated into its payload model.
"""

from typing import Any, Dict, List

from ...core.dates import parse_rfc3339
from ...models import Activity, Context
from ...models.github import (
    DeleteEvent,
    GitHubEvent,
    IssueCommentEvent,
    IssuesEvent,
    PullRequestEvent,
    PullRequestReviewCommentEvent,
    PullRequestReviewEvent,
    PushEvent,
    label_names,
)
from ..base import EventTransformer
from .context import CONNECTOR_ID, GITHUB_WEB_URL, GitHubContextGenerator, make_github_activity_id


transformer = EventTransformer(type_field="type")

contexts = GitHubContextGenerator()


def _repository_chain(repo_name: str) -> List[Context]:
    return [contexts.create_source_context(), contexts.create_repository_context(repo_name)]


def _activity(event: GitHubEvent, activity_type: str, title: str, description, url,
              metadata: Dict[str, Any], chain: List[Context]) -> Activity:
    return Activity(
        id=make_github_activity_id(str(event.id)),
        activity_type=activity_type,
        title=title,
        description=description,
        url=url,
        timestamp=parse_rfc3339(event.created_at),
        source=CONNECTOR_ID,
        metadata=metadata,
        contexts=chain,
    )


@transformer.register("PushEvent", PushEvent)
def transform_push(event: PushEvent) -> Activity:
    repo = event.repo.name
    payload = event.payload
    return _activity(
        event, "push",
        title=f"Push to {repo}",
        description=f"Pushed to {payload.ref or ''} in {repo}",
        url=f"{GITHUB_WEB_URL}/{repo}/commit/{payload.head or ''}",
        metadata={"branch": payload.ref, "before_commit": payload.before},
        chain=_repository_chain(repo),
    )


@transformer.register("PullRequestEvent", PullRequestEvent)
def transform_pull_request(event: PullRequestEvent) -> Activity:
    repo = event.repo.name
    payload = event.payload
    number = payload.number
    action = payload.action or ""
    pr = payload.pull_request
    return _activity(
        event, "pull_request",
        title=f"PR #{number} {action} in {repo}",
        description=f"Pull request #{number} was {action}",
        url=f"{GITHUB_WEB_URL}/{repo}/pull/{number}",
        metadata={
            "pr_number": number,
            "action": payload.action,
            "base_branch": pr.base.ref,
            "head_branch": pr.head.ref,
            "base_sha": pr.base.sha,
            "head_sha": pr.head.sha,
        },
        chain=_repository_chain(repo) + [contexts.create_pr_context(repo, number)],
    )


@transformer.register("IssuesEvent", IssuesEvent)
def transform_issues(event: IssuesEvent) -> Activity:
    repo = event.repo.name
    issue = event.payload.issue
    action = event.payload.action or ""
    return _activity(
        event, "issues",
        title=f"Issue #{issue.number} {action} in {repo}",
        description=f"Issue #{issue.number} was {action}",
        url=issue.html_url,
        metadata={
            "issue_number": issue.number,
            "action": event.payload.action,
            "state": issue.state,
            "author": issue.user.login,
            "labels": label_names(issue.labels),
        },
        chain=_repository_chain(repo) + [contexts.create_issue_context(repo, issue.number)],
    )


@transformer.register("IssueCommentEvent", IssueCommentEvent)
def transform_issue_comment(event: IssueCommentEvent) -> Activity:
    """
    Comments on pull requests arrive as issue comments; the issue's
    ``pull_request`` key tells the two apart.
    """
    repo = event.repo.name
    issue = event.payload.issue
    comment = event.payload.comment
    metadata = {
        "comment_id": comment.id,
        "issue_number": issue.number,
        "comment_author": comment.user.login,
        "comment_created_at": comment.created_at,
    }

    if issue.is_pull_request:
        return _activity(
            event, "pr_comment",
            title=f"Commented on PR #{issue.number}",
            description=comment.body,
            url=comment.html_url,
            metadata=metadata,
            chain=_repository_chain(repo) + [contexts.create_pr_context(repo, issue.number)],
        )

    return _activity(
        event, "issue_comment",
        title=f"Commented on Issue #{issue.number}",
        description=comment.body,
        url=comment.html_url,
        metadata=metadata,
        chain=_repository_chain(repo) + [contexts.create_issue_context(repo, issue.number)],
    )


@transformer.register("DeleteEvent", DeleteEvent)
def transform_delete(event: DeleteEvent) -> Activity:
    repo = event.repo.name
    payload = event.payload
    ref_type = payload.ref_type or ""
    ref = payload.ref or ""
    return _activity(
        event, "delete",
        title=f"Deleted {ref_type} {ref} in {repo}",
        description=f"{ref_type} {ref} was deleted",
        url=f"{GITHUB_WEB_URL}/{repo}",
        metadata={
            "ref_type": payload.ref_type,
            "ref": payload.ref,
            "deleted_by": event.actor.login,
            "pusher_type": payload.pusher_type,
        },
        chain=_repository_chain(repo),
    )


@transformer.register("PullRequestReviewCommentEvent", PullRequestReviewCommentEvent)
def transform_review_comment(event: PullRequestReviewCommentEvent) -> Activity:
    repo = event.repo.name
    pr = event.payload.pull_request
    comment = event.payload.comment
    return _activity(
        event, "pr_review_comment",
        title=f"Commented on PR #{pr.number} in {repo}",
        description=comment.body,
        url=comment.html_url,
        metadata={
            "comment_id": comment.id,
            "pr_number": pr.number,
            "comment_author": comment.user.login,
            "file_path": comment.path,
            "commit_id": comment.commit_id,
            "base_branch": pr.base.ref,
            "head_branch": pr.head.ref,
        },
        chain=_repository_chain(repo) + [contexts.create_pr_context(repo, pr.number)],
    )


@transformer.register("PullRequestReviewEvent", PullRequestReviewEvent)
def transform_review(event: PullRequestReviewEvent) -> Activity:
    repo = event.repo.name
    pr = event.payload.pull_request
    review = event.payload.review
    return _activity(
        event, "pr_review",
        title=f"Reviewed PR #{pr.number} in {repo}",
        description=review.body,
        url=review.html_url,
        metadata={
            "pr_number": pr.number,
            "review_state": review.state,
            "reviewer": review.user.login,
            "submitted_at": review.submitted_at,
            "base_branch": pr.base.ref,
            "head_branch": pr.head.ref,
        },
        chain=_repository_chain(repo) + [contexts.create_pr_context(repo, pr.number)],
    )
