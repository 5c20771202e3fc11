"""
Context generation for the GitHub connector.

GitHub activity hangs off a three-level tree:
source (github) -> repository -> pull request or issue.
"""

from ...core.ids import make_activity_id, make_id
from ...models import Context, ENRICHMENT_PARAMS_KEY


CONNECTOR_ID = "github"
GITHUB_WEB_URL = "https://github.com"

RESOURCE_TYPE_SOURCE = "source"
RESOURCE_TYPE_REPOSITORY = "repository"
RESOURCE_TYPE_PULL_REQUEST = "pull_request"
RESOURCE_TYPE_ISSUE = "issue"

SOURCE_TITLE = "GitHub"
SOURCE_DESCRIPTION = "Github is a code hosting platform for version control and collaboration."


def make_github_activity_id(event_id: str) -> str:
    return make_activity_id(CONNECTOR_ID, event_id)


def make_source_context_id() -> str:
    return make_id(CONNECTOR_ID, RESOURCE_TYPE_SOURCE)


def make_repository_context_id(repo_name: str) -> str:
    return make_id(CONNECTOR_ID, RESOURCE_TYPE_REPOSITORY, repo_name)


def make_pull_request_context_id(repo_name: str, pr_number: str) -> str:
    return make_id(CONNECTOR_ID, RESOURCE_TYPE_PULL_REQUEST, repo_name, pr_number)


def make_issue_context_id(repo_name: str, issue_number: str) -> str:
    return make_id(CONNECTOR_ID, RESOURCE_TYPE_ISSUE, repo_name, issue_number)


class GitHubContextGenerator:
    """
    Factory for the standardized GitHub Context objects.

    Every call returns a new Context; equal arguments give equal Contexts.
    """

    connector_id = CONNECTOR_ID

    def create_source_context(self) -> Context:
        """Create the level 1 source context for GitHub."""
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
            url=GITHUB_WEB_URL,
            metadata={ENRICHMENT_PARAMS_KEY: {}},
        )

    def create_repository_context(self, repo_name: str) -> Context:
        """Create a level 2 repository context, e.g. for "octocat/Hello-World"."""
        return Context(
            id=make_repository_context_id(repo_name),
            name=f"repository:{repo_name}",
            level=2,
            parent_id=make_source_context_id(),
            connector_id=self.connector_id,
            resource_type=RESOURCE_TYPE_REPOSITORY,
            title=repo_name,
            metadata={ENRICHMENT_PARAMS_KEY: {"repo": repo_name}},
        )

    def create_pr_context(self, repo_name: str, pr_number: int) -> Context:
        """Create a level 3 pull request context."""
        return Context(
            id=make_pull_request_context_id(repo_name, str(pr_number)),
            name=f"PR #{pr_number}",
            level=3,
            parent_id=make_repository_context_id(repo_name),
            connector_id=self.connector_id,
            resource_type=RESOURCE_TYPE_PULL_REQUEST,
            title=f"PR #{pr_number}",
            metadata={ENRICHMENT_PARAMS_KEY: {"repo": repo_name, "pr_number": str(pr_number)}},
        )

    def create_issue_context(self, repo_name: str, issue_number: int) -> Context:
        """Create a level 3 issue context."""
        return Context(
            id=make_issue_context_id(repo_name, str(issue_number)),
            name=f"Issue #{issue_number}",
            level=3,
            parent_id=make_repository_context_id(repo_name),
            connector_id=self.connector_id,
            resource_type=RESOURCE_TYPE_ISSUE,
            title=f"Issue #{issue_number}",
            metadata={ENRICHMENT_PARAMS_KEY: {"repo": repo_name, "issue_number": str(issue_number)}},
        )
