"""
Tests for the GitHub connector: contexts, settings, event transforms,
the fetch pipeline, enrichment and the HTTP client.
"""

import copy
import json
import logging
import unittest
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import MagicMock

import httpx

from acteedog.connectors.github import GitHubClient, GitHubConnector, GitHubContextGenerator, transformer
from acteedog.connectors.github.settings import GitHubFetchSettings
from acteedog.core import (
    InvalidConfiguration,
    InvalidDateFormat,
    MalformedVendorPayload,
    MissingEnrichmentParams,
    MissingOrUnparseableTimestamp,
    UnsupportedContextType,
    VendorAPIError,
)
from acteedog.models import Context


UTC = timezone.utc

TESTDATA = Path(__file__).parent / "testdata" / "github"

CONFIG = {
    "credential_personal_access_token": "tok",
    "username": "octocat",
}


def load_json(name):
    with open(TESTDATA / name, 'r', encoding='utf-8') as f:
        return json.load(f)


def silent_logger():
    logger = logging.getLogger("acteedog.tests.github")
    logger.addHandler(logging.NullHandler())
    logger.propagate = False
    return logger


def make_event(event_type, payload, repo="acme/widgets", created_at="2025-11-18T12:00:00Z", event_id="1"):
    return {
        "id": event_id,
        "type": event_type,
        "actor": {"login": "octocat"},
        "repo": {"name": repo},
        "payload": payload,
        "created_at": created_at,
    }


class TestGitHubContextGenerator(unittest.TestCase):
    """Test the standardized GitHub contexts."""

    def setUp(self):
        self.gen = GitHubContextGenerator()

    def test_source_context(self):
        source = self.gen.create_source_context()

        self.assertEqual(source.id, "github:source")
        self.assertEqual(source.level, 1)
        self.assertEqual(source.parent_id, "")
        self.assertEqual(source.title, "GitHub")
        self.assertEqual(source.url, "https://github.com")
        self.assertEqual(source.enrichment_params, {})

    def test_repository_context(self):
        repo = self.gen.create_repository_context("acme/widgets")

        self.assertEqual(repo.id, "github:repository:acme/widgets")
        self.assertEqual(repo.name, "repository:acme/widgets")
        self.assertEqual(repo.title, "acme/widgets")
        self.assertEqual(repo.level, 2)
        self.assertEqual(repo.parent_id, "github:source")
        self.assertEqual(repo.enrichment_params, {"repo": "acme/widgets"})

    def test_leaf_contexts(self):
        pr = self.gen.create_pr_context("acme/widgets", 42)
        issue = self.gen.create_issue_context("acme/widgets", 5)

        self.assertEqual(pr.id, "github:pull_request:acme/widgets:42")
        self.assertEqual(pr.title, "PR #42")
        self.assertEqual(pr.parent_id, "github:repository:acme/widgets")
        self.assertEqual(pr.enrichment_params, {"repo": "acme/widgets", "pr_number": "42"})

        self.assertEqual(issue.id, "github:issue:acme/widgets:5")
        self.assertEqual(issue.name, "Issue #5")
        self.assertEqual(issue.enrichment_params, {"repo": "acme/widgets", "issue_number": "5"})

    def test_equal_arguments_give_equal_contexts(self):
        first = self.gen.create_repository_context("acme/widgets")
        second = self.gen.create_repository_context("acme/widgets")

        self.assertEqual(first, second)
        self.assertIsNot(first, second)
        self.assertIsNot(first.metadata, second.metadata)


class TestGitHubSettings(unittest.TestCase):
    """Test GitHub connector configuration validation."""

    def test_patterns_default_to_empty(self):
        settings = GitHubFetchSettings.model_validate({**CONFIG, "repository_patterns": None})
        self.assertEqual(settings.repository_patterns, [])

    def test_empty_entries_are_skipped(self):
        settings = GitHubFetchSettings.model_validate({**CONFIG, "repository_patterns": ["acme/*", ""]})
        self.assertEqual(settings.repository_patterns, ["acme/*"])

    def test_invalid_patterns(self):
        for patterns in [["acme"], ["acme/a*b*c"], "acme/*"]:
            connector = GitHubConnector({**CONFIG, "repository_patterns": patterns},
                                        client=MagicMock(), logger=silent_logger())
            with self.assertRaises(InvalidConfiguration, msg=repr(patterns)):
                connector.fetch_activities("2025-11-18")

    def test_pattern_error_names_the_line(self):
        connector = GitHubConnector({**CONFIG, "repository_patterns": ["acme/*", "acme"]},
                                    client=MagicMock(), logger=silent_logger())
        with self.assertRaises(InvalidConfiguration) as ctx:
            connector.fetch_activities("2025-11-18")
        self.assertIn("line 2", str(ctx.exception))


class TestGitHubTransform(unittest.TestCase):
    """Test the per-event-type transforms."""

    def test_push_event(self):
        event = make_event("PushEvent", {"ref": "refs/heads/main", "head": "abc123", "before": "def456"},
                           event_id="1001")

        activity = transformer.transform(event)

        self.assertEqual(activity.id, "github:1001")
        self.assertEqual(activity.activity_type, "push")
        self.assertEqual(activity.source, "github")
        self.assertEqual(activity.title, "Push to acme/widgets")
        self.assertEqual(activity.description, "Pushed to refs/heads/main in acme/widgets")
        self.assertTrue(activity.url.endswith("/commit/abc123"))
        self.assertEqual(activity.timestamp, datetime(2025, 11, 18, 12, tzinfo=UTC))
        self.assertEqual(activity.metadata, {"branch": "refs/heads/main", "before_commit": "def456"})
        self.assertEqual([c.id for c in activity.contexts],
                         ["github:source", "github:repository:acme/widgets"])

    def test_pull_request_event(self):
        event = make_event("PullRequestEvent", {
            "action": "closed",
            "number": 42,
            "pull_request": {
                "base": {"ref": "main", "sha": "b1"},
                "head": {"ref": "feature", "sha": "h1"},
            },
        })

        activity = transformer.transform(event)

        self.assertEqual(activity.activity_type, "pull_request")
        self.assertEqual(activity.title, "PR #42 closed in acme/widgets")
        self.assertEqual(activity.description, "Pull request #42 was closed")
        self.assertEqual(activity.url, "https://github.com/acme/widgets/pull/42")
        self.assertEqual(activity.metadata, {
            "pr_number": 42,
            "action": "closed",
            "base_branch": "main",
            "head_branch": "feature",
            "base_sha": "b1",
            "head_sha": "h1",
        })
        self.assertEqual(activity.contexts[2].id, "github:pull_request:acme/widgets:42")

    def test_issues_event(self):
        event = make_event("IssuesEvent", {
            "action": "labeled",
            "issue": {
                "number": 375,
                "html_url": "https://github.com/acme/widgets/issues/375",
                "state": "open",
                "user": {"login": "reporter"},
                "labels": [{"name": "bug"}, {"name": "ui"}],
            },
        })

        activity = transformer.transform(event)

        self.assertEqual(activity.activity_type, "issues")
        self.assertEqual(activity.title, "Issue #375 labeled in acme/widgets")
        self.assertEqual(activity.url, "https://github.com/acme/widgets/issues/375")
        self.assertEqual(activity.metadata["labels"], ["bug", "ui"])
        self.assertEqual(activity.metadata["author"], "reporter")
        self.assertEqual(activity.contexts[2].id, "github:issue:acme/widgets:375")

    def _comment_payload(self, issue_extra):
        issue = {"number": 340, "user": {"login": "reporter"}}
        issue.update(issue_extra)
        return {
            "action": "created",
            "issue": issue,
            "comment": {
                "id": 77,
                "body": "Thanks!",
                "html_url": "https://github.com/acme/widgets/issues/340#issuecomment-77",
                "user": {"login": "octocat"},
                "created_at": "2025-11-18T12:00:00Z",
            },
        }

    def test_issue_comment_on_issue(self):
        activity = transformer.transform(make_event("IssueCommentEvent", self._comment_payload({})))

        self.assertEqual(activity.activity_type, "issue_comment")
        self.assertEqual(activity.title, "Commented on Issue #340")
        self.assertEqual(activity.description, "Thanks!")
        self.assertEqual(activity.metadata, {
            "comment_id": 77,
            "issue_number": 340,
            "comment_author": "octocat",
            "comment_created_at": "2025-11-18T12:00:00Z",
        })
        self.assertEqual(activity.contexts[2].resource_type, "issue")

    def test_issue_comment_on_pull_request(self):
        payload = self._comment_payload({"pull_request": {"url": "https://api.github.com/x"}})

        activity = transformer.transform(make_event("IssueCommentEvent", payload))

        self.assertEqual(activity.activity_type, "pr_comment")
        self.assertEqual(activity.title, "Commented on PR #340")
        self.assertEqual(activity.contexts[2].id, "github:pull_request:acme/widgets:340")

    def test_pull_request_marker_counts_even_when_null(self):
        payload = self._comment_payload({"pull_request": None})

        self.assertEqual(transformer.transform(make_event("IssueCommentEvent", payload)).activity_type,
                         "pr_comment")

    def test_delete_event(self):
        event = make_event("DeleteEvent", {"ref": "chore/lint", "ref_type": "branch", "pusher_type": "user"})

        activity = transformer.transform(event)

        self.assertEqual(activity.activity_type, "delete")
        self.assertEqual(activity.title, "Deleted branch chore/lint in acme/widgets")
        self.assertEqual(activity.description, "branch chore/lint was deleted")
        self.assertEqual(activity.url, "https://github.com/acme/widgets")
        self.assertEqual(activity.metadata["deleted_by"], "octocat")
        self.assertEqual(len(activity.contexts), 2)

    def test_review_comment_event(self):
        event = make_event("PullRequestReviewCommentEvent", {
            "action": "created",
            "pull_request": {"number": 52580, "base": {"ref": "main"}, "head": {"ref": "fix"}},
            "comment": {
                "id": 5,
                "body": "nit: rename",
                "html_url": "https://github.com/acme/widgets/pull/52580#discussion_r5",
                "user": {"login": "octocat"},
                "path": "src/app.py",
                "commit_id": "c0ffee",
            },
        })

        activity = transformer.transform(event)

        self.assertEqual(activity.activity_type, "pr_review_comment")
        self.assertEqual(activity.title, "Commented on PR #52580 in acme/widgets")
        self.assertEqual(activity.description, "nit: rename")
        self.assertEqual(activity.metadata["file_path"], "src/app.py")
        self.assertEqual(activity.metadata["head_branch"], "fix")
        self.assertEqual(activity.contexts[2].id, "github:pull_request:acme/widgets:52580")

    def test_review_event(self):
        event = make_event("PullRequestReviewEvent", {
            "action": "created",
            "pull_request": {"number": 52742},
            "review": {
                "body": None,
                "html_url": "https://github.com/acme/widgets/pull/52742#pullrequestreview-1",
                "state": "approved",
                "user": {"login": "octocat"},
                "submitted_at": "2025-11-18T12:00:00Z",
            },
        })

        activity = transformer.transform(event)

        self.assertEqual(activity.activity_type, "pr_review")
        self.assertEqual(activity.title, "Reviewed PR #52742 in acme/widgets")
        self.assertIsNone(activity.description)
        self.assertEqual(activity.metadata["review_state"], "approved")
        self.assertIsNone(activity.metadata["base_branch"])

    def test_missing_timestamp(self):
        event = make_event("PushEvent", {"ref": "refs/heads/main", "head": "abc"}, created_at=None)

        with self.assertRaises(MissingOrUnparseableTimestamp):
            transformer.transform(event)

    def test_malformed_payload(self):
        event = make_event("PullRequestEvent", {"action": "opened", "number": "forty-two", "pull_request": {}})

        with self.assertRaises(MalformedVendorPayload):
            transformer.transform(event)


class TestGitHubFetch(unittest.TestCase):
    """Test the fetch pipeline against a mocked client."""

    def setUp(self):
        self.client = MagicMock(spec=GitHubClient)
        self.logger = silent_logger()

    def test_fetch_activities(self):
        self.client.fetch_events.return_value = load_json("events.json")
        connector = GitHubConnector(CONFIG, client=self.client, logger=self.logger)

        activities = connector.fetch_activities("2025-11-18")

        self.assertEqual([a.id for a in activities], ["github:1001", "github:1002", "github:1003", "github:1004"])
        self.assertEqual([a.activity_type for a in activities], ["push", "pull_request", "pr_comment", "issues"])
        # Page 1 already reaches the previous day
        self.client.fetch_events.assert_called_once_with("tok", "octocat", 1)

    def test_repository_patterns(self):
        self.client.fetch_events.return_value = load_json("events.json")
        connector = GitHubConnector({**CONFIG, "repository_patterns": ["acme/*"]},
                                    client=self.client, logger=self.logger)

        activities = connector.fetch_activities("2025-11-18")

        self.assertEqual([a.id for a in activities], ["github:1001", "github:1002", "github:1004"])

    def test_empty_page_stops_pagination(self):
        push = make_event("PushEvent", {"ref": "refs/heads/main", "head": "abc"})
        self.client.fetch_events.side_effect = [[push], [], [push]]
        connector = GitHubConnector(CONFIG, client=self.client, logger=self.logger)

        activities = connector.fetch_activities("2025-11-18")

        self.assertEqual(self.client.fetch_events.call_count, 2)
        self.assertEqual(len(activities), 1)

    def test_page_limit(self):
        push = make_event("PushEvent", {"ref": "refs/heads/main", "head": "abc"})
        self.client.fetch_events.return_value = [push]
        connector = GitHubConnector(CONFIG, client=self.client, logger=self.logger)

        connector.fetch_activities("2025-11-18")

        self.assertEqual(self.client.fetch_events.call_count, 3)

    def test_contexts_are_not_shared_between_activities(self):
        self.client.fetch_events.return_value = load_json("events.json")
        connector = GitHubConnector(CONFIG, client=self.client, logger=self.logger)

        push, pr = connector.fetch_activities("2025-11-18")[:2]

        self.assertEqual(push.contexts[1], pr.contexts[1])
        self.assertIsNot(push.contexts[1], pr.contexts[1])

    def test_vendor_error_propagates(self):
        self.client.fetch_events.side_effect = VendorAPIError("GitHub API error (status 401)", status_code=401)
        connector = GitHubConnector(CONFIG, client=self.client, logger=self.logger)

        with self.assertRaises(VendorAPIError) as ctx:
            connector.fetch_activities("2025-11-18")
        self.assertEqual(ctx.exception.status_code, 401)

    def test_invalid_configuration(self):
        connector = GitHubConnector({"credential_personal_access_token": "tok"},
                                    client=self.client, logger=self.logger)

        with self.assertRaises(InvalidConfiguration):
            connector.fetch_activities("2025-11-18")
        self.client.fetch_events.assert_not_called()

    def test_invalid_date(self):
        connector = GitHubConnector(CONFIG, client=self.client, logger=self.logger)

        with self.assertRaises(InvalidDateFormat):
            connector.fetch_activities("18.11.2025")


class TestGitHubEnrichment(unittest.TestCase):
    """Test context enrichment against a mocked client."""

    def setUp(self):
        self.client = MagicMock(spec=GitHubClient)
        self.connector = GitHubConnector({"credential_personal_access_token": "tok"},
                                         client=self.client, logger=silent_logger())
        self.gen = GitHubContextGenerator()

    def test_repository(self):
        self.client.fetch_repository.return_value = load_json("repository.json")
        context = self.gen.create_repository_context("acme/widgets")
        context.description = "old description"

        enriched = self.connector.enrich_context(context)

        self.client.fetch_repository.assert_called_once_with("tok", "acme/widgets")
        self.assertEqual(enriched.description, "hello")
        self.assertEqual(enriched.title, "Repository: acme/widgets")
        self.assertEqual(enriched.url, "https://github.com/acme/widgets")
        self.assertEqual(enriched.created_at, datetime(2020, 1, 2, 3, 4, 5, tzinfo=UTC))
        self.assertEqual(enriched.metadata["stargazers_count"], 42)
        self.assertEqual(enriched.metadata["topics"], ["widgets", "tools"])
        self.assertEqual(enriched.enrichment_params, {"repo": "acme/widgets"})
        # Identity never changes
        self.assertEqual(enriched.id, "github:repository:acme/widgets")
        self.assertEqual(enriched.level, 2)
        self.assertEqual(enriched.parent_id, "github:source")

    def test_pull_request(self):
        self.client.fetch_pull_request.return_value = load_json("pull_request.json")

        enriched = self.connector.enrich_context(self.gen.create_pr_context("acme/widgets", 42))

        self.client.fetch_pull_request.assert_called_once_with("tok", "acme/widgets", "42")
        self.assertEqual(enriched.title, "Add login form")
        self.assertEqual(enriched.description, "Implements the login form.")
        self.assertEqual(enriched.updated_at, datetime(2025, 11, 18, 11, tzinfo=UTC))
        metadata = enriched.metadata
        self.assertEqual(metadata["assignees"], ["octocat", "hubot"])
        self.assertEqual(metadata["reviewers"], ["reviewer1"])
        self.assertEqual(metadata["labels"], ["enhancement"])
        self.assertEqual(metadata["milestone"], "v1.0")
        self.assertEqual(metadata["commits_count"], 3)
        self.assertEqual(metadata["merged_by"], "hubot")
        self.assertTrue(metadata["merged"])

    def test_issue(self):
        self.client.fetch_issue.return_value = load_json("issue.json")

        enriched = self.connector.enrich_context(self.gen.create_issue_context("acme/widgets", 5))

        self.client.fetch_issue.assert_called_once_with("tok", "acme/widgets", "5")
        self.assertEqual(enriched.title, "Widget crashes on start")
        self.assertIsNone(enriched.metadata["milestone"])
        self.assertEqual(enriched.metadata["comments"], 2)
        self.assertEqual(enriched.metadata["assignees"], [])

    def test_source(self):
        source = self.gen.create_source_context()
        source.title = None

        enriched = self.connector.enrich_context(source)

        self.assertEqual(enriched.title, "GitHub")
        self.assertEqual(enriched.url, "https://github.com")
        self.client.assert_not_called()
        self.assertEqual(self.client.method_calls, [])

    def test_context_without_params_is_returned_unmodified(self):
        context = self.gen.create_repository_context("acme/widgets")
        context.metadata = {}
        before = context.model_copy(deep=True)

        enriched = self.connector.enrich_context(context)

        self.assertEqual(enriched, before)
        self.assertEqual(self.client.method_calls, [])

    def test_missing_resource_param(self):
        context = self.gen.create_pr_context("acme/widgets", 42)
        del context.metadata["enrichment_params"]["pr_number"]

        with self.assertRaises(MissingEnrichmentParams):
            self.connector.enrich_context(context)

    def test_unsupported_context_type(self):
        context = Context(id="github:branch:acme/widgets:main", level=3, parent_id="github:repository:acme/widgets",
                          connector_id="github", resource_type="branch", name="main",
                          metadata={"enrichment_params": {"repo": "acme/widgets"}})

        with self.assertRaises(UnsupportedContextType):
            self.connector.enrich_context(context)

    def test_malformed_resource(self):
        body = copy.deepcopy(load_json("repository.json"))
        body["created_at"] = "not a date"
        self.client.fetch_repository.return_value = body

        with self.assertRaises(MalformedVendorPayload):
            self.connector.enrich_context(self.gen.create_repository_context("acme/widgets"))

    def test_failed_enrichment_leaves_context_untouched(self):
        cases = [
            ("fetch_repository", "repository.json", self.gen.create_repository_context("acme/widgets")),
            ("fetch_pull_request", "pull_request.json", self.gen.create_pr_context("acme/widgets", 42)),
            ("fetch_issue", "issue.json", self.gen.create_issue_context("acme/widgets", 5)),
        ]
        for method, fixture, context in cases:
            with self.subTest(method=method):
                body = copy.deepcopy(load_json(fixture))
                body["created_at"] = None
                getattr(self.client, method).return_value = body
                before = context.to_json_dict()

                with self.assertRaises(MalformedVendorPayload):
                    self.connector.enrich_context(context)

                self.assertEqual(context.to_json_dict(), before)

    def test_enrichment_requires_token(self):
        connector = GitHubConnector({}, client=self.client, logger=silent_logger())

        with self.assertRaises(InvalidConfiguration):
            connector.enrich_context(self.gen.create_repository_context("acme/widgets"))


class TestGitHubClient(unittest.TestCase):
    """Test the HTTP client against a mock transport."""

    def _client(self, handler):
        self.requests = []

        def recording_handler(request):
            self.requests.append(request)
            return handler(request)

        http_client = httpx.Client(transport=httpx.MockTransport(recording_handler))
        return GitHubClient(base_url="https://api.github.test/", http_client=http_client)

    def test_fetch_events(self):
        with self._client(lambda request: httpx.Response(200, json=[{"id": "1"}])) as client:
            events = client.fetch_events("tok", "octocat", 2)

        self.assertEqual(events, [{"id": "1"}])
        request = self.requests[0]
        self.assertEqual(request.url.path, "/users/octocat/events")
        self.assertEqual(request.url.params["per_page"], "100")
        self.assertEqual(request.url.params["page"], "2")
        self.assertEqual(request.headers["Authorization"], "token tok")
        self.assertEqual(request.headers["Accept"], "application/vnd.github+json")
        self.assertEqual(request.headers["User-Agent"], "acteedog/github")

    def test_resource_paths(self):
        with self._client(lambda request: httpx.Response(200, json={})) as client:
            client.fetch_repository("tok", "acme/widgets")
            client.fetch_pull_request("tok", "acme/widgets", "42")
            client.fetch_issue("tok", "acme/widgets", "5")

        self.assertEqual([r.url.path for r in self.requests], [
            "/repos/acme/widgets",
            "/repos/acme/widgets/pulls/42",
            "/repos/acme/widgets/issues/5",
        ])

    def test_error_status(self):
        with self._client(lambda request: httpx.Response(404, json={"message": "Not Found"})) as client:
            with self.assertRaises(VendorAPIError) as ctx:
                client.fetch_repository("tok", "acme/missing")

        self.assertEqual(ctx.exception.status_code, 404)

    def test_connection_error(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused")

        with self._client(refuse) as client:
            with self.assertRaises(VendorAPIError) as ctx:
                client.fetch_events("tok", "octocat", 1)

        self.assertIsNone(ctx.exception.status_code)

    def test_undecodable_body(self):
        with self._client(lambda request: httpx.Response(200, text="<html>")) as client:
            with self.assertRaises(MalformedVendorPayload):
                client.fetch_events("tok", "octocat", 1)

    def test_events_must_be_a_list(self):
        with self._client(lambda request: httpx.Response(200, json={"message": "oops"})) as client:
            with self.assertRaises(MalformedVendorPayload):
                client.fetch_events("tok", "octocat", 1)


if __name__ == "__main__":
    unittest.main()
