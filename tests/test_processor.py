"""Tests for the pull request processor."""

import asyncio
import logging
from unittest.mock import AsyncMock, patch

import pytest

from pullie.commenter import Priority
from pullie.config import Settings
from pullie.handlers.processor import PullRequestProcessor, process_pull_request_event
from pullie.plugins.base import BasePlugin
from pullie.plugins.registry import PluginRegistry
from pullie.services.github_client import GitHubAPIError


class MockPlugin(BasePlugin):
    """Plugin double recording its calls in a shared list."""

    def __init__(self, name, calls, processes_edits=False, processes_ready_for_review=False, comment=None, error=None):
        self.name = name
        self.calls = calls
        self.processes_edits = processes_edits
        self.processes_ready_for_review = processes_ready_for_review
        self.comment = comment
        self.error = error

    async def process_request(self, context, commenter, config):
        self.calls.append((self.name, config))
        if self.error:
            raise self.error
        if self.comment:
            commenter.add_comment(*self.comment)


@pytest.fixture
def calls():
    return []


@pytest.fixture
def registry(calls):
    registry = PluginRegistry()
    registry.register("one", MockPlugin("one", calls))
    registry.register("two", MockPlugin("two", calls, processes_edits=True))
    registry.register("three", MockPlugin("three", calls, processes_ready_for_review=True))
    return registry


def run(processor, context):
    asyncio.run(processor.process(context))


class TestAdmission:
    """Tests for the enterprise and public repo filters."""

    def test_enterprise_match_is_processed(self, registry, calls, make_payload, make_context, serve_files):
        serve_files(repo_files={".pullierc": {"plugins": ["one"]}})
        payload = make_payload()
        payload["enterprise"] = {"id": 5}

        run(PullRequestProcessor(Settings(enterprise_id="5"), registry), make_context(payload))

        assert calls == [("one", {})]

    def test_enterprise_mismatch_is_skipped(self, registry, calls, make_payload, make_context, serve_files):
        github = serve_files(repo_files={".pullierc": {"plugins": ["one"]}})
        payload = make_payload()
        payload["enterprise"] = {"id": 6}

        run(PullRequestProcessor(Settings(enterprise_id="5"), registry), make_context(payload))

        assert calls == []
        github.get_content.assert_not_awaited()

    def test_missing_enterprise_is_skipped(self, registry, calls, make_context, serve_files):
        serve_files(repo_files={".pullierc": {"plugins": ["one"]}})

        run(PullRequestProcessor(Settings(enterprise_id="5"), registry), make_context())

        assert calls == []

    def test_non_numeric_enterprise_setting_skips_everything(
        self, registry, calls, make_payload, make_context, serve_files
    ):
        serve_files(repo_files={".pullierc": {"plugins": ["one"]}})
        payload = make_payload()
        payload["enterprise"] = {"id": 5}

        run(PullRequestProcessor(Settings(enterprise_id="abc"), registry), make_context(payload))

        assert calls == []

    def test_public_repo_skipped_when_disabled(self, registry, calls, make_payload, make_context, serve_files):
        serve_files(repo_files={".pullierc": {"plugins": ["one"]}})
        payload = make_payload()
        payload["repository"]["private"] = False

        run(PullRequestProcessor(Settings(no_public_repos=True), registry), make_context(payload))

        assert calls == []

    def test_private_repo_processed_when_public_disabled(self, registry, calls, make_context, serve_files):
        serve_files(repo_files={".pullierc": {"plugins": ["one"]}})

        run(PullRequestProcessor(Settings(no_public_repos=True), registry), make_context())

        assert calls == [("one", {})]


class TestConfigLoading:
    """Tests for reading the repo and org .pullierc files."""

    def test_no_repo_config_does_nothing(self, registry, calls, github, make_context):
        run(PullRequestProcessor(Settings(), registry), make_context())

        assert calls == []
        github.create_comment.assert_not_awaited()
        assert github.get_content.await_count == 1

    def test_repo_config_error_bails(self, registry, calls, github, make_context, serve_files, caplog):
        serve_files(
            repo_files={".pullierc": GitHubAPIError(500, "boom")},
            org_files={".pullierc": {"plugins": ["one"]}},
        )

        with caplog.at_level(logging.ERROR):
            run(PullRequestProcessor(Settings(), registry), make_context())

        assert calls == []
        github.create_comment.assert_not_awaited()
        assert "Error getting repository config" in caplog.text

    def test_repo_config_must_be_object(self, registry, calls, make_context, serve_files, caplog):
        serve_files(repo_files={".pullierc": ["one"]})

        with caplog.at_level(logging.ERROR):
            run(PullRequestProcessor(Settings(), registry), make_context())

        assert calls == []
        assert "Error getting repository config" in caplog.text

    def test_org_config_error_degrades_to_repo_config(self, registry, calls, make_context, serve_files, caplog):
        serve_files(
            repo_files={".pullierc": {"plugins": ["one"]}},
            org_files={".pullierc": GitHubAPIError(500, "boom")},
        )

        with caplog.at_level(logging.WARNING):
            run(PullRequestProcessor(Settings(), registry), make_context())

        assert calls == [("one", {})]
        assert "Error getting org config" in caplog.text

    def test_merged_plugins_run_in_order_with_config(self, registry, calls, make_context, serve_files):
        serve_files(
            repo_files={".pullierc": {"plugins": ["one", {"plugin": "two", "config": {"foo": "bar"}}]}},
            org_files={".pullierc": {"plugins": [{"plugin": "two", "config": {"baz": "blah"}}, "three"]}},
        )

        run(PullRequestProcessor(Settings(), registry), make_context())

        assert calls == [
            ("two", {"baz": "blah", "foo": "bar"}),
            ("three", {}),
            ("one", {}),
        ]

    def test_empty_plugin_list_does_nothing(self, registry, calls, github, make_context, serve_files):
        serve_files(repo_files={".pullierc": {"plugins": []}})

        run(PullRequestProcessor(Settings(), registry), make_context())

        assert calls == []
        github.create_comment.assert_not_awaited()

    def test_invalid_plugin_in_repo_config_is_logged(self, registry, calls, make_context, serve_files, caplog):
        serve_files(repo_files={".pullierc": {"plugins": ["bogus", "one"]}})

        with caplog.at_level(logging.ERROR):
            run(PullRequestProcessor(Settings(), registry), make_context())

        assert calls == [("one", {})]
        assert "plugin=bogus" in caplog.text

    def test_invalid_plugin_in_org_config_is_skipped(self, registry, calls, make_context, serve_files, caplog):
        serve_files(
            repo_files={".pullierc": {"plugins": ["two"]}},
            org_files={".pullierc": {"plugins": ["bogus", "one"]}},
        )

        with caplog.at_level(logging.ERROR):
            run(PullRequestProcessor(Settings(), registry), make_context())

        assert calls == [("one", {}), ("two", {})]
        assert "plugin=bogus" in caplog.text


class TestActionFiltering:
    """Tests for skipping plugins on edited and ready_for_review actions."""

    def test_opened_runs_every_plugin(self, registry, calls, make_context, serve_files):
        serve_files(repo_files={".pullierc": {"plugins": ["one", "two", "three"]}})

        run(PullRequestProcessor(Settings(), registry), make_context(action="opened"))

        assert [name for name, _ in calls] == ["one", "two", "three"]

    def test_edited_runs_only_edit_plugins(self, registry, calls, make_context, serve_files):
        serve_files(repo_files={".pullierc": {"plugins": ["one", "two", "three"]}})

        run(PullRequestProcessor(Settings(), registry), make_context(action="edited"))

        assert [name for name, _ in calls] == ["two"]

    def test_ready_for_review_runs_only_ready_plugins(self, registry, calls, make_context, serve_files):
        serve_files(repo_files={".pullierc": {"plugins": ["one", "two", "three"]}})

        run(PullRequestProcessor(Settings(), registry), make_context(action="ready_for_review"))

        assert [name for name, _ in calls] == ["three"]


class TestCommenting:
    """Tests for plugin isolation and the aggregated comment."""

    def test_comments_posted_in_priority_order(self, calls, github, make_context, serve_files):
        registry = PluginRegistry()
        registry.register("low", MockPlugin("low", calls, comment=("low note", Priority.LOW)))
        registry.register("high", MockPlugin("high", calls, comment=("high note", Priority.HIGH)))
        serve_files(repo_files={".pullierc": {"plugins": ["low", "high"]}})

        run(PullRequestProcessor(Settings(), registry), make_context())

        github.create_comment.assert_awaited_once_with("org", "repo", 123, "high note\n\n---\n\nlow note")

    def test_plugin_failure_does_not_stop_others(self, calls, github, make_context, serve_files, caplog):
        registry = PluginRegistry()
        registry.register("quiet", MockPlugin("quiet", calls))
        registry.register("broken", MockPlugin("broken", calls, error=RuntimeError("kaboom")))
        registry.register("ok", MockPlugin("ok", calls, comment=("all good", Priority.MEDIUM)))
        serve_files(repo_files={".pullierc": {"plugins": ["quiet", "broken", "ok"]}})

        with caplog.at_level(logging.ERROR):
            run(PullRequestProcessor(Settings(), registry), make_context())

        assert [name for name, _ in calls] == ["quiet", "broken", "ok"]
        github.create_comment.assert_awaited_once_with("org", "repo", 123, "all good")
        assert "plugin=broken" in caplog.text
        assert "kaboom" in caplog.text

    def test_no_comment_when_nothing_queued(self, registry, github, make_context, serve_files):
        serve_files(repo_files={".pullierc": {"plugins": ["one"]}})

        run(PullRequestProcessor(Settings(), registry), make_context())

        github.create_comment.assert_not_awaited()

    def test_comment_failure_propagates(self, calls, github, make_context, serve_files):
        registry = PluginRegistry()
        registry.register("note", MockPlugin("note", calls, comment=("note", Priority.LOW)))
        serve_files(repo_files={".pullierc": {"plugins": ["note"]}})
        github.create_comment.side_effect = GitHubAPIError(403, "Forbidden")

        with pytest.raises(GitHubAPIError):
            run(PullRequestProcessor(Settings(), registry), make_context())


class TestBundledPlugins:
    """End-to-end runs against the bundled plugins."""

    def test_missing_changelog_is_reported(self, github, make_context, serve_files):
        serve_files(
            repo_files={".pullierc": {"plugins": {"include": [
                {"plugin": "requiredFile", "config": {"files": ["CHANGELOG.md"]}},
            ]}}},
            org_files={".pullierc": {"plugins": ["reviewers"]}},
        )
        github.file_exists.return_value = True
        github.list_pull_files.return_value = [{"filename": "index.js"}]

        run(PullRequestProcessor(Settings()), make_context())

        github.request_reviewers.assert_not_awaited()
        github.create_comment.assert_awaited_once()
        owner, repo, number, body = github.create_comment.await_args.args
        assert (owner, repo, number) == ("org", "repo", 123)
        assert body == (
            "⚠️ You're missing a change to CHANGELOG.md, which is a requirement for changes to this repo."
        )

    def test_process_pull_request_event_reads_settings_from_env(self, make_context, monkeypatch):
        monkeypatch.setenv("NO_PUBLIC_REPOS", "true")
        context = make_context()

        with patch("pullie.handlers.processor.PullRequestProcessor.process", new_callable=AsyncMock) as process:
            asyncio.run(process_pull_request_event(context))

        process.assert_awaited_once_with(context)
