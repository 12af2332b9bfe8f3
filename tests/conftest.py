"""Shared fixtures for Pullie tests."""

import base64
import json
from typing import Any, Dict, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from pullie.models.events import PullRequestEvent, WebhookContext
from pullie.services.github_client import GitHubAPIError, GitHubResponse


def _encode(value: Any) -> Dict[str, str]:
    return {"content": base64.b64encode(json.dumps(value).encode("utf-8")).decode("ascii")}


@pytest.fixture
def encode_json():
    """Encode a value the way the GitHub contents API returns files."""
    return _encode


@pytest.fixture
def make_payload():
    """Factory for raw pull_request webhook payloads."""

    def _make(action: str = "opened", **pull_request: Any) -> Dict[str, Any]:
        pr = {
            "number": 123,
            "title": "Add a feature",
            "draft": False,
            "user": {"login": "author"},
            "author_association": "CONTRIBUTOR",
        }
        pr.update(pull_request)
        return {
            "action": action,
            "number": pr["number"],
            "repository": {
                "name": "repo",
                "full_name": "org/repo",
                "owner": {"login": "org"},
                "private": True,
            },
            "pull_request": pr,
        }

    return _make


@pytest.fixture
def github():
    """GitHub client double; every API call is an AsyncMock."""
    client = MagicMock()
    client.get_content = AsyncMock(side_effect=GitHubAPIError(404, "Not Found"))
    client.file_exists = AsyncMock(return_value=True)
    client.create_comment = AsyncMock()
    client.list_pull_files = AsyncMock(return_value=[])
    client.request_reviewers = AsyncMock()
    client.check_collaborator = AsyncMock(return_value=204)
    client.update_pull = AsyncMock()
    return client


@pytest.fixture
def make_context(make_payload, github):
    """Factory for a WebhookContext around a payload and the github double."""

    def _make(payload: Optional[Dict[str, Any]] = None, **kwargs: Any) -> WebhookContext:
        payload = payload or make_payload(**kwargs)
        return WebhookContext(
            event=PullRequestEvent.model_validate(payload),
            github=github,
            delivery_id="MOCK-ID",
        )

    return _make


@pytest.fixture
def serve_files(github):
    """Serve repo files from dicts through ``github.get_content``.

    ``repo_files`` maps paths in the target repo, ``org_files`` maps paths in
    the org's ``.github`` repo. Exception values are raised instead.
    """

    def _serve(repo_files: Optional[Dict[str, Any]] = None, org_files: Optional[Dict[str, Any]] = None):
        async def get_content(owner, repo, path):
            files = org_files if repo == ".github" else repo_files
            if not files or path not in files:
                raise GitHubAPIError(404, "Not Found")
            value = files[path]
            if isinstance(value, Exception):
                raise value
            return GitHubResponse(status=200, data=_encode(value))

        github.get_content = AsyncMock(side_effect=get_content)
        return github

    return _serve
