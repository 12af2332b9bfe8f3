"""Reviewers plugin - automatically requests reviews from contributors."""

import logging
import random
import re
from typing import Any, Dict, List, Optional, Union

import aiohttp

from pullie.commenter import Commenter, Priority
from pullie.models.events import WebhookContext
from pullie.plugins.base import BasePlugin
from pullie.services.github_client import GitHubAPIError
from pullie.utils.encoding import parse_base64_json

logger = logging.getLogger(__name__)

REVIEWER_REGEX = re.compile(r"([A-Za-z0-9_-]+)@")

Reviewer = Union[str, Dict[str, Any]]


class ReviewersPlugin(BasePlugin):
    """Requests reviews from configured users or from package.json people.

    Config keys:
        reviewers: List of usernames. Defaults to the contributors,
            maintainers and author listed in package.json.
        howMany: Number of reviewers to pick at random. Defaults to all.
        commentFormat: Comment to post, ``%s`` is replaced with the
            requested reviewers.
    """

    processes_ready_for_review = True

    def __init__(self, default_comment_format: Optional[str] = None):
        self.default_comment_format = default_comment_format

    async def process_request(
        self,
        context: WebhookContext,
        commenter: Commenter,
        config: Dict[str, Any],
    ) -> None:
        config = config or {}
        comment_format = config.get("commentFormat") or self.default_comment_format

        reviewers = config.get("reviewers")
        if not reviewers:
            package_info = await self.get_package_json(context)
            if not package_info:
                # No package.json, nothing to do
                return
            reviewers = self.get_all_possible_reviewers(package_info)

        await self.request_reviews(context, reviewers, config.get("howMany"), comment_format, commenter)

    def get_all_possible_reviewers(self, package_info: Dict[str, Any]) -> List[Reviewer]:
        """Collect contributors, maintainers and author from package.json."""
        reviewers = self.normalize_reviewer_field(package_info.get("contributors"))
        reviewers += self.normalize_reviewer_field(package_info.get("maintainers"))
        if package_info.get("author"):
            reviewers.append(package_info["author"])
        return reviewers

    @staticmethod
    def normalize_reviewer_field(field: Any) -> List[Reviewer]:
        if isinstance(field, list):
            return list(field)
        if isinstance(field, (str, dict)):
            return [field]
        return []

    async def request_reviews(
        self,
        context: WebhookContext,
        reviewers: List[Reviewer],
        how_many: Optional[int],
        comment_format: Optional[str],
        commenter: Commenter,
    ) -> None:
        """Pick reviewers from the candidates and request their review."""
        users = await self.get_users_from_reviewers_list(context, reviewers)
        if not users:
            return

        if how_many:
            users = random.sample(users, min(how_many, len(users)))
        users = sorted(users)

        if comment_format:
            mentions = ", ".join(f"@{user}" for user in users)
            commenter.add_comment(comment_format.replace("%s", mentions), Priority.MEDIUM)

        owner, repo = context.repo()
        await context.github.request_reviewers(owner, repo, context.pull_number, users)
        logger.info(f"[Reviewers] Requested review from {users} on {owner}/{repo}#{context.pull_number}")

    async def get_package_json(self, context: WebhookContext) -> Optional[Dict[str, Any]]:
        owner, repo = context.repo()
        try:
            res = await context.github.get_content(owner, repo, "package.json")
        except GitHubAPIError as e:
            if e.status == 404:
                return None
            raise
        return parse_base64_json(res.data)

    async def get_users_from_reviewers_list(self, context: WebhookContext, reviewers: List[Reviewer]) -> List[str]:
        """Turn raw reviewer entries into confirmed collaborator usernames.

        Entries may be usernames, ``Name <user@domain>`` strings or objects
        with an ``email`` field. The PR author is never requested.
        """
        author = context.event.pull_request.user.login if context.event.pull_request.user else None

        candidates: List[str] = []
        for reviewer in reviewers or []:
            username = self._extract_username(reviewer)
            if username and username != author and username not in candidates:
                candidates.append(username)

        owner, repo = context.repo()
        confirmed: List[str] = []
        for username in candidates:
            try:
                status = await context.github.check_collaborator(owner, repo, username)
            except (GitHubAPIError, aiohttp.ClientError) as e:
                logger.debug(f"[Reviewers] Skipping {username}, collaborator check failed: {e}")
                continue
            if status == 204:
                confirmed.append(username)
        return confirmed

    @staticmethod
    def _extract_username(reviewer: Reviewer) -> Optional[str]:
        if isinstance(reviewer, str):
            subject = reviewer
        elif isinstance(reviewer, dict):
            subject = reviewer.get("email") or ""
        else:
            return None

        match = REVIEWER_REGEX.search(subject)
        return match.group(1) if match else subject
