"""GitHub REST client - the calls Pullie and its plugins make."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import aiohttp

from pullie.constants import DEFAULT_GITHUB_API_URL

logger = logging.getLogger(__name__)


class GitHubAPIError(Exception):
    """Non-2xx response from the GitHub API."""

    def __init__(self, status: int, message: str = ""):
        super().__init__(f"GitHub API error {status}: {message}")
        self.status = status
        self.message = message


@dataclass
class GitHubResponse:
    """Status and decoded body of a successful call."""

    status: int
    data: Any = None


class GitHubClient:
    """Thin async wrapper over the GitHub REST API.

    A new ``aiohttp.ClientSession`` is opened per request, so a single client
    can be shared between events without lifecycle management.
    """

    PER_PAGE = 100

    def __init__(self, token: str = "", api_url: str = DEFAULT_GITHUB_API_URL):
        self.token = token
        self.api_url = api_url.rstrip("/")

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": "pullie",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[dict] = None,
        params: Optional[dict] = None,
    ) -> GitHubResponse:
        """Send a request and raise ``GitHubAPIError`` on non-2xx responses."""
        url = f"{self.api_url}{path}"
        async with aiohttp.ClientSession(headers=self._headers()) as session:
            async with session.request(method, url, json=json, params=params) as response:
                if response.status >= 300:
                    text = await response.text()
                    logger.debug(f"[GitHub] {method} {path} -> HTTP {response.status}: {text}")
                    raise GitHubAPIError(response.status, text)

                data = None
                if response.status != 204 and response.content_type == "application/json":
                    data = await response.json()
                return GitHubResponse(status=response.status, data=data)

    async def get_content(self, owner: str, repo: str, path: str) -> GitHubResponse:
        """Get a file from the default branch of a repository.

        Raises:
            GitHubAPIError: With status 404 if the file does not exist
        """
        return await self._request("GET", f"/repos/{owner}/{repo}/contents/{path}")

    async def file_exists(self, owner: str, repo: str, path: str) -> bool:
        """Check whether a file exists in the repository."""
        try:
            res = await self.get_content(owner, repo, path)
        except GitHubAPIError as e:
            if e.status == 404:
                return False
            raise
        return res.status == 200

    async def create_comment(self, owner: str, repo: str, issue_number: int, body: str) -> None:
        """Create a comment on an issue or pull request."""
        await self._request(
            "POST",
            f"/repos/{owner}/{repo}/issues/{issue_number}/comments",
            json={"body": body},
        )
        logger.info(f"[GitHub] Comment posted on {owner}/{repo}#{issue_number}")

    async def list_pull_files(self, owner: str, repo: str, pull_number: int) -> List[Dict[str, Any]]:
        """List every file changed in a pull request, following pagination."""
        files: List[Dict[str, Any]] = []
        page = 1
        while True:
            res = await self._request(
                "GET",
                f"/repos/{owner}/{repo}/pulls/{pull_number}/files",
                params={"per_page": self.PER_PAGE, "page": page},
            )
            batch = res.data or []
            files.extend(batch)
            if len(batch) < self.PER_PAGE:
                return files
            page += 1

    async def request_reviewers(self, owner: str, repo: str, pull_number: int, reviewers: List[str]) -> None:
        """Request reviews from the given users."""
        await self._request(
            "POST",
            f"/repos/{owner}/{repo}/pulls/{pull_number}/requested_reviewers",
            json={"reviewers": reviewers},
        )

    async def check_collaborator(self, owner: str, repo: str, username: str) -> int:
        """Return the status code of the collaborator check (204 for collaborators).

        Raises:
            GitHubAPIError: With status 404 if the user is not a collaborator
        """
        res = await self._request("GET", f"/repos/{owner}/{repo}/collaborators/{username}")
        return res.status

    async def update_pull(self, owner: str, repo: str, pull_number: int, **fields: Any) -> None:
        """Update fields of a pull request."""
        await self._request("PATCH", f"/repos/{owner}/{repo}/pulls/{pull_number}", json=fields)
