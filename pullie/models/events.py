"""Pull request webhook payload models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from pullie.services.github_client import GitHubClient


class _Payload(BaseModel):
    # GitHub sends far more than we read; keep the rest around
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class Account(_Payload):
    """A GitHub user or organization."""

    login: str


class Repository(_Payload):
    """Repository the pull request targets."""

    name: str
    full_name: str
    owner: Account
    private: bool = False


class PullRequest(_Payload):
    """The pull request object of the payload."""

    number: int
    title: Optional[str] = None
    draft: bool = False
    user: Optional[Account] = None
    author_association: Optional[str] = None


class TitleChange(_Payload):
    from_: Optional[str] = Field(default=None, alias="from")


class PullRequestChanges(_Payload):
    """``changes`` block sent with ``edited`` actions."""

    title: Optional[TitleChange] = None


class Enterprise(_Payload):
    id: Optional[int] = None


class Installation(_Payload):
    id: Optional[int] = None


class PullRequestEvent(_Payload):
    """``pull_request`` webhook payload."""

    action: str
    number: int
    repository: Repository
    pull_request: PullRequest
    changes: Optional[PullRequestChanges] = None
    enterprise: Optional[Enterprise] = None
    installation: Optional[Installation] = None

    @property
    def old_title(self) -> Optional[str]:
        """Previous title for ``edited`` actions that changed it."""
        if self.changes and self.changes.title:
            return self.changes.title.from_
        return None


@dataclass
class WebhookContext:
    """Everything a plugin needs to act on one pull request event."""

    event: PullRequestEvent
    github: GitHubClient
    delivery_id: str = ""

    def repo(self) -> Tuple[str, str]:
        """Return ``(owner, repo)`` for the target repository."""
        return self.event.repository.owner.login, self.event.repository.name

    @property
    def pull_number(self) -> int:
        return self.event.pull_request.number

    def log_data(self) -> Dict[str, Any]:
        return {
            "repository": self.event.repository.full_name,
            "number": self.event.number,
            "request_id": self.delivery_id,
        }
