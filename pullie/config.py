"""Environment-derived settings for the Pullie service."""

import logging
import os
from dataclasses import dataclass, field
from typing import Optional

from pullie.constants import DEFAULT_GITHUB_API_URL

logger = logging.getLogger(__name__)


def _env_flag(name: str) -> bool:
    return os.getenv(name, "false").lower() == "true"


@dataclass(frozen=True)
class JiraSettings:
    """Connection settings for the Jira plugin."""

    protocol: str = "https"
    host: str = ""
    username: str = ""
    password: str = ""

    @property
    def base_url(self) -> str:
        return f"{self.protocol}://{self.host}"


@dataclass(frozen=True)
class Settings:
    """Settings read from the environment.

    A fresh instance is built for every webhook event and treated as
    immutable for the duration of that event.
    """

    enterprise_id: Optional[str] = None
    no_public_repos: bool = False
    github_api_url: str = DEFAULT_GITHUB_API_URL
    github_token: str = ""
    webhook_secret: str = ""
    reviewers_comment_format: Optional[str] = None
    jira: JiraSettings = field(default_factory=JiraSettings)

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the current process environment."""
        return cls(
            enterprise_id=os.getenv("GH_ENTERPRISE_ID") or None,
            no_public_repos=_env_flag("NO_PUBLIC_REPOS"),
            github_api_url=os.getenv("GITHUB_API_URL", DEFAULT_GITHUB_API_URL).rstrip("/"),
            github_token=os.getenv("GITHUB_TOKEN", ""),
            webhook_secret=os.getenv("GITHUB_WEBHOOK_SECRET", ""),
            reviewers_comment_format=os.getenv("REVIEWERS_COMMENT_FORMAT") or None,
            jira=JiraSettings(
                protocol=os.getenv("JIRA_PROTOCOL", "https"),
                host=os.getenv("JIRA_HOST", ""),
                username=os.getenv("JIRA_USERNAME", ""),
                password=os.getenv("JIRA_PASSWORD", ""),
            ),
        )

    def parsed_enterprise_id(self) -> Optional[int]:
        """Return the enterprise id as an int, or None if it is not numeric."""
        if self.enterprise_id is None:
            return None
        try:
            return int(self.enterprise_id)
        except ValueError:
            logger.warning(f"GH_ENTERPRISE_ID is not a number: {self.enterprise_id!r}")
            return None
