"""Required file plugin - warns when a PR does not touch a required file."""

import logging
from typing import Any, Dict, Optional, Union

from pullie.commenter import Commenter, Priority
from pullie.models.events import WebhookContext
from pullie.plugins.base import BasePlugin

logger = logging.getLogger(__name__)

RequiredFile = Union[str, Dict[str, Any]]


class RequiredFilePlugin(BasePlugin):
    """Checks that every configured file is changed by the pull request.

    Config::

        {"files": ["CHANGELOG.md", {"path": "docs/api.md", "message": "..."}]}
    """

    def merge_config(
        self,
        base_config: Optional[Dict[str, Any]],
        override_config: Optional[Dict[str, Any]],
    ) -> Dict[str, Any]:
        merged = super().merge_config(base_config, override_config)
        # The files list is replaced wholesale, never combined
        merged["files"] = (override_config or {}).get("files")
        return merged

    async def process_request(
        self,
        context: WebhookContext,
        commenter: Commenter,
        config: Dict[str, Any],
    ) -> None:
        files = config.get("files") if config else None
        if files is None:
            raise ValueError("Missing `files` field in plugin config")

        for required in files:
            await self.check_file(context, commenter, required)

    async def check_file(self, context: WebhookContext, commenter: Commenter, required: RequiredFile) -> None:
        """Queue a warning if ``required`` exists in the repo but not in the PR."""
        if isinstance(required, str):
            file_path, message = required, None
        elif isinstance(required, dict):
            file_path, message = required.get("path"), required.get("message")
        else:
            file_path, message = None, None

        if not file_path:
            raise ValueError("No file path specified for required file.")

        message = "⚠️ " + (
            message
            or f"You're missing a change to {file_path}, which is a requirement for changes to this repo."
        )

        owner, repo = context.repo()
        if not await context.github.file_exists(owner, repo, file_path):
            logger.debug(f"[RequiredFile] {file_path} not in {owner}/{repo}, skipping")
            return

        files_in_pr = await context.github.list_pull_files(owner, repo, context.pull_number)
        if not any(f.get("filename") == file_path for f in files_in_pr):
            commenter.add_comment(message, Priority.HIGH)
