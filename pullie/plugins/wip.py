"""WIP plugin - toggles draft state based on ``WIP`` in the PR title."""

import logging
import re
from typing import Any, Dict

from pullie.commenter import Commenter
from pullie.models.events import WebhookContext
from pullie.plugins.base import BasePlugin

logger = logging.getLogger(__name__)

HAS_WIP = re.compile(r"\bWIP\b")


class WIPPlugin(BasePlugin):
    """Marks WIP pull requests as drafts, and un-drafts them once WIP is dropped."""

    processes_edits = True

    async def process_request(
        self,
        context: WebhookContext,
        commenter: Commenter,
        config: Dict[str, Any],
    ) -> None:
        event = context.event
        is_edit = event.action == "edited"
        old_title = None

        if is_edit:
            old_title = event.old_title
            if not old_title or old_title == event.pull_request.title:
                # Title hasn't changed, nothing to do
                return

        title = event.pull_request.title
        is_draft = event.pull_request.draft

        new_draft_status = None
        if title and HAS_WIP.search(title) and not is_draft:
            new_draft_status = True
        elif is_edit and is_draft and HAS_WIP.search(old_title):
            new_draft_status = False

        if new_draft_status is None:
            return

        owner, repo = context.repo()
        await context.github.update_pull(owner, repo, context.pull_number, draft=new_draft_status)
        logger.info(f"[WIP] Set draft={new_draft_status} on {owner}/{repo}#{context.pull_number}")
