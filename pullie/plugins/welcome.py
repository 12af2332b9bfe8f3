"""Welcome plugin - greets first-time contributors."""

from typing import Any, Dict

from pullie.commenter import Commenter, Priority
from pullie.models.events import WebhookContext
from pullie.plugins.base import BasePlugin

FIRST_TIME_ASSOCIATIONS = ("FIRST_TIME_CONTRIBUTOR", "FIRST_TIMER")

DEFAULT_MESSAGE = "👋 Welcome %s, and thanks for your first pull request to this repo!"


class WelcomePlugin(BasePlugin):
    """Queues a welcome note on a first-time contributor's opened PR.

    ``config.message`` overrides the note; ``%s`` becomes ``@<author>``.
    """

    async def process_request(
        self,
        context: WebhookContext,
        commenter: Commenter,
        config: Dict[str, Any],
    ) -> None:
        event = context.event
        if event.action != "opened":
            return

        pull_request = event.pull_request
        if pull_request.author_association not in FIRST_TIME_ASSOCIATIONS or not pull_request.user:
            return

        message = (config or {}).get("message") or DEFAULT_MESSAGE
        commenter.add_comment(message.replace("%s", f"@{pull_request.user.login}"), Priority.MEDIUM)
