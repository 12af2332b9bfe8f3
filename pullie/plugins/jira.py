"""Jira plugin - links Jira tickets referenced in the PR title."""

import logging
import re
from typing import Any, Dict, List

import aiohttp

from pullie.commenter import Commenter, Priority
from pullie.config import JiraSettings
from pullie.models.events import WebhookContext
from pullie.plugins.base import BasePlugin

logger = logging.getLogger(__name__)

HAS_JIRA_TICKET = re.compile(r"([A-Z]+-[1-9][0-9]*)")


class JiraRequestError(RuntimeError):
    """Jira search request did not succeed."""


class JiraPlugin(BasePlugin):
    """Posts links to the Jira tickets referenced in the pull request title.

    On ``edited`` actions only tickets newly added to the title are linked.
    """

    processes_edits = True

    def __init__(self, jira_settings: JiraSettings):
        self.jira_settings = jira_settings

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

        ticket_ids = self.extract_tickets_from_string(event.pull_request.title)
        if is_edit and old_title:
            old_ticket_ids = self.extract_tickets_from_string(old_title)
            ticket_ids = [t for t in ticket_ids if t not in old_ticket_ids]

        if not ticket_ids:
            # No new tickets referenced in title, nothing to do
            return

        await self.find_tickets_and_post(commenter, ticket_ids)

    async def find_tickets_and_post(self, commenter: Commenter, ticket_ids: List[str]) -> None:
        """Look the tickets up in Jira and queue a comment linking them."""
        body = await self.search(ticket_ids)
        issues = body.get("issues") or []
        if not issues:
            return

        base_url = self.jira_settings.base_url
        ticket_list = "".join(
            f"\n- [\\[{ticket['key']}\\] {ticket['fields']['summary']}]({base_url}/browse/{ticket['key']})"
            for ticket in issues
        )
        commenter.add_comment(
            f"I found the following Jira ticket(s) referenced in this PR:\n{ticket_list}",
            Priority.LOW,
        )

    async def search(self, ticket_ids: List[str]) -> Dict[str, Any]:
        """Run a JQL search for the given ticket ids.

        Raises:
            JiraRequestError: If Jira answers with a non-OK status
        """
        jql = "id in ('" + "', '".join(ticket_ids) + "')"
        url = f"{self.jira_settings.base_url}/rest/api/2/search"
        auth = aiohttp.BasicAuth(self.jira_settings.username, self.jira_settings.password)
        payload = {"jql": jql, "startAt": 0, "fields": ["summary"]}

        async with aiohttp.ClientSession(auth=auth) as session:
            async with session.post(url, json=payload, headers={"Accept": "application/json"}) as response:
                if not response.ok:
                    raise JiraRequestError(
                        f"Error retrieving Jira ticket info. Status code: {response.status} from Jira."
                    )
                logger.debug(f"[Jira] Search for {ticket_ids} succeeded")
                return await response.json()

    @staticmethod
    def extract_tickets_from_string(text: str) -> List[str]:
        """Extract Jira ticket ids such as ``ABC-123`` from ``text``."""
        if not text:
            return []
        return HAS_JIRA_TICKET.findall(text)
