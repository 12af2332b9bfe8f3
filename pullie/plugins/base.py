"""Base plugin class - the contract every Pullie plugin satisfies."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from pullie.commenter import Commenter
from pullie.models.events import WebhookContext


class BasePlugin(ABC):
    """Abstract base class for plugins.

    Subclasses flip ``processes_edits`` / ``processes_ready_for_review`` to
    take part in ``edited`` and ``ready_for_review`` actions. ``opened``
    actions are always processed.
    """

    processes_edits: bool = False
    processes_ready_for_review: bool = False

    def merge_config(
        self,
        base_config: Optional[Dict[str, Any]],
        override_config: Optional[Dict[str, Any]],
    ) -> Dict[str, Any]:
        """Merge ``override_config`` on top of ``base_config``.

        The default is a shallow key overwrite.
        """
        return {**(base_config or {}), **(override_config or {})}

    @abstractmethod
    async def process_request(
        self,
        context: WebhookContext,
        commenter: Commenter,
        config: Dict[str, Any],
    ) -> None:
        """Act on one pull request event.

        Args:
            context: Webhook context (event payload and GitHub client)
            commenter: Aggregator for notices to post on the PR
            config: Plugin configuration resolved from the .pullierc files
        """
        ...
