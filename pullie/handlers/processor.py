"""Pull request processor - runs the configured plugins for one PR event."""

import logging
from typing import Any, Dict, Optional

from pullie.commenter import Commenter
from pullie.config import Settings
from pullie.config_processor import resolve_config
from pullie.constants import CONFIG_FILE_NAME, ORG_CONFIG_REPO
from pullie.models.events import WebhookContext
from pullie.models.plugin_ref import parse_plugin_ref
from pullie.plugins.registry import PluginRegistry, build_default_registry
from pullie.services.github_client import GitHubAPIError
from pullie.utils.encoding import parse_base64_json

logger = logging.getLogger(__name__)


class PullRequestProcessor:
    """Processes one pull request webhook event.

    Flow:
    1. Admission filters (enterprise id, public repos)
    2. Load repo config, then org config
    3. Resolve the effective config
    4. Run each plugin in order, isolating failures
    5. Post the aggregated comment
    """

    def __init__(self, settings: Settings, registry: Optional[PluginRegistry] = None):
        self.settings = settings
        self.registry = registry if registry is not None else build_default_registry(settings)

    async def process(self, context: WebhookContext) -> None:
        """Process a pull request event.

        Config and plugin failures are logged rather than raised; only a
        failure to post the final comment propagates.
        """
        event = context.event
        log_data = context.log_data()
        logger.info(f"[Processor] Processing PR: {log_data}")

        if not self._is_admitted(context):
            return

        try:
            repo_config = await self.get_repo_config(context)
        except Exception as e:
            logger.error(
                f"[Processor] Error getting repository config: request_id={context.delivery_id}, error={e}",
                exc_info=True,
            )
            return

        if not repo_config:
            logger.info(f"[Processor] No config specified for repo, nothing to do: {log_data}")
            return

        try:
            org_config = await self.get_org_config(context)
        except Exception as e:
            logger.warning(f"[Processor] Error getting org config: request_id={context.delivery_id}, error={e}")
            org_config = None

        def on_invalid_plugin(name: Optional[str]) -> None:
            logger.error(
                f"[Processor] Invalid plugin specified in repo config: "
                f"repository={event.repository.full_name}, plugin={name}, request_id={context.delivery_id}"
            )

        config = resolve_config(org_config, repo_config, self.registry, on_invalid_plugin)
        plugins = config.get("plugins")
        if not isinstance(plugins, list) or not plugins:
            logger.info(f"[Processor] No plugins to run, nothing to do: {log_data}")
            return

        commenter = Commenter()
        for entry in plugins:
            await self._run_plugin(context, commenter, entry)

        logger.info(f"[Processor] Finished processing PR: {log_data}")
        comment = commenter.flush_to_string()
        if comment:
            owner, repo = context.repo()
            await context.github.create_comment(owner, repo, event.number, comment)

    async def _run_plugin(self, context: WebhookContext, commenter: Commenter, entry: Any) -> None:
        event = context.event
        ref = parse_plugin_ref(entry)
        plugin = self.registry.get(ref.name)
        if plugin is None:
            logger.error(
                f"[Processor] Invalid plugin specified in config: "
                f"repository={event.repository.full_name}, plugin={ref.name}, request_id={context.delivery_id}"
            )
            return

        if event.action == "edited" and not plugin.processes_edits:
            return
        if event.action == "ready_for_review" and not plugin.processes_ready_for_review:
            return

        config = ref.config if ref.config is not None else {}
        try:
            await plugin.process_request(context, commenter, config)
        except Exception as e:
            logger.error(
                f"[Processor] Error running plugin: repository={event.repository.full_name}, "
                f"number={event.number}, plugin={ref.name}, request_id={context.delivery_id}, error={e}",
                exc_info=True,
            )

    def _is_admitted(self, context: WebhookContext) -> bool:
        event = context.event

        if self.settings.enterprise_id is not None:
            enterprise_id = self.settings.parsed_enterprise_id()
            if enterprise_id is not None and event.enterprise and event.enterprise.id == enterprise_id:
                logger.info("[Processor] PR is from the configured Enterprise")
            else:
                logger.info("[Processor] PR is not from the configured Enterprise, nothing to do")
                return False

        if self.settings.no_public_repos and not event.repository.private:
            logger.info("[Processor] Pullie has been disabled on public repos, nothing to do")
            return False

        return True

    async def get_repo_config(self, context: WebhookContext) -> Optional[Dict[str, Any]]:
        """Get the .pullierc of the target repo, or None if it has none."""
        owner, repo = context.repo()
        return await self._load_config(context, owner, repo)

    async def get_org_config(self, context: WebhookContext) -> Optional[Dict[str, Any]]:
        """Get the org-level .pullierc from the owner's .github repo, or None."""
        owner, _ = context.repo()
        return await self._load_config(context, owner, ORG_CONFIG_REPO)

    async def _load_config(self, context: WebhookContext, owner: str, repo: str) -> Optional[Dict[str, Any]]:
        try:
            res = await context.github.get_content(owner, repo, CONFIG_FILE_NAME)
        except GitHubAPIError as e:
            # A missing .pullierc is not an error
            if e.status == 404:
                return None
            raise

        config = parse_base64_json(res.data)
        if config is not None and not isinstance(config, dict):
            raise ValueError(f"{CONFIG_FILE_NAME} in {owner}/{repo} must contain a JSON object")
        return config


async def process_pull_request_event(context: WebhookContext, settings: Optional[Settings] = None) -> None:
    """Process one pull request event with settings read for this event."""
    settings = settings or Settings.from_env()
    await PullRequestProcessor(settings).process(context)
