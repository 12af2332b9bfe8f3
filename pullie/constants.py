"""Global constants for the Pullie service."""

import os

# Config file looked up in the target repo and in the org meta repo
CONFIG_FILE_NAME = ".pullierc"
ORG_CONFIG_REPO = ".github"

# Separator between aggregated comments in the posted PR comment
COMMENT_SEPARATOR = "\n\n---\n\n"

DEFAULT_GITHUB_API_URL = "https://api.github.com"

# Pull request actions the webhook endpoint dispatches
HANDLED_ACTIONS = ("opened", "edited", "ready_for_review")

DEFAULT_PORT = int(os.getenv("PORT", "3000"))
