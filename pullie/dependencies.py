"""Dependency injection container for services."""

import logging

from pullie.config import Settings
from pullie.services.github_client import GitHubClient

logger = logging.getLogger(__name__)

# ============================================================================
# Global service instances (exposed via functions for easier testing/mocking)
# ============================================================================

_github_client_instance = None


def get_settings() -> Settings:
    """Get settings for the current event (read fresh from the environment)."""
    return Settings.from_env()


def get_github_client() -> GitHubClient:
    """Get GitHub client (singleton)."""
    global _github_client_instance
    if _github_client_instance is None:
        settings = get_settings()
        _github_client_instance = GitHubClient(token=settings.github_token, api_url=settings.github_api_url)
        logger.info(f"Created GitHubClient instance for {settings.github_api_url}")
    return _github_client_instance


# Test utility function (for unit testing - resets all singletons)
def reset_services():
    """Reset all service instances (only for testing)."""
    global _github_client_instance

    _github_client_instance = None
    logger.info("Reset all service instances")
