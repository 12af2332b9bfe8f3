"""External service clients."""

from .github_client import GitHubAPIError, GitHubClient, GitHubResponse

__all__ = [
    'GitHubAPIError',
    'GitHubClient',
    'GitHubResponse',
]
