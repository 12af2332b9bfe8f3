"""Webhook event handlers."""

from .processor import PullRequestProcessor, process_pull_request_event

__all__ = [
    'PullRequestProcessor',
    'process_pull_request_event',
]
