"""Utility functions for the Pullie service."""

from .encoding import parse_base64_json
from .merge import deep_merge
from .signature import verify_signature

__all__ = [
    'parse_base64_json',
    'deep_merge',
    'verify_signature',
]
