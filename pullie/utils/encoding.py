"""Decoding of file contents returned by the GitHub contents API."""

import base64
import json
from typing import Any, Optional


def parse_base64_json(blob: Optional[dict]) -> Any:
    """Parse a JSON file retrieved from GitHub.

    Args:
        blob: Contents API response body with a base64 ``content`` field

    Returns:
        Parsed JSON value, or None if the blob carries no content

    Raises:
        ValueError: If the content is not valid base64 encoded JSON
    """
    if not blob or not blob.get("content"):
        return None

    raw = base64.b64decode(blob["content"])
    return json.loads(raw.decode("utf-8"))
