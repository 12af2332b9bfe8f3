"""Webhook signature verification."""

import hashlib
import hmac
from typing import Optional

_ALGORITHMS = {"sha256": hashlib.sha256, "sha1": hashlib.sha1}


def sign_payload(secret: str, body: bytes, algo: str = "sha256") -> str:
    """Return the ``<algo>=<hexdigest>`` signature GitHub sends for ``body``."""
    digest = hmac.new(secret.encode("utf-8"), body, _ALGORITHMS[algo]).hexdigest()
    return f"{algo}={digest}"


def verify_signature(secret: str, body: bytes, provided: Optional[str]) -> bool:
    """Check an ``X-Hub-Signature-256`` (or legacy ``X-Hub-Signature``) header."""
    if not provided or "=" not in provided:
        return False

    algo = provided.split("=", 1)[0].lower()
    if algo not in _ALGORITHMS:
        return False

    return hmac.compare_digest(provided, sign_payload(secret, body, algo))
