"""GitHub webhook endpoints."""

import json
import logging
from typing import Optional

from fastapi import APIRouter, Header, HTTPException, Request
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError

from pullie import __version__
from pullie.constants import HANDLED_ACTIONS
from pullie.dependencies import get_github_client, get_settings
from pullie.handlers.processor import process_pull_request_event
from pullie.models.events import PullRequestEvent, WebhookContext
from pullie.utils.signature import verify_signature

logger = logging.getLogger(__name__)

router = APIRouter(tags=["github"])


@router.get("/")
async def root():
    """Service info."""
    return {"service": "pullie", "version": __version__, "webhook": "/api/v1/github"}


@router.get("/healthcheck", response_class=PlainTextResponse)
@router.get("/healthcheck.html", response_class=PlainTextResponse)
async def healthcheck():
    return "page ok"


@router.post("/api/v1/github")
async def github_webhook(
    request: Request,
    x_github_event: str = Header(..., alias="X-GitHub-Event"),
    x_github_delivery: str = Header("", alias="X-GitHub-Delivery"),
    x_hub_signature_256: Optional[str] = Header(None, alias="X-Hub-Signature-256"),
    x_hub_signature: Optional[str] = Header(None, alias="X-Hub-Signature"),
):
    """Receive a GitHub webhook delivery.

    Pull request deliveries are processed before the response is sent, so
    GitHub's delivery log reflects the time spent running plugins.
    """
    body = await request.body()
    settings = get_settings()

    if settings.webhook_secret:
        if not verify_signature(settings.webhook_secret, body, x_hub_signature_256 or x_hub_signature):
            logger.warning(f"[Webhook] Signature mismatch: delivery={x_github_delivery}")
            raise HTTPException(status_code=401, detail="Invalid signature")
    else:
        logger.debug(f"[Webhook] No webhook secret configured, accepting delivery={x_github_delivery}")

    try:
        payload = json.loads(body.decode("utf-8"))
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid JSON")

    logger.info(f"[Webhook] Received delivery={x_github_delivery} event={x_github_event}")

    if x_github_event == "ping":
        return {"ok": True, "pong": True}

    if x_github_event != "pull_request":
        return {"ok": True, "ignored_event": x_github_event}

    action = payload.get("action") if isinstance(payload, dict) else None
    if action not in HANDLED_ACTIONS:
        return {"ok": True, "ignored_action": action}

    try:
        event = PullRequestEvent.model_validate(payload)
    except ValidationError as e:
        logger.warning(f"[Webhook] Malformed pull_request payload: delivery={x_github_delivery}, error={e}")
        raise HTTPException(status_code=400, detail="Malformed pull_request payload")

    context = WebhookContext(event=event, github=get_github_client(), delivery_id=x_github_delivery)
    await process_pull_request_event(context, settings)

    return {"ok": True, "event": "pull_request", "action": action, "number": event.number}
