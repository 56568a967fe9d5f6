"""
Webhook endpoint for GitHub pull request events.
"""

import hashlib
import hmac
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Header, HTTPException, Request
from pydantic import ValidationError

from keeper.config import settings
from keeper.models.api_response import WebhookResponse
from keeper.models.pull_request import PullRequestEvent
from keeper.services.dispatcher import get_event_dispatcher
from keeper.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["webhooks"])

SIGNATURE_PREFIX = "sha256="


def acknowledgement() -> WebhookResponse:
    """Fixed body returned for every accepted delivery."""
    return WebhookResponse(status="ok", message="payload received")


def verify_webhook_signature(payload: bytes, signature: Optional[str], secret: str) -> bool:
    """
    Verify a GitHub webhook signature.

    Args:
        payload: Raw request payload
        signature: Value of the X-Hub-Signature-256 header ('sha256=<hex>')
        secret: Shared webhook secret

    Returns:
        True if signature is valid, False otherwise
    """
    if not signature or not signature.startswith(SIGNATURE_PREFIX):
        return False

    expected_signature = hmac.new(
        secret.encode(),
        payload,
        hashlib.sha256
    ).hexdigest()

    # Constant-time comparison
    return hmac.compare_digest(signature[len(SIGNATURE_PREFIX):], expected_signature)


async def process_pr_event_async(event: PullRequestEvent) -> None:
    """
    Run the merge pipeline for an event after the response was sent.

    Nothing raised by the pipeline may escape into the server.

    Args:
        event: PR event to process
    """
    try:
        await get_event_dispatcher().process_event(event)
    except Exception as e:
        logger.error(f"Error processing PR event asynchronously: {e}", exc_info=True)


@router.post("/payload", response_model=WebhookResponse)
async def handle_payload(
    request: Request,
    background_tasks: BackgroundTasks,
    x_hub_signature: Optional[str] = Header(None, alias="X-Hub-Signature-256")
) -> WebhookResponse:
    """
    Receive GitHub pull request webhook deliveries.

    This endpoint:
    1. Validates the webhook signature when a secret is configured
    2. Parses the pull request event payload
    3. Schedules the merge pipeline as a background task
    4. Returns 200 OK immediately, whatever the pipeline's outcome

    Raises:
        HTTPException: If signature validation fails
    """
    payload = await request.body()

    if settings.webhook_secret and not verify_webhook_signature(
        payload, x_hub_signature, settings.webhook_secret
    ):
        logger.warning("Invalid webhook signature received")
        raise HTTPException(status_code=401, detail="Invalid webhook signature")

    try:
        event = PullRequestEvent.model_validate_json(payload)
    except ValidationError as e:
        logger.info(
            "Ignoring payload that is not a pull request event",
            extra={"validation_errors": e.error_count()}
        )
        return acknowledgement()

    logger.info(
        f"Received {event.action} webhook",
        extra={
            "pr_url": event.pull_request.url if event.pull_request else None,
            "pr_number": event.number,
            "clean_merge": event.pull_request.mergeable_state if event.pull_request else None,
        }
    )

    background_tasks.add_task(process_pr_event_async, event)

    return acknowledgement()
