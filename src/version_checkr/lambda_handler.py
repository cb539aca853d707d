"""
AWS Lambda entry point for API Gateway proxy events.

Configure the function handler as ``version_checkr.lambda_handler.handler``.
"""

import asyncio
import base64
from functools import lru_cache
from typing import Any

from version_checkr.core.config import config
from version_checkr.core.utils import configure_logging
from version_checkr.event_processors.version_check import VersionCheckProcessor
from version_checkr.integrations.github import GitHubClient
from version_checkr.integrations.secrets import load_private_key
from version_checkr.webhooks.delivery import accept_delivery, process_delivery
from version_checkr.webhooks.models import DeliveryResponse, WebhookEnvelope


# Loaded on the first delivery that needs it, then kept for the life of the container
@lru_cache(maxsize=1)
def get_private_key() -> str:
    return load_private_key(config.github, config.key_storage)


def build_github_client() -> GitHubClient:
    return GitHubClient(
        app_id=config.github.app_id,
        private_key=get_private_key(),
        api_base_url=config.github.api_base_url,
        timeout=config.version_check.request_timeout,
    )


def envelope_from_event(event: dict[str, Any]) -> WebhookEnvelope:
    """Build a delivery envelope from an API Gateway proxy event."""
    body = event.get("body") or ""
    if event.get("isBase64Encoded"):
        raw = base64.b64decode(body)
    else:
        raw = body.encode("utf-8")
    return WebhookEnvelope.from_raw(raw, event.get("headers"))


async def handle_event(event: dict[str, Any]) -> DeliveryResponse:
    config.validate()
    accepted = accept_delivery(envelope_from_event(event), secret=config.webhook_secret)
    if isinstance(accepted, DeliveryResponse):
        return accepted

    github_client = build_github_client()
    try:
        processor = VersionCheckProcessor(
            github_client,
            settings=config.version_check,
            check_name=config.github.app_name,
        )
        return await process_delivery(accepted, processor)
    finally:
        await github_client.close()


def handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Lambda handler. Processing errors are raised to the Lambda runtime."""
    response = asyncio.run(handle_event(event))
    return {
        "statusCode": response.status_code,
        "headers": {"Content-Type": "text/plain"},
        "body": response.body,
    }


configure_logging(config.logging)
