"""
Per-delivery pipeline: headers, signature, classification, then the version check.

| Condition                          | Status | Body                                   |
|------------------------------------|--------|----------------------------------------|
| no ``X-GitHub-Event``              | 400    | Missing X-GitHub-Event                 |
| no ``X-Hub-Signature``             | 400    | Missing X-Hub-Signature                |
| signature mismatch                 | 400    | Invalid X-Hub-Signature                |
| body is not a JSON object          | 400    | Invalid JSON payload                   |
| nothing to do                      | 202    | No action to take                      |
| commit outside any pull request    | 202    | Commit is not part of a pull request...|
| version checked                    | 200    | the comparison message                 |

Errors raised while processing are not turned into responses here.
"""

import json
from dataclasses import dataclass
from typing import Any

import structlog

from version_checkr.core.models import WebhookEvent
from version_checkr.event_processors.version_check import VersionCheckProcessor
from version_checkr.webhooks.auth import verify_signature
from version_checkr.webhooks.classifier import classify, require_pull_request_context
from version_checkr.webhooks.models import (
    DeliveryResponse,
    NoAction,
    NoPullRequestContext,
    Process,
    WebhookEnvelope,
)

logger = structlog.get_logger()

EVENT_HEADER = "X-GitHub-Event"
SIGNATURE_HEADER = "X-Hub-Signature"
DELIVERY_HEADER = "X-GitHub-Delivery"

MISSING_EVENT = "Missing X-GitHub-Event"
MISSING_SIGNATURE = "Missing X-Hub-Signature"
INVALID_SIGNATURE = "Invalid X-Hub-Signature"
INVALID_JSON = "Invalid JSON payload"
NO_ACTION = "No action to take"


@dataclass(frozen=True)
class AcceptedDelivery:
    """A verified delivery that asks for work."""

    event: WebhookEvent
    decision: Process | NoPullRequestContext


def accept_delivery(envelope: WebhookEnvelope, secret: bytes) -> AcceptedDelivery | DeliveryResponse:
    """
    Validate and classify a delivery without any external call.

    Returns either the final response (rejections and no-ops) or the work to do.
    """
    event_name = envelope.header(EVENT_HEADER)
    if not event_name:
        logger.warning("webhook_rejected", reason=MISSING_EVENT)
        return DeliveryResponse(status_code=400, body=MISSING_EVENT)

    signature = envelope.header(SIGNATURE_HEADER)
    if not signature:
        logger.warning("webhook_rejected", reason=MISSING_SIGNATURE, github_event=event_name)
        return DeliveryResponse(status_code=400, body=MISSING_SIGNATURE)

    if not verify_signature(envelope.body, signature, secret):
        logger.warning("webhook_rejected", reason=INVALID_SIGNATURE, github_event=event_name)
        return DeliveryResponse(status_code=400, body=INVALID_SIGNATURE)

    payload = _decode_payload(envelope.body)
    if payload is None:
        logger.warning("webhook_rejected", reason=INVALID_JSON, github_event=event_name)
        return DeliveryResponse(status_code=400, body=INVALID_JSON)

    event = WebhookEvent(event_name=event_name, payload=payload)
    log = logger.bind(
        github_event=event_name,
        action=event.action,
        repo=event.repo_full_name,
        delivery_id=envelope.header(DELIVERY_HEADER),
    )

    decision = require_pull_request_context(classify(event_name, payload))
    if isinstance(decision, NoAction):
        log.info("webhook_ignored", reason=decision.reason)
        return DeliveryResponse(status_code=202, body=NO_ACTION)

    log.info("webhook_accepted", decision=type(decision).__name__, sha=decision.head_sha)
    return AcceptedDelivery(event=event, decision=decision)


async def process_delivery(accepted: AcceptedDelivery, processor: VersionCheckProcessor) -> DeliveryResponse:
    """Run the version check for an accepted delivery."""
    decision = accepted.decision
    if isinstance(decision, NoPullRequestContext):
        result = await processor.process_without_pull_request(accepted.event, decision)
        return DeliveryResponse(status_code=202, body=result.summary)

    result = await processor.process(accepted.event, decision)
    return DeliveryResponse(status_code=200, body=result.summary)


async def handle_delivery(
    envelope: WebhookEnvelope, secret: bytes, processor: VersionCheckProcessor
) -> DeliveryResponse:
    """Produce exactly one response for one webhook delivery."""
    accepted = accept_delivery(envelope, secret)
    if isinstance(accepted, DeliveryResponse):
        return accepted
    return await process_delivery(accepted, processor)


def _decode_payload(body: bytes) -> dict[str, Any] | None:
    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    return payload if isinstance(payload, dict) else None
