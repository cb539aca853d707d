"""
Boundary parse step from raw JSON payloads to ``ParsedEvent`` variants.

The variant is chosen by the event-type header alone; the payload then either
fits that variant's schema or the event becomes ``OtherEvent``.
"""

from collections.abc import Callable
from typing import Any

import structlog
from pydantic import ValidationError

from version_checkr.core.models import EventType
from version_checkr.webhooks.models import (
    CheckRunEvent,
    CheckRunWebhook,
    CheckSuitePayload,
    CheckSuiteEvent,
    CheckSuiteWebhook,
    OtherEvent,
    ParsedEvent,
    PullRequestEvent,
    PullRequestLink,
    PullRequestWebhook,
)

logger = structlog.get_logger()


def _links(check_suite: CheckSuitePayload) -> tuple[PullRequestLink, ...]:
    return tuple(PullRequestLink(base_ref=pr.base.ref, number=pr.number) for pr in check_suite.pull_requests or [])


def _parse_pull_request(payload: Any) -> ParsedEvent:
    webhook = PullRequestWebhook.model_validate(payload)
    pr = webhook.pull_request
    return PullRequestEvent(
        action=webhook.action,
        head_sha=pr.head.sha,
        base_ref=pr.base.ref,
        number=pr.number,
        # No description is an empty body, not an unknown one
        body_text=pr.body or "",
    )


def _parse_check_suite(payload: Any) -> ParsedEvent:
    webhook = CheckSuiteWebhook.model_validate(payload)
    return CheckSuiteEvent(
        action=webhook.action,
        head_sha=webhook.check_suite.head_sha,
        pull_requests=_links(webhook.check_suite),
    )


def _parse_check_run(payload: Any) -> ParsedEvent:
    webhook = CheckRunWebhook.model_validate(payload)
    check_suite = webhook.check_run.check_suite
    return CheckRunEvent(
        action=webhook.action,
        head_sha=check_suite.head_sha,
        pull_requests=_links(check_suite),
    )


_PARSERS: dict[EventType, Callable[[Any], ParsedEvent]] = {
    EventType.PULL_REQUEST: _parse_pull_request,
    EventType.CHECK_SUITE: _parse_check_suite,
    EventType.CHECK_RUN: _parse_check_run,
}


def parse_event(event_name: str | None, payload: Any) -> ParsedEvent:
    """Parse a decoded webhook body into the variant named by ``event_name``."""
    try:
        event_type = EventType(event_name)
    except ValueError:
        return OtherEvent()

    try:
        return _PARSERS[event_type](payload)
    except ValidationError as e:
        logger.info("webhook_payload_unrecognized", event_type=event_type.value, errors=e.error_count())
        return OtherEvent()
