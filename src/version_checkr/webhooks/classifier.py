"""
Routing of webhook events to version-check work.

| Event          | Actions                | Decision                                      |
|----------------|------------------------|-----------------------------------------------|
| pull_request   | opened, reopened       | Process from the pull request                 |
| check_suite    | requested, rerequested | Process from the suite's first pull request   |
| check_run      | rerequested            | Process from the run's suite, as above        |
| anything else  |                        | NoAction                                      |

A check event whose pull request list is empty still yields ``Process``, with no
``base_ref``: the commit is not part of an open pull request.
"""

from typing import Any

from version_checkr.webhooks.models import (
    CheckRunEvent,
    CheckSuiteEvent,
    NoAction,
    NoPullRequestContext,
    ParsedEvent,
    Process,
    PullRequestEvent,
    PullRequestLink,
    RoutingDecision,
)
from version_checkr.webhooks.parser import parse_event

PULL_REQUEST_ACTIONS = frozenset({"opened", "reopened"})
CHECK_SUITE_ACTIONS = frozenset({"requested", "rerequested"})
CHECK_RUN_ACTIONS = frozenset({"rerequested"})


def classify(event_name: str | None, payload: Any) -> RoutingDecision:
    """Decide what a webhook delivery asks of the version check. Never raises."""
    return classify_event(parse_event(event_name, payload))


def classify_event(event: ParsedEvent) -> RoutingDecision:
    if isinstance(event, PullRequestEvent):
        if event.action not in PULL_REQUEST_ACTIONS:
            return NoAction(reason=f"pull_request action '{event.action}' is not checked")
        return Process(
            head_sha=event.head_sha,
            base_ref=event.base_ref,
            number=event.number,
            body_text=event.body_text,
        )

    if isinstance(event, CheckSuiteEvent):
        if event.action not in CHECK_SUITE_ACTIONS:
            return NoAction(reason=f"check_suite action '{event.action}' is not checked")
        return _process_commit(event.head_sha, event.pull_requests)

    if isinstance(event, CheckRunEvent):
        if event.action not in CHECK_RUN_ACTIONS:
            return NoAction(reason=f"check_run action '{event.action}' is not checked")
        return _process_commit(event.head_sha, event.pull_requests)

    return NoAction(reason="event is not handled")


def require_pull_request_context(decision: RoutingDecision) -> RoutingDecision:
    """Turn a ``Process`` without a base ref into ``NoPullRequestContext``."""
    if isinstance(decision, Process) and not decision.has_pull_request:
        return NoPullRequestContext(head_sha=decision.head_sha)
    return decision


def _process_commit(head_sha: str, pull_requests: tuple[PullRequestLink, ...]) -> Process:
    if not pull_requests:
        return Process(head_sha=head_sha)
    # A commit may head several pull requests; the first listed one is checked
    first = pull_requests[0]
    return Process(head_sha=head_sha, base_ref=first.base_ref, number=first.number)
