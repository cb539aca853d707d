from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock

import pytest
import structlog
from structlog.testing import capture_logs

from version_checkr.event_processors.base import ProcessingResult, ProcessingState
from version_checkr.event_processors.version_check import VersionCheckProcessor
from version_checkr.webhooks import delivery
from version_checkr.webhooks.delivery import AcceptedDelivery, accept_delivery, handle_delivery
from version_checkr.webhooks.models import DeliveryResponse, NoPullRequestContext, Process, WebhookEnvelope

SignedDelivery = Callable[..., tuple[bytes, dict[str, str]]]


@pytest.fixture
def processor() -> AsyncMock:
    mock = AsyncMock(spec=VersionCheckProcessor)
    mock.process.return_value = ProcessingResult(
        state=ProcessingState.PASS, summary="Version 2.0.0 will replace 1.0.0", check_run_id=1, processing_time_ms=3
    )
    mock.process_without_pull_request.return_value = ProcessingResult(
        state=ProcessingState.NEUTRAL,
        summary="Commit is not part of a pull request, so version was not checked",
        check_run_id=2,
        processing_time_ms=1,
    )
    return mock


@pytest.fixture
def delivery_logs(monkeypatch):
    """Capture what the delivery pipeline logs."""
    with capture_logs() as logs:
        # A fresh proxy binds to the capturing configuration on first use
        monkeypatch.setattr(delivery, "logger", structlog.get_logger())
        yield logs


def envelope(body: bytes, headers: dict[str, str]) -> WebhookEnvelope:
    return WebhookEnvelope.from_raw(body, headers)


class TestAcceptDelivery:
    def test_missing_event_header(self, signed_delivery: SignedDelivery, webhook_secret: bytes) -> None:
        body, headers = signed_delivery("pull_request", {"action": "opened"})
        del headers["X-GitHub-Event"]

        response = accept_delivery(envelope(body, headers), webhook_secret)

        assert response == DeliveryResponse(status_code=400, body="Missing X-GitHub-Event")

    def test_missing_signature_header(self, signed_delivery: SignedDelivery, webhook_secret: bytes) -> None:
        body, headers = signed_delivery("pull_request", {"action": "opened"})
        del headers["X-Hub-Signature"]

        response = accept_delivery(envelope(body, headers), webhook_secret)

        assert response == DeliveryResponse(status_code=400, body="Missing X-Hub-Signature")

    def test_event_header_is_checked_before_signature(self, webhook_secret: bytes) -> None:
        response = accept_delivery(envelope(b"{}", {}), webhook_secret)

        assert response == DeliveryResponse(status_code=400, body="Missing X-GitHub-Event")

    def test_invalid_signature(self, signed_delivery: SignedDelivery, webhook_secret: bytes) -> None:
        body, headers = signed_delivery("pull_request", {"action": "opened"}, secret=b"not_the_secret")

        response = accept_delivery(envelope(body, headers), webhook_secret)

        assert response == DeliveryResponse(status_code=400, body="Invalid X-Hub-Signature")

    def test_tampered_body(self, signed_delivery: SignedDelivery, webhook_secret: bytes) -> None:
        _, headers = signed_delivery("pull_request", {"foo": "bar"})

        response = accept_delivery(envelope(b'{"bar": "foo"}', headers), webhook_secret)

        assert response == DeliveryResponse(status_code=400, body="Invalid X-Hub-Signature")

    def test_headers_are_case_insensitive(self, signed_delivery: SignedDelivery, webhook_secret: bytes) -> None:
        body, headers = signed_delivery("release", {"action": "published"})
        lowered = {key.lower(): value for key, value in headers.items()}

        response = accept_delivery(envelope(body, lowered), webhook_secret)

        assert response == DeliveryResponse(status_code=202, body="No action to take")

    def test_signed_body_that_is_not_a_json_object(self, webhook_secret: bytes) -> None:
        from version_checkr.webhooks.auth import compute_signature

        body = b"[1, 2, 3]"
        headers = {"X-GitHub-Event": "pull_request", "X-Hub-Signature": compute_signature(body, webhook_secret)}

        response = accept_delivery(envelope(body, headers), webhook_secret)

        assert response == DeliveryResponse(status_code=400, body="Invalid JSON payload")

    @pytest.mark.parametrize(
        ("event", "action"),
        [("pull_request", "create"), ("pull_request", "fork"), ("release", "published"), ("organization", "member_added")],
    )
    def test_ignored_events(
        self, signed_delivery: SignedDelivery, webhook_secret: bytes, event: str, action: str
    ) -> None:
        body, headers = signed_delivery(event, {"action": action})

        response = accept_delivery(envelope(body, headers), webhook_secret)

        assert response == DeliveryResponse(status_code=202, body="No action to take")

    def test_valid_signature_on_unrelated_payload_is_not_rejected(
        self, signed_delivery: SignedDelivery, webhook_secret: bytes
    ) -> None:
        body, headers = signed_delivery("event", {"foo": "bar"})

        response = accept_delivery(envelope(body, headers), webhook_secret)

        assert isinstance(response, DeliveryResponse)
        assert response.status_code != 400

    def test_pull_request_is_accepted(
        self,
        signed_delivery: SignedDelivery,
        webhook_secret: bytes,
        pull_request_payload: Callable[..., dict[str, Any]],
    ) -> None:
        body, headers = signed_delivery("pull_request", pull_request_payload())

        accepted = accept_delivery(envelope(body, headers), webhook_secret)

        assert isinstance(accepted, AcceptedDelivery)
        assert isinstance(accepted.decision, Process)
        assert accepted.event.repo_full_name == "bob/repo"
        assert accepted.event.installation_id == 1

    def test_commit_outside_pull_request_is_accepted_as_no_context(
        self,
        signed_delivery: SignedDelivery,
        webhook_secret: bytes,
        check_suite_payload: Callable[..., dict[str, Any]],
    ) -> None:
        body, headers = signed_delivery("check_suite", check_suite_payload())

        accepted = accept_delivery(envelope(body, headers), webhook_secret)

        assert isinstance(accepted, AcceptedDelivery)
        assert isinstance(accepted.decision, NoPullRequestContext)


class TestHandleDelivery:
    @pytest.mark.asyncio
    async def test_processed_pull_request(
        self,
        processor: AsyncMock,
        signed_delivery: SignedDelivery,
        webhook_secret: bytes,
        pull_request_payload: Callable[..., dict[str, Any]],
    ) -> None:
        body, headers = signed_delivery("pull_request", pull_request_payload(body="#version-checkr:major"))

        response = await handle_delivery(envelope(body, headers), secret=webhook_secret, processor=processor)

        assert response == DeliveryResponse(status_code=200, body="Version 2.0.0 will replace 1.0.0")
        processor.process.assert_awaited_once()
        _, decision = processor.process.call_args.args
        assert decision.body_text == "#version-checkr:major"

    @pytest.mark.asyncio
    async def test_commit_outside_pull_request(
        self,
        processor: AsyncMock,
        signed_delivery: SignedDelivery,
        webhook_secret: bytes,
        check_suite_payload: Callable[..., dict[str, Any]],
    ) -> None:
        body, headers = signed_delivery("check_suite", check_suite_payload())

        response = await handle_delivery(envelope(body, headers), secret=webhook_secret, processor=processor)

        assert response == DeliveryResponse(
            status_code=202, body="Commit is not part of a pull request, so version was not checked"
        )
        processor.process.assert_not_awaited()
        processor.process_without_pull_request.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_rejections_never_reach_the_processor(
        self, processor: AsyncMock, signed_delivery: SignedDelivery, webhook_secret: bytes
    ) -> None:
        body, headers = signed_delivery("pull_request", {"action": "opened"}, secret=b"wrong")

        response = await handle_delivery(envelope(body, headers), secret=webhook_secret, processor=processor)

        assert response.status_code == 400
        processor.process.assert_not_awaited()
        processor.process_without_pull_request.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_processing_errors_propagate(
        self,
        processor: AsyncMock,
        signed_delivery: SignedDelivery,
        webhook_secret: bytes,
        pull_request_payload: Callable[..., dict[str, Any]],
    ) -> None:
        processor.process.side_effect = RuntimeError("GitHub is down")
        body, headers = signed_delivery("pull_request", pull_request_payload())

        with pytest.raises(RuntimeError, match="GitHub is down"):
            await handle_delivery(envelope(body, headers), secret=webhook_secret, processor=processor)


class TestDeliveryLogging:
    def test_rejection_keeps_event_type(
        self, delivery_logs: list[dict[str, Any]], signed_delivery: SignedDelivery, webhook_secret: bytes
    ) -> None:
        body, headers = signed_delivery("pull_request", {"action": "opened"}, secret=b"wrong")

        accept_delivery(envelope(body, headers), webhook_secret)

        (rejected,) = [entry for entry in delivery_logs if entry["event"] == "webhook_rejected"]
        assert rejected["github_event"] == "pull_request"
        assert rejected["reason"] == "Invalid X-Hub-Signature"

    def test_ignored_delivery_keeps_event_type(
        self, delivery_logs: list[dict[str, Any]], signed_delivery: SignedDelivery, webhook_secret: bytes
    ) -> None:
        body, headers = signed_delivery("release", {"action": "published"})

        accept_delivery(envelope(body, headers), webhook_secret)

        (ignored,) = [entry for entry in delivery_logs if entry["event"] == "webhook_ignored"]
        assert ignored["github_event"] == "release"
        assert ignored["action"] == "published"

    def test_accepted_delivery_keeps_event_type(
        self,
        delivery_logs: list[dict[str, Any]],
        signed_delivery: SignedDelivery,
        webhook_secret: bytes,
        pull_request_payload: Callable[..., dict[str, Any]],
    ) -> None:
        body, headers = signed_delivery("pull_request", pull_request_payload())

        accept_delivery(envelope(body, headers), webhook_secret)

        (accepted,) = [entry for entry in delivery_logs if entry["event"] == "webhook_accepted"]
        assert accepted["github_event"] == "pull_request"
        assert accepted["repo"] == "bob/repo"
        assert accepted["delivery_id"] == "72d3162e-cc78-11e3-81ab-4c9367dc0958"
