from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from version_checkr.core.config import config
from version_checkr.event_processors.version_check import VersionCheckProcessor
from version_checkr.webhooks.delivery import handle_delivery
from version_checkr.webhooks.models import WebhookEnvelope

router = APIRouter()


# Dependency providers. The processor is built once at startup and kept on app.state;
# tests override both.
def get_processor(request: Request) -> VersionCheckProcessor:
    """Returns the shared VersionCheckProcessor instance."""
    return request.app.state.processor


def get_webhook_secret() -> bytes:
    return config.webhook_secret


@router.post("/github", summary="Endpoint for GitHub App webhooks", response_class=PlainTextResponse)
async def github_webhook_endpoint(
    request: Request,
    processor: VersionCheckProcessor = Depends(get_processor),
    secret: bytes = Depends(get_webhook_secret),
) -> PlainTextResponse:
    """
    This endpoint receives pull request and check events from the GitHub App.

    - It verifies the `X-Hub-Signature` of the raw body.
    - It classifies the event to decide whether the version must be checked.
    - It runs the check and answers with its verdict as plain text.
    """
    envelope = WebhookEnvelope(body=await request.body(), headers=request.headers)
    response = await handle_delivery(envelope, secret=secret, processor=processor)
    return PlainTextResponse(response.body, status_code=response.status_code)
