import hashlib
import hmac

import structlog

logger = structlog.get_logger()

SIGNATURE_PREFIX = "sha1="


def compute_signature(raw_body: bytes, secret: bytes) -> str:
    """Return the ``X-Hub-Signature`` value GitHub sends for ``raw_body``."""
    mac = hmac.new(secret, msg=raw_body, digestmod=hashlib.sha1)
    return f"{SIGNATURE_PREFIX}{mac.hexdigest()}"


def verify_signature(raw_body: bytes, signature_header: str | None, secret: bytes) -> bool:
    """
    Verify the GitHub webhook signature of a raw request body.

    The ``X-Hub-Signature`` header carries ``sha1=<hex HMAC of the body>``.
    The check fails closed: a missing or malformed header is simply a mismatch.
    The digests are compared as bytes with ``hmac.compare_digest``.

    Returns:
        True if the signature matches the body under ``secret``.
    """
    if not signature_header or not signature_header.startswith(SIGNATURE_PREFIX):
        logger.warning("webhook_signature_malformed")
        return False

    expected = compute_signature(raw_body, secret).encode("ascii")
    received = signature_header.encode("utf-8", errors="replace")

    if not hmac.compare_digest(expected, received):
        logger.warning("webhook_signature_invalid")
        return False

    logger.debug("webhook_signature_verified")
    return True
