"""
GitHub App private key retrieval.

The key comes from an S3 object when a bucket is configured, otherwise from the
base64-encoded PEM in the environment. It is loaded once per process and handed
to ``GitHubClient`` explicitly.
"""

import base64
import binascii
from typing import Any

import boto3
import structlog
from botocore.exceptions import BotoCoreError, ClientError

from version_checkr.core.config.github_config import GitHubConfig, KeyStorageConfig
from version_checkr.core.errors import PrivateKeyError

logger = structlog.get_logger()


def load_private_key(github: GitHubConfig, key_storage: KeyStorageConfig, s3_client: Any = None) -> str:
    """Return the PEM text of the GitHub App private key."""
    if key_storage.enabled:
        return fetch_private_key(key_storage.bucket, key_storage.key, s3_client=s3_client)
    if github.private_key:
        return decode_private_key(github.private_key)
    raise PrivateKeyError("No GitHub App private key configured")


def fetch_private_key(bucket: str, key: str, s3_client: Any = None) -> str:
    """
    Read the PEM from ``s3://bucket/key``.

    Args:
        bucket: S3 bucket name
        key: Object key of the PEM file
        s3_client: Optional boto3 S3 client (for testing)
    """
    client = s3_client or boto3.client("s3")
    try:
        response = client.get_object(Bucket=bucket, Key=key)
        pem = response["Body"].read()
    except (ClientError, BotoCoreError) as e:
        logger.error("private_key_fetch_failed", bucket=bucket, key=key, error=str(e))
        raise PrivateKeyError(f"Failed to read private key from s3://{bucket}/{key}") from e

    logger.info("private_key_fetched", bucket=bucket, key=key)
    return pem.decode("utf-8") if isinstance(pem, bytes) else pem


def decode_private_key(encoded: str) -> str:
    """Decode a base64-encoded PEM private key."""
    try:
        return base64.b64decode(encoded, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise PrivateKeyError("Invalid private key format. Expected base64-encoded PEM key.") from e
