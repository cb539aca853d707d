"""
Main configuration class that composes all configs.
"""

import os

from dotenv import load_dotenv

from version_checkr.core.config.github_config import GitHubConfig, KeyStorageConfig
from version_checkr.core.config.logging_config import LoggingConfig
from version_checkr.core.config.version_check_config import VersionCheckConfig

# Load environment variables from a .env file
load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class Config:
    """Main configuration class."""

    def __init__(self) -> None:
        self.github = GitHubConfig(
            app_name=os.getenv("APP_NAME_GITHUB", "Version Checkr"),
            app_id=os.getenv("APP_ID_GITHUB", ""),
            private_key=os.getenv("PRIVATE_KEY_BASE64_GITHUB", ""),
            webhook_secret=os.getenv("WEBHOOK_SECRET_GITHUB", ""),
            api_base_url=os.getenv("API_BASE_URL_GITHUB", "https://api.github.com"),
        )

        # PEM stored in S3, as deployed on AWS Lambda
        self.key_storage = KeyStorageConfig(
            bucket=os.getenv("PEM_BUCKET_NAME") or None,
            key=os.getenv("PEM_KEY") or None,
        )

        self.version_check = VersionCheckConfig(
            manifest_path=os.getenv("VERSION_CHECK_MANIFEST_PATH", "package.json"),
            allow_skip=_env_flag("VERSION_CHECK_ALLOW_SKIP", "true"),
            request_timeout=float(os.getenv("VERSION_CHECK_REQUEST_TIMEOUT", "30.0")),
        )

        self.logging = LoggingConfig(
            level=os.getenv("LOG_LEVEL", "INFO"),
            format=os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
            render_json=_env_flag("LOG_JSON", "false"),
        )

        # Development settings
        self.debug = _env_flag("DEBUG", "false")
        self.environment = os.getenv("ENVIRONMENT", "development")

    @property
    def webhook_secret(self) -> bytes:
        """The webhook secret as the key bytes used for HMAC."""
        return self.github.webhook_secret.encode("utf-8")

    def validate(self) -> bool:
        """Validate configuration."""
        errors = []

        if not self.github.app_id:
            errors.append("APP_ID_GITHUB is required")

        if not self.github.webhook_secret:
            errors.append("WEBHOOK_SECRET_GITHUB is required")

        if not self.github.private_key and not self.key_storage.enabled:
            errors.append("PRIVATE_KEY_BASE64_GITHUB or PEM_BUCKET_NAME and PEM_KEY are required")

        if not self.version_check.manifest_path:
            errors.append("VERSION_CHECK_MANIFEST_PATH must not be empty")

        if self.version_check.request_timeout <= 0:
            errors.append("VERSION_CHECK_REQUEST_TIMEOUT must be positive")

        if errors:
            raise ValueError(f"Configuration errors: {', '.join(errors)}")

        return True


# Global config instance
config = Config()
