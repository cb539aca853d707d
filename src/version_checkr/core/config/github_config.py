"""
GitHub configuration.
"""

from dataclasses import dataclass


@dataclass
class GitHubConfig:
    """GitHub App configuration."""

    app_id: str
    webhook_secret: str
    app_name: str = "Version Checkr"
    private_key: str = ""
    api_base_url: str = "https://api.github.com"


@dataclass
class KeyStorageConfig:
    """Blob store location of the GitHub App private key."""

    bucket: str | None = None
    key: str | None = None

    @property
    def enabled(self) -> bool:
        return bool(self.bucket and self.key)
