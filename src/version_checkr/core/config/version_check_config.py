"""
Version check configuration.
"""

from dataclasses import dataclass


@dataclass
class VersionCheckConfig:
    """Settings for the manifest version check."""

    manifest_path: str = "package.json"
    allow_skip: bool = True
    request_timeout: float = 30.0  # seconds, per external call
