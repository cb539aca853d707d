"""
Three-component semantic versions.

Pre-release and build metadata are accepted but ignored: ``1.2.3-beta.1+sha``
orders exactly like ``1.2.3``.
"""

import re
from typing import NamedTuple

from version_checkr.core.errors import ManifestParseError
from version_checkr.versioning.policy import VersionPolicy

_NUMERIC = r"(0|[1-9]\d*)"
_VERSION_PATTERN = re.compile(
    rf"^[v=]?{_NUMERIC}\.{_NUMERIC}\.{_NUMERIC}"
    r"(?:-[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?"
    r"(?:\+[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?$"
)


class ManifestVersion(NamedTuple):
    """A (major, minor, patch) triple; tuple ordering is semver precedence."""

    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def parse_version(value: object) -> ManifestVersion:
    """Parse a version string such as ``1.2.3`` or ``v1.2.3-rc.1``."""
    if not isinstance(value, str):
        raise ManifestParseError(f"Version must be a string, got {type(value).__name__}")

    match = _VERSION_PATTERN.match(value.strip())
    if match is None:
        raise ManifestParseError(f"Invalid version '{value}': expected MAJOR.MINOR.PATCH")

    major, minor, patch = (int(part) for part in match.groups())
    return ManifestVersion(major, minor, patch)


def increment(version: ManifestVersion, policy: VersionPolicy) -> ManifestVersion:
    """
    Bump the component named by ``policy`` and reset the lower-order ones.

    ``skip`` has no increment; callers resolve it before asking for one.
    """
    if policy is VersionPolicy.MAJOR:
        return ManifestVersion(version.major + 1, 0, 0)
    if policy is VersionPolicy.MINOR:
        return ManifestVersion(version.major, version.minor + 1, 0)
    if policy is VersionPolicy.PATCH:
        return ManifestVersion(version.major, version.minor, version.patch + 1)
    raise ValueError(f"No increment for policy '{policy.value}'")
