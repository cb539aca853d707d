"""
Version comparison between the base and head revisions of a manifest.
"""

import json
from dataclasses import dataclass
from typing import Any

from version_checkr.core.errors import ManifestParseError
from version_checkr.versioning.policy import VersionPolicy
from version_checkr.versioning.semver import increment, parse_version

VERSION_KEY = '"version"'

SKIPPED_MESSAGE = "Version check skipped"


@dataclass(frozen=True)
class ComparisonResult:
    """Outcome of comparing the head manifest version against the base one."""

    is_satisfied: bool
    policy: VersionPolicy
    old_version: str | None = None
    new_version: str | None = None
    line_number: int | None = None

    @property
    def skipped(self) -> bool:
        return self.policy is VersionPolicy.SKIP

    @property
    def message(self) -> str:
        if self.skipped:
            return SKIPPED_MESSAGE
        if self.is_satisfied:
            return f"Version {self.new_version} will replace {self.old_version}"
        return f"Version {self.new_version} requires a {self.policy.value} version number greater than {self.old_version}"


def compare(old_manifest: str, new_manifest: str, policy: VersionPolicy) -> ComparisonResult:
    """
    Check that the head manifest raises the version by at least ``policy``.

    ``old_manifest`` is the base revision and ``new_manifest`` the head revision;
    the head may legitimately carry a lower or equal version, which simply fails.

    Raises:
        ManifestParseError: If either manifest lacks a well-formed ``version``.
    """
    if policy is VersionPolicy.SKIP:
        return ComparisonResult(is_satisfied=True, policy=policy)

    old_raw = _read_version(old_manifest, "base")
    new_raw = _read_version(new_manifest, "head")
    line_number = find_version_line(new_manifest)

    required = increment(parse_version(old_raw), policy)
    is_satisfied = parse_version(new_raw) >= required

    return ComparisonResult(
        is_satisfied=is_satisfied,
        policy=policy,
        old_version=old_raw,
        new_version=new_raw,
        line_number=line_number,
    )


def find_version_line(manifest: str) -> int:
    """Return the 1-based line of the first ``"version"`` key in ``manifest``."""
    index = manifest.find(VERSION_KEY)
    if index == -1:
        raise ManifestParseError('Manifest has no "version" key')
    return manifest.count("\n", 0, index) + 1


def _read_version(manifest: str, revision: str) -> str:
    try:
        data: Any = json.loads(manifest)
    except json.JSONDecodeError as e:
        raise ManifestParseError(f"{revision} manifest is not valid JSON: {e}") from e

    if not isinstance(data, dict) or "version" not in data:
        raise ManifestParseError(f'{revision} manifest has no "version" field')

    version = data["version"]
    # Validates the format; the raw string is kept for messages
    parse_version(version)
    return version
