"""
Manifest version policy and comparison.

Pure functions: nothing in this package performs I/O or keeps state between calls.
"""

from version_checkr.versioning.comparator import ComparisonResult, compare, find_version_line
from version_checkr.versioning.policy import VersionPolicy, extract_policy
from version_checkr.versioning.semver import ManifestVersion, increment, parse_version

__all__ = [
    "ComparisonResult",
    "ManifestVersion",
    "VersionPolicy",
    "compare",
    "extract_policy",
    "find_version_line",
    "increment",
    "parse_version",
]
