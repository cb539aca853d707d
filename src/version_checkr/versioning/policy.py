"""
Release-type directives embedded in pull request descriptions.

A directive is a line starting with ``#version-checkr:`` (the hyphen may be a
space or absent, ``checker`` is accepted too) followed by ``major``, ``minor``,
``patch`` or, when enabled, ``skip``::

    #version-checkr: minor
    #Version Checker : MAJOR
"""

import re
from enum import Enum


class VersionPolicy(str, Enum):
    """Minimum version increment a change must carry."""

    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"
    SKIP = "skip"


DEFAULT_POLICY = VersionPolicy.PATCH

_DIRECTIVE_MARKER = r"^#version[- ]?checke?r\s?:\s*"

# The keyword must end at a word boundary, unlike a bare prefix match:
# "#version-checkr:majority" selects the default policy, not major.

_RELEASE_DIRECTIVE = re.compile(_DIRECTIVE_MARKER + r"(major|minor|patch)\b", re.IGNORECASE | re.MULTILINE)
_RELEASE_OR_SKIP_DIRECTIVE = re.compile(
    _DIRECTIVE_MARKER + r"(major|minor|patch|skip)\b", re.IGNORECASE | re.MULTILINE
)


def extract_policy(text: str | None, allow_skip: bool = True) -> VersionPolicy:
    """
    Find the version policy selected by a directive in free-form text.

    Only directives at the start of a line count, and the first one with a
    recognised keyword wins. Missing text, or text without a directive, selects
    the default ``patch`` policy.
    """
    if not text:
        return DEFAULT_POLICY

    pattern = _RELEASE_OR_SKIP_DIRECTIVE if allow_skip else _RELEASE_DIRECTIVE
    match = pattern.search(text)
    if match is None:
        return DEFAULT_POLICY
    return VersionPolicy(match.group(1).lower())
