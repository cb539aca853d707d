"""
GitHub API adapter.

This package provides integrations for GitHub API interactions.
"""

from version_checkr.integrations.github.api import GitHubClient
from version_checkr.integrations.github.check_runs import CheckRunManager, CheckRunReport

__all__ = [
    "CheckRunManager",
    "CheckRunReport",
    "GitHubClient",
]
