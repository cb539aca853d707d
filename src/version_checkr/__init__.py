"""Version Checkr: a GitHub App that checks manifest version bumps on pull requests."""

__version__ = "0.1.0"
