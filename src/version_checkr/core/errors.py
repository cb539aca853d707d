"""
Core error classes for Version Checkr.
"""


class ManifestParseError(ValueError):
    """Raised when a manifest has no usable `version` field."""

    pass


class InvalidPayloadError(ValueError):
    """Raised when an actionable event lacks the repository or installation it belongs to."""

    pass


class PrivateKeyError(Exception):
    """Raised when the GitHub App private key cannot be loaded."""

    pass


class GitHubAPIError(Exception):
    """Raised when the GitHub REST API answers with a non-success status."""

    def __init__(self, message: str, status_code: int | None = None, response_body: str | None = None) -> None:
        self.status_code = status_code
        self.response_body = response_body
        super().__init__(message)


class GitHubAuthError(GitHubAPIError):
    """Raised when an installation access token cannot be obtained."""

    pass


class GitHubResourceNotFoundError(GitHubAPIError):
    """Raised when a specific GitHub resource (ref, path, pull request) is not found."""

    pass
