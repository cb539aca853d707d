from dataclasses import dataclass
from typing import Any

import structlog

from version_checkr.integrations.github.api import GitHubClient
from version_checkr.presentation import github_formatter
from version_checkr.versioning import ComparisonResult

logger = structlog.get_logger()


@dataclass(frozen=True)
class CheckRunReport:
    """What GitHub answered for a published check run."""

    id: int | None


class CheckRunManager:
    """
    Manager for publishing version check results as GitHub Check Runs.

    Failures from the GitHub client propagate to the caller.
    """

    def __init__(self, github_client: GitHubClient, check_name: str = "Version Checkr"):
        self.github_client = github_client
        self.check_name = check_name

    async def report_comparison(
        self,
        repo: str,
        sha: str,
        installation_id: int,
        result: ComparisonResult,
        manifest_path: str,
    ) -> CheckRunReport:
        """
        Create a check run with a comparison verdict.

        Args:
            repo: Repository full name (owner/repo)
            sha: Commit SHA to associate the check run with
            installation_id: GitHub App installation ID
            result: The version comparison to report
            manifest_path: Manifest the failure annotation points at
        """
        output = github_formatter.format_comparison_output(result, manifest_path)
        return await self._publish(
            repo, sha, installation_id, github_formatter.check_run_conclusion(result), output
        )

    async def report_no_pull_request(self, repo: str, sha: str, installation_id: int) -> CheckRunReport:
        """Create a neutral check run for a commit outside any pull request."""
        output = github_formatter.format_no_pull_request_output()
        return await self._publish(repo, sha, installation_id, "neutral", output)

    async def _publish(
        self, repo: str, sha: str, installation_id: int, conclusion: str, output: dict[str, Any]
    ) -> CheckRunReport:
        response = await self.github_client.create_check_run(
            repo_full_name=repo,
            sha=sha,
            name=self.check_name,
            conclusion=conclusion,
            output=output,
            installation_id=installation_id,
        )
        logger.info("check_run_reported", repo=repo, sha=sha, conclusion=conclusion)
        return CheckRunReport(id=response.get("id"))
