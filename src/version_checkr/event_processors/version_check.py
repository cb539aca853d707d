import asyncio
import time
from collections.abc import Awaitable
from typing import TypeVar

import structlog

from version_checkr.core.config.version_check_config import VersionCheckConfig
from version_checkr.core.errors import InvalidPayloadError
from version_checkr.core.models import WebhookEvent
from version_checkr.core.utils import execute_with_timeout, log_operation
from version_checkr.event_processors.base import ProcessingResult, ProcessingState
from version_checkr.integrations.github import CheckRunManager, GitHubClient
from version_checkr.presentation.github_formatter import NO_PULL_REQUEST_SUMMARY
from version_checkr.versioning import ComparisonResult, VersionPolicy, compare, extract_policy
from version_checkr.webhooks.models import NoPullRequestContext, Process

logger = structlog.get_logger()

T = TypeVar("T")


class VersionCheckProcessor:
    """
    Runs the version check for one routed delivery.

    Sequences the GitHub calls (pull request body, both manifests, check run)
    around the pure policy and comparison functions. Each external call is
    bounded by ``request_timeout``; any failure propagates and nothing is
    reported for that delivery.
    """

    def __init__(
        self,
        github_client: GitHubClient,
        settings: VersionCheckConfig | None = None,
        check_name: str = "Version Checkr",
    ) -> None:
        self.github_client = github_client
        self.settings = settings or VersionCheckConfig()
        self.check_runs = CheckRunManager(github_client, check_name=check_name)

    async def process(self, event: WebhookEvent, decision: Process) -> ProcessingResult:
        """Compare the manifest at the base ref and the head commit, then report it."""
        start_time = time.time()
        repo, installation_id = self._require_context(event)
        if decision.base_ref is None:
            raise InvalidPayloadError(f"Commit {decision.head_sha} has no pull request base ref")
        manifest_path = self.settings.manifest_path

        async with log_operation("version_check", repo=repo, sha=decision.head_sha, pr_number=decision.number):
            body = await self._resolve_body(repo, installation_id, decision)
            policy = extract_policy(body, allow_skip=self.settings.allow_skip)

            if policy is VersionPolicy.SKIP:
                result = ComparisonResult(is_satisfied=True, policy=policy)
            else:
                base_manifest, head_manifest = await self._fetch_manifests(
                    repo, installation_id, decision.base_ref, decision.head_sha
                )
                result = compare(base_manifest, head_manifest, policy)

            report = await self._bounded(
                self.check_runs.report_comparison(repo, decision.head_sha, installation_id, result, manifest_path)
            )

        logger.info(
            "version_check_completed",
            repo=repo,
            sha=decision.head_sha,
            policy=policy.value,
            satisfied=result.is_satisfied,
        )
        return ProcessingResult(
            state=ProcessingState.PASS if result.is_satisfied else ProcessingState.FAIL,
            summary=result.message,
            check_run_id=report.id,
            processing_time_ms=int((time.time() - start_time) * 1000),
        )

    async def process_without_pull_request(
        self, event: WebhookEvent, decision: NoPullRequestContext
    ) -> ProcessingResult:
        """Report a neutral check on a commit that is not part of a pull request."""
        start_time = time.time()
        repo, installation_id = self._require_context(event)
        report = await self._bounded(self.check_runs.report_no_pull_request(repo, decision.head_sha, installation_id))
        return ProcessingResult(
            state=ProcessingState.NEUTRAL,
            summary=NO_PULL_REQUEST_SUMMARY,
            check_run_id=report.id,
            processing_time_ms=int((time.time() - start_time) * 1000),
        )

    async def _resolve_body(self, repo: str, installation_id: int, decision: Process) -> str | None:
        if decision.body_text is not None or decision.number is None:
            return decision.body_text
        # Check events do not carry the description; read it from the pull request
        pull_request = await self._bounded(
            self.github_client.get_pull_request(repo, decision.number, installation_id)
        )
        body = pull_request.get("body")
        return body if isinstance(body, str) else None

    async def _fetch_manifests(self, repo: str, installation_id: int, base_ref: str, head_sha: str) -> list[str]:
        """Fetch the base and head manifests concurrently. If one fetch fails, the other is cancelled."""
        manifest_path = self.settings.manifest_path
        tasks = [
            asyncio.ensure_future(
                self._bounded(self.github_client.get_file_content(repo, manifest_path, ref, installation_id))
            )
            for ref in (base_ref, head_sha)
        ]
        try:
            return await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def _bounded(self, awaitable: Awaitable[T]) -> T:
        return await execute_with_timeout(awaitable, timeout=self.settings.request_timeout)

    @staticmethod
    def _require_context(event: WebhookEvent) -> tuple[str, int]:
        repo = event.repo_full_name
        installation_id = event.installation_id
        if not repo:
            raise InvalidPayloadError("Webhook payload has no repository")
        if not isinstance(installation_id, int):
            raise InvalidPayloadError("Webhook payload has no installation id")
        return repo, installation_id
