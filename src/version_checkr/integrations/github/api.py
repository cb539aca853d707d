import base64
import time
from typing import Any

import httpx
import jwt
import structlog
from cachetools import TTLCache

from version_checkr.core.errors import GitHubAPIError, GitHubAuthError, GitHubResourceNotFoundError

logger = structlog.get_logger()

ACCEPT_JSON = "application/vnd.github+json"
API_VERSION = "2022-11-28"


class GitHubClient:
    """
    A client for the parts of the GitHub REST API the version check uses.

    This client handles the authentication flow for a GitHub App, generating a
    JWT and exchanging it for an installation access token. Tokens are cached
    to avoid an exchange on every call. Every failed call raises; nothing is
    retried here.
    """

    def __init__(
        self,
        app_id: str,
        private_key: str,
        api_base_url: str = "https://api.github.com",
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ):
        self._app_id = app_id
        self._private_key = private_key
        self._api_base_url = api_base_url.rstrip("/")
        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))
        # Cache for installation tokens (TTL: 50 minutes, GitHub tokens expire in 60)
        self._token_cache: TTLCache = TTLCache(maxsize=100, ttl=50 * 60)

    async def get_installation_access_token(self, installation_id: int) -> str:
        """
        Gets an access token for a specific installation of the GitHub App.
        Caches the token to avoid regenerating it for every request.
        """
        if installation_id in self._token_cache:
            logger.debug("installation_token_cache_hit", installation_id=installation_id)
            return self._token_cache[installation_id]

        headers = {
            "Authorization": f"Bearer {self._generate_jwt()}",
            "Accept": ACCEPT_JSON,
            "X-GitHub-Api-Version": API_VERSION,
        }
        url = f"{self._api_base_url}/app/installations/{installation_id}/access_tokens"
        response = await self._http_client.post(url, headers=headers)
        if response.status_code != 201:
            logger.error(
                "installation_token_failed",
                installation_id=installation_id,
                status_code=response.status_code,
                response_body=response.text,
            )
            raise GitHubAuthError(
                f"Failed to get installation access token for installation {installation_id}",
                status_code=response.status_code,
                response_body=response.text,
            )

        token = response.json()["token"]
        self._token_cache[installation_id] = token
        logger.info("installation_token_generated", installation_id=installation_id)
        return token

    async def get_file_content(self, repo_full_name: str, file_path: str, ref: str, installation_id: int) -> str:
        """
        Fetches the content of a file at ``ref`` and decodes it to text.

        Raises:
            GitHubResourceNotFoundError: If the ref or the path does not exist.
        """
        url = f"{self._api_base_url}/repos/{repo_full_name}/contents/{file_path}"
        response = await self._request("GET", url, installation_id, params={"ref": ref})
        data = response.json()
        if not isinstance(data, dict) or "content" not in data:
            raise GitHubAPIError(f"'{file_path}' at {ref} in {repo_full_name} is not a file")

        content = base64.b64decode(data["content"]).decode("utf-8")
        logger.info("file_content_fetched", repo=repo_full_name, path=file_path, ref=ref)
        return content

    async def get_pull_request(self, repo_full_name: str, pr_number: int, installation_id: int) -> dict[str, Any]:
        """Get a pull request."""
        url = f"{self._api_base_url}/repos/{repo_full_name}/pulls/{pr_number}"
        response = await self._request("GET", url, installation_id)
        return response.json()

    async def create_check_run(
        self,
        repo_full_name: str,
        sha: str,
        name: str,
        conclusion: str,
        output: dict[str, Any],
        installation_id: int,
    ) -> dict[str, Any]:
        """Create a completed check run on ``sha``."""
        url = f"{self._api_base_url}/repos/{repo_full_name}/check-runs"
        data = {"name": name, "head_sha": sha, "status": "completed", "conclusion": conclusion, "output": output}
        response = await self._request("POST", url, installation_id, json=data)
        result = response.json()
        logger.info("check_run_created", repo=repo_full_name, sha=sha, check_run_id=result.get("id"))
        return result

    async def close(self) -> None:
        """Closes the HTTP client if this instance created it."""
        if self._owns_http_client:
            await self._http_client.aclose()

    async def _request(self, method: str, url: str, installation_id: int, **kwargs: Any) -> httpx.Response:
        token = await self.get_installation_access_token(installation_id)
        headers = {
            "Authorization": f"Bearer {token}",
            "Accept": ACCEPT_JSON,
            "X-GitHub-Api-Version": API_VERSION,
        }
        response = await self._http_client.request(method, url, headers=headers, **kwargs)
        if response.status_code == 404:
            raise GitHubResourceNotFoundError(f"{method} {url} not found", status_code=404, response_body=response.text)
        if response.is_error:
            logger.error("github_api_error", method=method, url=url, status_code=response.status_code)
            raise GitHubAPIError(
                f"GitHub API error {response.status_code} for {method} {url}",
                status_code=response.status_code,
                response_body=response.text,
            )
        return response

    def _generate_jwt(self) -> str:
        """Generates a JSON Web Token (JWT) to authenticate as the GitHub App."""
        now = int(time.time())
        payload = {
            "iat": now - 60,  # allow for clock drift
            "exp": now + (9 * 60),
            "iss": self._app_id,
        }
        return jwt.encode(payload, self._private_key, algorithm="RS256")
