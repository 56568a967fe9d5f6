"""
GitHub client component.

Issues the four pull request API calls the merge pipeline needs:
fetch a pull request, merge it, delete a branch ref and post a comment.
Every call is authenticated with Basic auth and the configured preview
media type, timed, and logged.
"""

from typing import Any, Dict, Optional

import httpx

from keeper.config import Settings
from keeper.errors import KeeperError
from keeper.models.pull_request import MergeRequest, MergeResult, PullRequest
from keeper.utils.logging import get_logger
from keeper.utils.metrics import PipelineMetrics, track_api_call

logger = get_logger(__name__)


class GitHubClientError(KeeperError):
    """A single GitHub API call failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class TransportError(GitHubClientError):
    """The request never produced an HTTP response (network, timeout)."""
    pass


class GitHubClient:
    """
    Thin async wrapper around the GitHub REST endpoints used for merging.

    The client holds no per-pipeline state and is shared by every pipeline
    in the process.
    """

    def __init__(
        self,
        settings: Settings,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the GitHub client.

        Args:
            settings: Application settings carrying credentials and API URLs
            http_client: Preconfigured httpx client (tests inject one with a
                mock transport). Created from settings when omitted.
        """
        self._api_url = settings.github_api_url.rstrip("/")
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            auth=httpx.BasicAuth(settings.github_user, settings.github_token),
            headers=build_headers(settings),
            timeout=settings.http_timeout_seconds,
        )

    async def close(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_http_client:
            await self._http.aclose()

    async def get_pull_request(
        self,
        pr_url: str,
        metrics: Optional[PipelineMetrics] = None,
    ) -> PullRequest:
        """
        Fetch the current state of a pull request.

        Args:
            pr_url: Pull request API URL
            metrics: Pipeline metrics collector (optional)

        Returns:
            Freshly fetched pull request, including mergeable_state
        """
        response = await self._request("get_pull_request", "GET", pr_url, metrics=metrics)
        return PullRequest.model_validate(response.json())

    async def merge_pull_request(
        self,
        pr_url: str,
        merge_request: MergeRequest,
        metrics: Optional[PipelineMetrics] = None,
    ) -> MergeResult:
        """
        Merge a pull request pinned to the given head SHA.

        Args:
            pr_url: Pull request API URL
            merge_request: SHA, commit title and squash preference
            metrics: Pipeline metrics collector (optional)

        Returns:
            Merge result as reported by GitHub
        """
        response = await self._request(
            "merge_pull_request",
            "PUT",
            f"{pr_url}/merge",
            json=merge_request.model_dump(),
            metrics=metrics,
        )
        return MergeResult.model_validate(_json_or_empty(response))

    async def delete_branch(
        self,
        repo_full_name: str,
        ref: str,
        metrics: Optional[PipelineMetrics] = None,
    ) -> None:
        """
        Delete a branch ref.

        Args:
            repo_full_name: Repository in 'owner/name' form
            ref: Branch name without the 'refs/heads/' prefix
            metrics: Pipeline metrics collector (optional)
        """
        url = f"{self._api_url}/repos/{repo_full_name}/git/refs/heads/{ref}"
        await self._request("delete_branch", "DELETE", url, metrics=metrics)

    async def create_comment(
        self,
        comments_url: str,
        body: str,
        metrics: Optional[PipelineMetrics] = None,
    ) -> None:
        """
        Post a comment on a pull request's conversation.

        Args:
            comments_url: Issue comments URL of the pull request
            body: Comment markdown
            metrics: Pipeline metrics collector (optional)
        """
        await self._request(
            "create_comment",
            "POST",
            comments_url,
            json={"body": body},
            metrics=metrics,
        )

    async def _request(
        self,
        operation: str,
        method: str,
        url: str,
        json: Optional[Dict[str, Any]] = None,
        metrics: Optional[PipelineMetrics] = None,
    ) -> httpx.Response:
        """
        Send one request and turn any failure into a GitHubClientError.

        Raises:
            TransportError: If no response was received
            GitHubClientError: If GitHub answered with a non-2xx status
        """
        async with track_api_call(metrics, operation, method, url, logger):
            try:
                response = await self._http.request(method, url, json=json)
            except httpx.HTTPError as e:
                raise TransportError(f"{method} {url} failed: {e}") from e

            if response.is_error:
                raise GitHubClientError(
                    _error_message(response),
                    status_code=response.status_code,
                )

            return response


def build_headers(settings: Settings) -> Dict[str, str]:
    """Headers sent with every GitHub API call, apart from auth."""
    return {
        "Accept": settings.github_media_type,
        "User-Agent": "greenkeeper-keeper",
    }


def _json_or_empty(response: httpx.Response) -> Dict[str, Any]:
    if not response.content:
        return {}
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _error_message(response: httpx.Response) -> str:
    """Prefer the message GitHub puts in error bodies over the bare status."""
    api_message = _json_or_empty(response).get("message")
    reason = response.reason_phrase or "error"
    if api_message:
        return f"{response.status_code} {reason}: {api_message}"
    return f"{response.status_code} {reason}"
