"""
Merge executor.

Merges a validated pull request, retrying the identical merge call once on
any failure, and optionally deletes the head branch afterwards.
"""

from typing import Optional

from keeper.config import Settings
from keeper.errors import KeeperError
from keeper.models.pull_request import HeadRef, MergeRequest, MergeResult
from keeper.services.github_client import GitHubClient, GitHubClientError
from keeper.utils.logging import ContextLoggerAdapter, get_logger, log_error_with_context
from keeper.utils.metrics import PipelineMetrics
from keeper.utils.resilience import retry_with_backoff

logger = get_logger(__name__)

MERGE_ATTEMPTS = 2


class MergeFailureError(KeeperError):
    """The merge call failed on every attempt."""

    def __init__(self, pr_url: str, cause: Exception):
        super().__init__(str(cause))
        self.pr_url = pr_url
        self.cause = cause


class MergeExecutor:
    """Performs the merge call and the optional branch cleanup."""

    def __init__(self, client: GitHubClient, settings: Settings):
        """
        Initialize the merge executor.

        Args:
            client: GitHub client
            settings: Provides the squash and branch deletion preferences
        """
        self._client = client
        self.squash = settings.squash_merges
        self.delete_branches = settings.delete_branches

    async def merge(
        self,
        pr_url: str,
        title: str,
        sha: str,
        metrics: Optional[PipelineMetrics] = None,
        log: Optional[ContextLoggerAdapter] = None,
    ) -> MergeResult:
        """
        Merge a pull request at the given head SHA.

        The SHA pins the merge to the commit that was validated, so a newer
        push makes GitHub reject the merge. Any failure is retried once with
        the identical request, whether transient or not.

        Args:
            pr_url: Pull request API URL
            title: Commit title for the merge commit
            sha: Head SHA that was validated
            metrics: Pipeline metrics collector (optional)
            log: Logger bound to the pipeline's context (optional)

        Returns:
            Merge result reported by GitHub

        Raises:
            MergeFailureError: If both attempts fail
        """
        log = log or logger.with_context(pr_url=pr_url)
        merge_request = MergeRequest(sha=sha, commit_title=title, squash=self.squash)

        @retry_with_backoff(max_retries=MERGE_ATTEMPTS, base_delay=0.0, exceptions=(GitHubClientError,))
        async def _merge_once() -> MergeResult:
            return await self._client.merge_pull_request(pr_url, merge_request, metrics=metrics)

        try:
            result = await _merge_once()
        except GitHubClientError as e:
            raise MergeFailureError(pr_url, e) from e

        log.info(
            "PR merged",
            extra={"merged": result.merged, "merge_sha": result.sha, "merge_message": result.message},
        )
        return result

    async def delete_head_branch(
        self,
        head: HeadRef,
        metrics: Optional[PipelineMetrics] = None,
        log: Optional[ContextLoggerAdapter] = None,
    ) -> bool:
        """
        Delete the pull request's head branch when branch deletion is enabled.

        Best effort: failures are logged and reported as False, never raised.

        Returns:
            True if the branch was deleted
        """
        log = log or logger
        if not self.delete_branches:
            return False

        if head.repo is None:
            log.warning(f"Head repository for branch {head.ref} is gone, not deleting")
            return False

        try:
            await self._client.delete_branch(head.repo.full_name, head.ref, metrics=metrics)
        except GitHubClientError as e:
            log_error_with_context(
                log,
                f"Failed to delete branch {head.ref}",
                e,
                repository=head.repo.full_name,
            )
            return False

        log.info(f"Deleted branch {head.ref}", extra={"repository": head.repo.full_name})
        return True
