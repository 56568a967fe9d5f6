"""
Mergeability validator.

Polls a pull request until GitHub reports it as cleanly mergeable, waiting a
little longer between each poll. Mergeability is computed asynchronously by
GitHub, so the pull request is fetched fresh every time.
"""

import asyncio
from typing import Awaitable, Callable, Optional

from keeper.config import Settings
from keeper.errors import KeeperError
from keeper.models.pipeline import BackoffState
from keeper.services.github_client import GitHubClient
from keeper.utils.logging import ContextLoggerAdapter, get_logger
from keeper.utils.metrics import PipelineMetrics

logger = get_logger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class PendingTimeoutError(KeeperError):
    """The pull request never became mergeable within the wait ceiling."""

    def __init__(self, pr_url: str, waited_seconds: float, last_state: str):
        super().__init__(
            f"Pending timeout exceeded: mergeable state still '{last_state}' "
            f"after waiting {int(waited_seconds)}s"
        )
        self.pr_url = pr_url
        self.waited_seconds = waited_seconds
        self.last_state = last_state


class MergeabilityValidator:
    """
    Waits for a pull request to reach the 'clean' mergeable state.

    Waits grow linearly: one interval unit, then two, then three, and so on.
    Validation gives up once the next wait or the total time waited passes
    the configured ceiling.
    """

    def __init__(
        self,
        client: GitHubClient,
        settings: Settings,
        sleep: Sleep = asyncio.sleep,
    ):
        """
        Initialize the validator.

        Args:
            client: GitHub client used to fetch the pull request
            settings: Provides the interval unit and the wait ceiling
            sleep: Awaitable sleep; suspends only the calling task
        """
        self._client = client
        self._step = settings.poll_interval_seconds
        self._ceiling = settings.pending_timeout_seconds
        self._sleep = sleep

    async def validate(
        self,
        pr_url: str,
        wait: Optional[float] = None,
        metrics: Optional[PipelineMetrics] = None,
        log: Optional[ContextLoggerAdapter] = None,
    ) -> None:
        """
        Return once the pull request is clean.

        Args:
            pr_url: Pull request API URL
            wait: First wait in seconds (defaults to one interval unit)
            metrics: Pipeline metrics collector (optional)
            log: Logger bound to the pipeline's context (optional)

        Raises:
            PendingTimeoutError: If the wait ceiling is exceeded
            GitHubClientError: If fetching the pull request fails
        """
        log = log or logger.with_context(pr_url=pr_url)
        backoff = BackoffState(
            interval=self._step if wait is None else wait,
            step=self._step,
        )

        while True:
            pr = await self._client.get_pull_request(pr_url, metrics=metrics)

            if metrics:
                metrics.record_poll(pr.mergeable_state)

            log.info(
                "Validating PR",
                extra={
                    "wait_seconds": backoff.interval,
                    "elapsed_seconds": backoff.elapsed,
                    "mergeable": pr.mergeable,
                    "mergeable_state": pr.mergeable_state,
                },
            )

            if pr.is_clean:
                log.info("Statuses verified, continuing")
                return

            if backoff.exceeds(self._ceiling):
                log.warning("Pending timeout exceeded, rejecting")
                raise PendingTimeoutError(pr_url, backoff.elapsed, pr.mergeable_state)

            log.info(f"Retrying statuses in {backoff.interval:.0f}s")
            await self._sleep(backoff.interval)
            backoff.advance()
