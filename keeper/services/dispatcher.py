"""
Event dispatcher.

Runs one merge pipeline per webhook delivery:

    received -> skipped
    received -> validating -> merging -> [cleaning_up] -> merged
                validating -> failed
                              merging -> failed

Every failure ends in exactly one error comment on the pull request.
"""

from typing import Optional

from keeper.config import Settings
from keeper.models.pipeline import PipelineState
from keeper.models.pull_request import PullRequestEvent
from keeper.services.eligibility import IdentityPredicate, is_eligible, trusted_identities
from keeper.services.github_client import GitHubClient
from keeper.services.merger import MergeExecutor
from keeper.services.reporter import FailureReporter
from keeper.services.validator import MergeabilityValidator
from keeper.utils.logging import (
    ContextLoggerAdapter,
    get_logger,
    log_error_with_context,
    log_pr_event,
    log_state_transition,
)
from keeper.utils.metrics import PipelineMetrics

logger = get_logger(__name__)


class EventDispatcher:
    """Sequences eligibility, validation, merge, cleanup and failure reporting."""

    def __init__(
        self,
        client: GitHubClient,
        settings: Settings,
        is_trusted: Optional[IdentityPredicate] = None,
        validator: Optional[MergeabilityValidator] = None,
        executor: Optional[MergeExecutor] = None,
        reporter: Optional[FailureReporter] = None,
    ):
        """
        Initialize the dispatcher.

        Args:
            client: GitHub client shared by the pipeline stages
            settings: Application settings
            is_trusted: Trust predicate; defaults to the configured allow-list
            validator: Mergeability validator override
            executor: Merge executor override
            reporter: Failure reporter override
        """
        self.client = client
        self.is_trusted = is_trusted or trusted_identities(settings.trusted_identities)
        self.validator = validator or MergeabilityValidator(client, settings)
        self.executor = executor or MergeExecutor(client, settings)
        self.reporter = reporter or FailureReporter(client)

    async def process_event(self, event: PullRequestEvent) -> PipelineState:
        """
        Run the merge pipeline for one webhook event.

        Args:
            event: Parsed pull request event

        Returns:
            Terminal pipeline state: SKIPPED, MERGED or FAILED
        """
        pr = event.pull_request
        log = logger.with_context(pr_url=pr.url if pr else None, pr_number=event.number)

        log_pr_event(
            log,
            action=event.action,
            pr_url=pr.url if pr else None,
            pr_number=event.number,
            sender=event.sender.html_url,
        )

        if pr is None or not is_eligible(event, self.is_trusted):
            log.info("Skipping PR event", extra={"action": event.action, "state": PipelineState.SKIPPED.value})
            return PipelineState.SKIPPED

        metrics = PipelineMetrics(pr.url, event.number)
        metrics.start()

        state = self._transition(log, pr.url, PipelineState.RECEIVED, PipelineState.VALIDATING)

        try:
            await self.validator.validate(pr.url, metrics=metrics, log=log)

            state = self._transition(log, pr.url, state, PipelineState.MERGING)
            await self.executor.merge(pr.url, pr.title, pr.head.sha, metrics=metrics, log=log)

            if self.executor.delete_branches:
                state = self._transition(log, pr.url, state, PipelineState.CLEANING_UP)
                await self.executor.delete_head_branch(pr.head, metrics=metrics, log=log)

        except Exception as e:
            log_error_with_context(log, f"PR pipeline failed while {state.value}", e, failed_state=state.value)
            self._transition(log, pr.url, state, PipelineState.FAILED)
            metrics.complete(status=PipelineState.FAILED.value, error_message=str(e))
            await self.reporter.report(pr.comments_url, event.number, e, metrics=metrics, log=log)
            return PipelineState.FAILED

        self._transition(log, pr.url, state, PipelineState.MERGED)
        metrics.complete(status=PipelineState.MERGED.value)
        return PipelineState.MERGED

    @staticmethod
    def _transition(
        log: ContextLoggerAdapter,
        pr_url: str,
        previous: PipelineState,
        state: PipelineState,
    ) -> PipelineState:
        log_state_transition(log, pr_url, previous.value, state.value)
        return state


# Global service instance
_dispatcher: Optional[EventDispatcher] = None


def get_event_dispatcher() -> EventDispatcher:
    """
    Get or create the global event dispatcher.

    Returns:
        EventDispatcher wired to the global settings
    """
    global _dispatcher
    if _dispatcher is None:
        from keeper.config import settings
        _dispatcher = EventDispatcher(GitHubClient(settings), settings)
    return _dispatcher


async def close_event_dispatcher() -> None:
    """Close the global dispatcher's GitHub client, if one was created."""
    global _dispatcher
    if _dispatcher is not None:
        await _dispatcher.client.close()
        _dispatcher = None
