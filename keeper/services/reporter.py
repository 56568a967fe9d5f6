"""
Failure reporter.

Posts a single-line error comment on a pull request when its merge pipeline
fails. This is the end of the error handling chain, so its own failures are
logged and dropped.
"""

from typing import Optional

from keeper.services.github_client import GitHubClient
from keeper.utils.logging import ContextLoggerAdapter, get_logger, log_error_with_context
from keeper.utils.metrics import PipelineMetrics

logger = get_logger(__name__)

COMMENT_SIGNATURE = "greenkeeper-keeper"


def build_error_comment(message: str, pr_number: Optional[int]) -> str:
    """
    Format the error comment body.

    Args:
        message: Error message to embed
        pr_number: Pull request number

    Returns:
        Markdown comment body
    """
    # Single line; backticks in the message would end the code span early
    flattened = " ".join(str(message).split()).replace("`", "'")
    return f"{COMMENT_SIGNATURE}(pr: {pr_number}): :x: `{flattened}`"


class FailureReporter:
    """Reports pipeline failures back onto the pull request."""

    def __init__(self, client: GitHubClient):
        self._client = client

    async def report(
        self,
        comments_url: str,
        pr_number: Optional[int],
        error: Exception,
        metrics: Optional[PipelineMetrics] = None,
        log: Optional[ContextLoggerAdapter] = None,
    ) -> bool:
        """
        Post an error comment. Never raises.

        Returns:
            True if the comment was posted
        """
        log = log or logger
        body = build_error_comment(str(error), pr_number)

        try:
            await self._client.create_comment(comments_url, body, metrics=metrics)
        except Exception as e:
            log_error_with_context(
                log,
                "Failed to post error comment",
                e,
                comments_url=comments_url,
                original_error=str(error),
            )
            return False

        log.info("Posted error comment", extra={"comments_url": comments_url})
        return True
