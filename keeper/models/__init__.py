"""Data models for greenkeeper-keeper."""

from .api_response import HealthResponse, WebhookResponse
from .pipeline import BackoffState, PipelineState
from .pull_request import (
    HeadRef,
    Identity,
    MergeableState,
    MergeRequest,
    MergeResult,
    PullRequest,
    PullRequestEvent,
    Repository,
)

__all__ = [
    # Pull request models
    "Identity",
    "Repository",
    "HeadRef",
    "MergeableState",
    "PullRequest",
    "PullRequestEvent",
    "MergeRequest",
    "MergeResult",
    # Pipeline models
    "PipelineState",
    "BackoffState",
    # API response models
    "WebhookResponse",
    "HealthResponse",
]
