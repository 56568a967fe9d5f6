"""
Utility modules for greenkeeper-keeper.
"""

from keeper.utils.logging import (
    get_logger,
    setup_logging,
    log_pr_event,
    log_state_transition,
    log_api_call,
    log_error_with_context,
)
from keeper.utils.metrics import (
    PipelineMetrics,
    track_api_call,
    emit_metric,
)
from keeper.utils.resilience import retry_with_backoff

__all__ = [
    "get_logger",
    "setup_logging",
    "log_pr_event",
    "log_state_transition",
    "log_api_call",
    "log_error_with_context",
    "PipelineMetrics",
    "track_api_call",
    "emit_metric",
    "retry_with_backoff",
]
