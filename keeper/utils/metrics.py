"""
Metrics collection and emission for observability.

This module provides metrics tracking for:
- Pipeline execution time
- Number of mergeability polls
- GitHub API call counts and latency
"""

import time
from datetime import datetime, timezone
from typing import Optional, Dict, Any
from contextlib import asynccontextmanager

from keeper.utils.logging import get_logger, log_api_call

logger = get_logger(__name__)


class PipelineMetrics:
    """
    Collects metrics during one merge pipeline run.

    Tracks:
    - Execution start/end time
    - Mergeability polls
    - API call counts and latency
    - Final status and error
    """

    def __init__(self, pr_url: str, pr_number: Optional[int] = None):
        """
        Initialize metrics collector.

        Args:
            pr_url: Pull request API URL
            pr_number: Pull request number
        """
        self.pr_url = pr_url
        self.pr_number = pr_number

        # Timing metrics
        self.start_time: Optional[datetime] = None
        self.end_time: Optional[datetime] = None
        self.duration_ms: Optional[int] = None

        # Pipeline metrics
        self.polls: int = 0
        self.last_mergeable_state: Optional[str] = None

        # API metrics
        self.api_calls: Dict[str, int] = {}
        self.api_latencies: Dict[str, list[float]] = {}

        # Status
        self.status: str = "running"
        self.error_message: Optional[str] = None

    def start(self) -> None:
        """Mark pipeline start."""
        self.start_time = datetime.now(timezone.utc)
        self.status = "running"
        logger.debug(
            "Metrics collection started",
            extra={"pr_url": self.pr_url, "pr_number": self.pr_number}
        )

    def complete(self, status: str = "merged", error_message: Optional[str] = None) -> None:
        """
        Mark pipeline completion.

        Args:
            status: Final pipeline state ('skipped', 'merged', 'failed')
            error_message: Error message if failed
        """
        self.end_time = datetime.now(timezone.utc)
        self.status = status
        self.error_message = error_message

        if self.start_time:
            duration = (self.end_time - self.start_time).total_seconds()
            self.duration_ms = int(duration * 1000)

        logger.info(
            "Pipeline metrics",
            extra={
                "pr_url": self.pr_url,
                "pr_number": self.pr_number,
                "status": self.status,
                "duration_ms": self.duration_ms,
                "polls": self.polls,
                "last_mergeable_state": self.last_mergeable_state,
            }
        )

    def record_poll(self, mergeable_state: str) -> None:
        """Record one mergeability poll and the state it observed."""
        self.polls += 1
        self.last_mergeable_state = mergeable_state

    def record_api_call(self, operation: str, duration_ms: float) -> None:
        """
        Record API call and latency.

        Args:
            operation: Client operation name (e.g., 'get_pull_request')
            duration_ms: Call duration in milliseconds
        """
        self.api_calls[operation] = self.api_calls.get(operation, 0) + 1
        self.api_latencies.setdefault(operation, []).append(duration_ms)

    def get_metrics_summary(self) -> Dict[str, Any]:
        """
        Get summary of collected metrics.

        Returns:
            Dictionary of metrics
        """
        summary: Dict[str, Any] = {
            "pr_url": self.pr_url,
            "pr_number": self.pr_number,
            "status": self.status,
            "start_time": self.start_time.isoformat() if self.start_time else None,
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "duration_ms": self.duration_ms,
            "polls": self.polls,
            "last_mergeable_state": self.last_mergeable_state,
            "api_calls": self.api_calls,
        }

        if self.api_latencies:
            latency_stats = {}
            for operation, latencies in self.api_latencies.items():
                if latencies:
                    latency_stats[operation] = {
                        "count": len(latencies),
                        "min_ms": round(min(latencies), 2),
                        "max_ms": round(max(latencies), 2),
                        "avg_ms": round(sum(latencies) / len(latencies), 2),
                    }
            summary["api_latencies"] = latency_stats

        if self.error_message:
            summary["error_message"] = self.error_message

        return summary


@asynccontextmanager
async def track_api_call(
    metrics: Optional[PipelineMetrics],
    operation: str,
    method: str,
    endpoint: str,
    logger_adapter
):
    """
    Context manager to time and log one GitHub API call.

    Usage:
        async with track_api_call(metrics, "get_pull_request", "GET", url, logger):
            response = await http.get(url)

    Args:
        metrics: Pipeline metrics collector (optional)
        operation: Client operation name
        method: HTTP method
        endpoint: Request URL
        logger_adapter: Logger for logging API calls
    """
    start_time = time.monotonic()
    error = None

    try:
        yield
    except Exception as e:
        error = e
        raise
    finally:
        duration_ms = (time.monotonic() - start_time) * 1000

        if metrics:
            metrics.record_api_call(operation, duration_ms)

        log_api_call(
            logger_adapter,
            service="github",
            endpoint=endpoint,
            method=method,
            duration_ms=duration_ms,
            error=str(error) if error else None
        )


def emit_metric(metric_name: str, value: float, **tags: Any) -> None:
    """
    Emit a metric as a structured log record.

    Args:
        metric_name: Metric name
        value: Metric value
        **tags: Metric tags/labels
    """
    logger.info(
        f"Metric: {metric_name}",
        extra={
            "metric_name": metric_name,
            "metric_value": value,
            "metric_tags": tags,
        }
    )
