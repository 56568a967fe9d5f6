"""Pipeline state data models."""

from dataclasses import dataclass
from enum import Enum


class PipelineState(str, Enum):
    """States of a single merge pipeline run."""

    RECEIVED = "received"
    SKIPPED = "skipped"  # Terminal
    VALIDATING = "validating"
    MERGING = "merging"
    CLEANING_UP = "cleaning_up"
    MERGED = "merged"  # Terminal
    FAILED = "failed"  # Terminal

    @property
    def is_terminal(self) -> bool:
        return self in (PipelineState.SKIPPED, PipelineState.MERGED, PipelineState.FAILED)


@dataclass
class BackoffState:
    """
    Wait bookkeeping for one mergeability validation run.

    ``interval`` is the next sleep in seconds and grows linearly by ``step``;
    ``elapsed`` is the total time slept so far.
    """

    interval: float
    step: float
    elapsed: float = 0.0

    def exceeds(self, ceiling: float) -> bool:
        """Check whether either the next wait or the time already spent passed the ceiling."""
        return self.interval > ceiling or self.elapsed > ceiling

    def advance(self) -> None:
        """Account for the wait just slept and widen the next one."""
        self.elapsed += self.interval
        self.interval += self.step
