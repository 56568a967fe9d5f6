"""Pull request webhook and API data models."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class MergeableState(str, Enum):
    """Mergeability states reported by GitHub."""

    CLEAN = "clean"  # Only actionable state
    DIRTY = "dirty"
    UNSTABLE = "unstable"
    UNKNOWN = "unknown"
    BLOCKED = "blocked"
    BEHIND = "behind"
    HAS_HOOKS = "has_hooks"
    DRAFT = "draft"


class Identity(BaseModel):
    """GitHub user or bot identity."""

    model_config = ConfigDict(frozen=True)

    html_url: str
    login: Optional[str] = None


class Repository(BaseModel):
    """Repository owning a branch."""

    model_config = ConfigDict(frozen=True)

    full_name: str


class HeadRef(BaseModel):
    """Tip of the pull request's source branch."""

    model_config = ConfigDict(frozen=True)

    sha: str
    ref: str
    repo: Optional[Repository] = None  # None when the fork was deleted


class PullRequest(BaseModel):
    """Pull request resource as returned by the API or embedded in a webhook."""

    model_config = ConfigDict(frozen=True)

    url: str
    title: str
    head: HeadRef
    user: Identity
    comments_url: str
    number: Optional[int] = None
    mergeable: Optional[bool] = None
    mergeable_state: str = MergeableState.UNKNOWN.value

    @property
    def is_clean(self) -> bool:
        return self.mergeable_state == MergeableState.CLEAN.value


class PullRequestEvent(BaseModel):
    """Pull request event from a GitHub webhook delivery."""

    model_config = ConfigDict(frozen=True)

    action: str  # 'opened', 'synchronize', 'closed', ...
    sender: Identity
    number: Optional[int] = None
    pull_request: Optional[PullRequest] = None


class MergeRequest(BaseModel):
    """Body of a merge call."""

    sha: str
    commit_title: str
    squash: bool = False


class MergeResult(BaseModel):
    """Response of a successful merge call."""

    sha: Optional[str] = None
    merged: bool = False
    message: str = ""
