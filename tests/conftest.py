"""
Shared test fixtures.
"""

import os

# Required settings must exist before keeper.config is imported
os.environ.setdefault("GITHUB_USER", "keeper-bot")
os.environ.setdefault("GITHUB_TOKEN", "test_token")

import pytest

from keeper.config import Settings
from keeper.models.pull_request import PullRequestEvent

BOT_URL = "https://github.com/greenkeeperio-bot"
HUMAN_URL = "https://github.com/octocat"
PR_URL = "https://api.github.com/repos/acme/widgets/pulls/7"
COMMENTS_URL = "https://api.github.com/repos/acme/widgets/issues/7/comments"


def make_pr_payload(
    mergeable_state: str = "unknown",
    author: str = BOT_URL,
    sha: str = "abc123",
    repo: str = "acme/widgets",
) -> dict:
    """Pull request resource as GitHub serializes it."""
    return {
        "url": PR_URL,
        "number": 7,
        "title": "Update lodash to version 4.17.21",
        "comments_url": COMMENTS_URL,
        "mergeable": mergeable_state == "clean",
        "mergeable_state": mergeable_state,
        "head": {
            "sha": sha,
            "ref": "greenkeeper/lodash-4.17.21",
            "repo": {"full_name": repo},
        },
        "user": {"login": author.rsplit("/", 1)[-1], "html_url": author},
    }


def make_event_payload(
    action: str = "opened",
    sender: str = BOT_URL,
    author: str = BOT_URL,
    mergeable_state: str = "unknown",
) -> dict:
    """Pull request webhook delivery body."""
    return {
        "action": action,
        "number": 7,
        "sender": {"login": sender.rsplit("/", 1)[-1], "html_url": sender},
        "pull_request": make_pr_payload(mergeable_state=mergeable_state, author=author),
    }


@pytest.fixture
def settings() -> Settings:
    """Settings with fast polling and both merge options enabled."""
    return Settings(
        github_user="keeper-bot",
        github_token="test_token",
        squash_merges=True,
        delete_branches=True,
        poll_interval_seconds=60.0,
        pending_timeout_seconds=24 * 60 * 60.0,
    )


@pytest.fixture
def event_factory():
    """Build PullRequestEvent instances."""
    def _make(**kwargs) -> PullRequestEvent:
        return PullRequestEvent.model_validate(make_event_payload(**kwargs))
    return _make


@pytest.fixture
def payload_factory():
    """Build webhook delivery bodies."""
    return make_event_payload


@pytest.fixture
def pr_payload_factory():
    """Build pull request API resources."""
    return make_pr_payload
