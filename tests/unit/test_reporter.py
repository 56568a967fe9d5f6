"""Unit tests for the failure reporter."""

import pytest
from unittest.mock import AsyncMock, MagicMock

from keeper.services.github_client import GitHubClientError
from keeper.services.reporter import FailureReporter, build_error_comment

COMMENTS_URL = "https://api.github.com/repos/acme/widgets/issues/7/comments"


def test_build_error_comment():
    body = build_error_comment("Pull Request is not mergeable", 7)
    assert body == "greenkeeper-keeper(pr: 7): :x: `Pull Request is not mergeable`"


def test_build_error_comment_is_single_line():
    body = build_error_comment("first line\nsecond `quoted` line", 7)
    assert "\n" not in body
    assert body == "greenkeeper-keeper(pr: 7): :x: `first line second 'quoted' line`"


@pytest.mark.asyncio
async def test_report_posts_comment():
    client = MagicMock()
    client.create_comment = AsyncMock()

    posted = await FailureReporter(client).report(COMMENTS_URL, 7, RuntimeError("merge failed"))

    assert posted is True
    client.create_comment.assert_awaited_once()
    url, body = client.create_comment.await_args.args
    assert url == COMMENTS_URL
    assert "pr: 7" in body
    assert "merge failed" in body


@pytest.mark.asyncio
async def test_report_swallows_its_own_failure():
    client = MagicMock()
    client.create_comment = AsyncMock(side_effect=GitHubClientError("403 Forbidden", 403))

    posted = await FailureReporter(client).report(COMMENTS_URL, 7, RuntimeError("merge failed"))

    assert posted is False
    client.create_comment.assert_awaited_once()
