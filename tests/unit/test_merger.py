"""Unit tests for the merge executor."""

import pytest
from unittest.mock import AsyncMock, MagicMock

from keeper.models.pull_request import HeadRef, MergeRequest, MergeResult, Repository
from keeper.services.github_client import GitHubClientError, TransportError
from keeper.services.merger import MergeExecutor, MergeFailureError

PR_URL = "https://api.github.com/repos/acme/widgets/pulls/7"
MERGED = MergeResult(sha="def456", merged=True, message="Pull Request successfully merged")


@pytest.fixture
def client():
    client = MagicMock()
    client.merge_pull_request = AsyncMock(return_value=MERGED)
    client.delete_branch = AsyncMock()
    return client


@pytest.fixture
def head():
    return HeadRef(sha="abc123", ref="greenkeeper/lodash-4.17.21", repo=Repository(full_name="acme/widgets"))


@pytest.mark.asyncio
async def test_merge_sends_sha_title_and_squash(client, settings):
    executor = MergeExecutor(client, settings)

    result = await executor.merge(PR_URL, "Update lodash", "abc123")

    assert result == MERGED
    client.merge_pull_request.assert_awaited_once()
    url, merge_request = client.merge_pull_request.await_args.args
    assert url == PR_URL
    assert merge_request == MergeRequest(sha="abc123", commit_title="Update lodash", squash=True)


@pytest.mark.asyncio
async def test_merge_respects_squash_setting(client, settings):
    settings.squash_merges = False

    await MergeExecutor(client, settings).merge(PR_URL, "Update lodash", "abc123")

    merge_request = client.merge_pull_request.await_args.args[1]
    assert merge_request.squash is False


@pytest.mark.asyncio
async def test_merge_retries_once_after_failure(client, settings):
    client.merge_pull_request.side_effect = [TransportError("connection reset"), MERGED]

    result = await MergeExecutor(client, settings).merge(PR_URL, "Update lodash", "abc123")

    assert result == MERGED
    assert client.merge_pull_request.await_count == 2
    first, second = client.merge_pull_request.await_args_list
    assert first.args == second.args


@pytest.mark.asyncio
async def test_merge_gives_up_after_second_failure(client, settings):
    client.merge_pull_request.side_effect = [
        GitHubClientError("405 Method Not Allowed: Pull Request is not mergeable", 405),
        GitHubClientError("409 Conflict: Head branch was modified", 409),
        MERGED,
    ]

    with pytest.raises(MergeFailureError) as exc_info:
        await MergeExecutor(client, settings).merge(PR_URL, "Update lodash", "abc123")

    assert client.merge_pull_request.await_count == 2
    assert str(exc_info.value) == "409 Conflict: Head branch was modified"
    assert isinstance(exc_info.value.cause, GitHubClientError)


@pytest.mark.asyncio
async def test_delete_head_branch(client, settings, head):
    deleted = await MergeExecutor(client, settings).delete_head_branch(head)

    assert deleted is True
    client.delete_branch.assert_awaited_once()
    assert client.delete_branch.await_args.args == ("acme/widgets", "greenkeeper/lodash-4.17.21")


@pytest.mark.asyncio
async def test_delete_head_branch_disabled(client, settings, head):
    settings.delete_branches = False

    deleted = await MergeExecutor(client, settings).delete_head_branch(head)

    assert deleted is False
    client.delete_branch.assert_not_awaited()


@pytest.mark.asyncio
async def test_delete_head_branch_failure_is_not_raised(client, settings, head):
    client.delete_branch.side_effect = GitHubClientError("422 Unprocessable Entity: Reference does not exist", 422)

    deleted = await MergeExecutor(client, settings).delete_head_branch(head)

    assert deleted is False
    client.delete_branch.assert_awaited_once()


@pytest.mark.asyncio
async def test_delete_head_branch_skips_deleted_fork(client, settings):
    head = HeadRef(sha="abc123", ref="patch-1", repo=None)

    deleted = await MergeExecutor(client, settings).delete_head_branch(head)

    assert deleted is False
    client.delete_branch.assert_not_awaited()
