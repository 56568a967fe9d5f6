"""
Unit tests for the retry decorator.
"""

import pytest
from unittest.mock import AsyncMock, patch

from keeper.utils.resilience import retry_with_backoff


def scripted(*outcomes):
    """Async function returning or raising the given outcomes in order."""
    calls = []
    remaining = list(outcomes)

    async def func():
        calls.append(1)
        outcome = remaining.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    return func, calls


@pytest.mark.asyncio
async def test_async_retry_succeeds_after_failure():
    func, calls = scripted(ConnectionError("reset"), "ok")

    result = await retry_with_backoff(max_retries=2, base_delay=0.0)(func)()

    assert result == "ok"
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_async_retry_reraises_last_failure():
    func, calls = scripted(ConnectionError("first"), ConnectionError("second"), "never")

    with pytest.raises(ConnectionError, match="second"):
        await retry_with_backoff(max_retries=2, base_delay=0.0)(func)()

    assert len(calls) == 2


@pytest.mark.asyncio
async def test_async_retry_ignores_unlisted_exceptions():
    func, calls = scripted(KeyError("missing"), "never")

    with pytest.raises(KeyError):
        await retry_with_backoff(max_retries=3, base_delay=0.0, exceptions=(ConnectionError,))(func)()

    assert len(calls) == 1


@pytest.mark.asyncio
async def test_async_retry_backs_off_exponentially():
    func, _ = scripted(OSError(), OSError(), OSError(), "ok")

    with patch("keeper.utils.resilience.asyncio.sleep", new=AsyncMock()) as sleep:
        await retry_with_backoff(max_retries=4, base_delay=1.0, max_delay=3.0)(func)()

    assert [call.args[0] for call in sleep.await_args_list] == [1.0, 2.0, 3.0]


def test_sync_functions_are_rejected():
    def plain():
        return "ok"

    with pytest.raises(TypeError):
        retry_with_backoff(max_retries=2)(plain)


def test_retry_requires_an_attempt():
    with pytest.raises(ValueError):
        retry_with_backoff(max_retries=0)
