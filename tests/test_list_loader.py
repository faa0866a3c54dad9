"""Tests for list-loading retry."""

from unittest.mock import AsyncMock, patch

import pytest

from lorebook.models.failure import (
    NetworkUnreachable,
    RequestFailed,
    ServiceUnavailable,
    Unauthorized,
)
from lorebook.services.list_loader import fetch_with_retry


@pytest.fixture
def sleep():
    with patch("lorebook.services.list_loader.asyncio.sleep", new_callable=AsyncMock) as mock:
        yield mock


class TestFetchWithRetry:
    async def test_returns_first_success(self, sleep: AsyncMock) -> None:
        fetch = AsyncMock(return_value=["set"])

        assert await fetch_with_retry(fetch) == ["set"]
        fetch.assert_awaited_once()
        sleep.assert_not_called()

    async def test_retries_transient_then_succeeds(self, sleep: AsyncMock) -> None:
        fetch = AsyncMock(side_effect=[ServiceUnavailable(), NetworkUnreachable(), ["set"]])

        result = await fetch_with_retry(fetch, attempts=2, delay=5.0)

        assert result == ["set"]
        assert fetch.await_count == 3
        assert sleep.await_count == 2
        sleep.assert_awaited_with(5.0)

    async def test_gives_up_after_attempts(self, sleep: AsyncMock) -> None:
        """Retries are bounded."""
        fetch = AsyncMock(side_effect=ServiceUnavailable())

        with pytest.raises(ServiceUnavailable):
            await fetch_with_retry(fetch, attempts=2)

        assert fetch.await_count == 3

    @pytest.mark.parametrize("error", [RequestFailed("Bad set"), Unauthorized()])
    async def test_does_not_retry_non_transient(
        self, sleep: AsyncMock, error: Exception
    ) -> None:
        fetch = AsyncMock(side_effect=error)

        with pytest.raises(type(error)):
            await fetch_with_retry(fetch)

        fetch.assert_awaited_once()
        sleep.assert_not_called()

    async def test_zero_attempts_means_single_try(self, sleep: AsyncMock) -> None:
        fetch = AsyncMock(side_effect=NetworkUnreachable())

        with pytest.raises(NetworkUnreachable):
            await fetch_with_retry(fetch, attempts=0)

        fetch.assert_awaited_once()

    async def test_rejects_negative_attempts(self) -> None:
        with pytest.raises(ValueError):
            await fetch_with_retry(AsyncMock(), attempts=-1)
