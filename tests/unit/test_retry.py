"""
Unit tests for the fixed-delay retry policy
"""

import pytest
from unittest.mock import AsyncMock, patch
from exporter.retry import RetryPolicy, retry_operation


class TestRetryPolicy:
    """Test bounded retry behaviour"""

    @pytest.mark.asyncio
    async def test_success_on_first_attempt(self):
        """No retries and no delay when the first call succeeds"""
        operation = AsyncMock(return_value="connected")

        with patch("exporter.retry.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            result = await RetryPolicy().execute(operation)

        assert result == "connected"
        assert operation.await_count == 1
        mock_sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_fails_twice_then_succeeds(self):
        """Two failures then success returns the result after exactly two delays"""
        operation = AsyncMock(side_effect=[
            ConnectionError("attempt 1"),
            ConnectionError("attempt 2"),
            "connected"
        ])

        with patch("exporter.retry.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            result = await RetryPolicy(max_attempts=3, delay_ms=1000).execute(operation)

        assert result == "connected"
        assert operation.await_count == 3
        assert mock_sleep.await_count == 2
        for call in mock_sleep.await_args_list:
            assert call.args == (1.0,)

    @pytest.mark.asyncio
    async def test_always_failing_raises_last_error(self):
        """The error of the final attempt propagates unchanged"""
        errors = [
            ConnectionError("attempt 1"),
            ConnectionError("attempt 2"),
            ConnectionError("attempt 3")
        ]
        operation = AsyncMock(side_effect=errors)

        with patch("exporter.retry.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            with pytest.raises(ConnectionError) as exc_info:
                await RetryPolicy(max_attempts=3).execute(operation)

        assert exc_info.value is errors[2]
        assert str(exc_info.value) == "attempt 3"
        assert operation.await_count == 3
        # No delay after the final attempt
        assert mock_sleep.await_count == 2

    @pytest.mark.asyncio
    async def test_per_call_overrides(self):
        """max_attempts and delay_ms can be overridden per call"""
        operation = AsyncMock(side_effect=ValueError("boom"))

        with patch("exporter.retry.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            with pytest.raises(ValueError):
                await RetryPolicy().execute(operation, max_attempts=5, delay_ms=250)

        assert operation.await_count == 5
        assert mock_sleep.await_count == 4
        mock_sleep.assert_awaited_with(0.25)

    @pytest.mark.asyncio
    async def test_single_attempt_never_sleeps(self):
        operation = AsyncMock(side_effect=TimeoutError("slow"))

        with patch("exporter.retry.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            with pytest.raises(TimeoutError):
                await RetryPolicy(max_attempts=1).execute(operation)

        mock_sleep.assert_not_awaited()

    def test_rejects_zero_attempts(self):
        with pytest.raises(ValueError):
            RetryPolicy(max_attempts=0)

    @pytest.mark.asyncio
    async def test_retry_operation_shortcut(self):
        operation = AsyncMock(side_effect=[OSError("down"), 42])

        with patch("exporter.retry.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            result = await retry_operation(operation, max_attempts=3, delay_ms=10)

        assert result == 42
        mock_sleep.assert_awaited_once_with(0.01)
