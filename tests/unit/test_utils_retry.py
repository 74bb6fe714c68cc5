"""
Unit tests for retry utilities.
"""

from unittest.mock import AsyncMock, patch

import pytest

from chatlog.errors.internal import NetworkError, OAuthError
from chatlog.utils.retry import RetryExhaustedError, retry_async


class TestRetryAsync:
    """Test class for retry_async functionality."""

    def setup_method(self):
        self.sleep = AsyncMock()

    @pytest.mark.asyncio
    async def test_retry_async_success_first_attempt(self):
        async def operation(attempt: int) -> str:
            return "success"

        result = await retry_async(operation, retry_on=(NetworkError,), sleep=self.sleep)
        assert result == "success"
        self.sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_retry_async_passes_attempt_number(self):
        seen = []

        async def operation(attempt: int) -> str:
            seen.append(attempt)
            if attempt < 3:
                raise NetworkError("Temporary error")
            return "success"

        result = await retry_async(operation, retry_on=(NetworkError,), sleep=self.sleep)

        assert result == "success"
        assert seen == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_retry_async_exponential_waits(self):
        async def operation(attempt: int) -> str:
            raise NetworkError("down")

        with pytest.raises(RetryExhaustedError):
            await retry_async(
                operation,
                retry_on=(NetworkError,),
                max_attempts=7,
                multiplier=2.0,
                max_wait=60.0,
                sleep=self.sleep,
            )

        waits = [c.args[0] for c in self.sleep.await_args_list]
        assert waits == [2, 4, 8, 16, 32, 60]

    @pytest.mark.asyncio
    async def test_retry_async_exhaust_attempts(self):
        async def operation(attempt: int) -> str:
            raise NetworkError("down")

        with pytest.raises(RetryExhaustedError) as exc_info:
            await retry_async(
                operation, retry_on=(NetworkError,), max_attempts=2, sleep=self.sleep
            )

        assert exc_info.value.attempts == 2
        assert "after 2 attempts" in str(exc_info.value)
        assert isinstance(exc_info.value.final_exception, NetworkError)

    @pytest.mark.asyncio
    async def test_retry_async_exception_no_retry(self):
        async def operation(attempt: int) -> str:
            raise OAuthError("Permanent error")

        with pytest.raises(OAuthError):
            await retry_async(operation, retry_on=(NetworkError,), sleep=self.sleep)
        self.sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_retry_async_logs_each_retry(self):
        calls = 0

        async def operation(attempt: int) -> str:
            nonlocal calls
            calls += 1
            if calls == 1:
                raise NetworkError("blip")
            return "ok"

        with patch("chatlog.utils.retry.logging") as mock_logging:
            await retry_async(
                operation, retry_on=(NetworkError,), context="Token refresh", sleep=self.sleep
            )

        mock_logging.warning.assert_called_once()
        assert "Token refresh failed (attempt 1/6)" in mock_logging.warning.call_args[0][0]
