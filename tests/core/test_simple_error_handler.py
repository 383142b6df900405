"""
Tests for the simple error handler module.
"""

from unittest.mock import AsyncMock, patch

import pytest
from websockets.exceptions import InvalidHandshake

from shopsocket.core.simple_error_handler import log_exception, retry_on_failure, safe_call


def test_log_exception_sync():
    """Test the log_exception decorator with a synchronous function."""

    @log_exception
    def failing_function():
        raise ValueError("Test error")

    with patch("shopsocket.core.simple_error_handler.logger.error") as mock_error:
        with pytest.raises(ValueError, match="Test error"):
            failing_function()

        mock_error.assert_called_once()
        assert mock_error.call_args[1]["exc_info"] is True


@pytest.mark.asyncio
async def test_log_exception_async():
    """Test the log_exception decorator with an asynchronous function."""

    @log_exception
    async def failing_async_function():
        raise ValueError("Test async error")

    with patch("shopsocket.core.simple_error_handler.logger.error") as mock_error:
        with pytest.raises(ValueError, match="Test async error"):
            await failing_async_function()

        mock_error.assert_called_once()
        assert mock_error.call_args[1]["func_name"] == "failing_async_function"


@patch("shopsocket.core.simple_error_handler.time.sleep")
def test_retry_on_failure_sync_success(mock_sleep):
    call_count = 0

    @retry_on_failure(max_retries=2, delay=0.5, backoff=3.0)
    def sometimes_failing_function():
        nonlocal call_count
        call_count += 1
        if call_count < 3:
            raise ConnectionError("Temporary error")
        return "success"

    with patch("shopsocket.core.simple_error_handler.logger.warning") as mock_warning:
        assert sometimes_failing_function() == "success"

    assert call_count == 3
    assert mock_warning.call_count == 2
    assert [c.args[0] for c in mock_sleep.call_args_list] == [0.5, 1.5]


@patch("shopsocket.core.simple_error_handler.time.sleep")
def test_retry_on_failure_sync_failure(mock_sleep):
    call_count = 0

    @retry_on_failure(max_retries=2)
    def always_failing_function():
        nonlocal call_count
        call_count += 1
        raise ConnectionError("Permanent error")

    with patch("shopsocket.core.simple_error_handler.logger.error") as mock_error:
        with pytest.raises(ConnectionError, match="Permanent error"):
            always_failing_function()

    assert call_count == 3  # Initial call + 2 retries
    mock_error.assert_called_once()


def test_retry_on_failure_non_retryable():
    call_count = 0

    @retry_on_failure(max_retries=2)
    def bad_input():
        nonlocal call_count
        call_count += 1
        raise ValueError("bad input")

    with pytest.raises(ValueError):
        bad_input()
    assert call_count == 1


@pytest.mark.asyncio
async def test_retry_on_failure_async_handshake_error():
    call_count = 0

    @retry_on_failure(max_retries=1, delay=0.25)
    async def handshake():
        nonlocal call_count
        call_count += 1
        if call_count == 1:
            raise InvalidHandshake("server rejected upgrade")
        return "open"

    with patch(
        "shopsocket.core.simple_error_handler.asyncio.sleep", new_callable=AsyncMock
    ) as mock_sleep:
        assert await handshake() == "open"

    assert call_count == 2
    mock_sleep.assert_awaited_once_with(0.25)


def test_safe_call_success():
    assert safe_call(lambda x: x * 2, 21) == (True, 42)


def test_safe_call_failure():
    def boom():
        raise RuntimeError("boom")

    with patch("shopsocket.core.simple_error_handler.logger.error") as mock_error:
        success, error = safe_call(boom)

    assert success is False
    assert isinstance(error, RuntimeError)
    assert mock_error.call_args[1]["func_name"] == "boom"
