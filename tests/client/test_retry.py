"""Tests for retry_with_backoff."""

from unittest.mock import MagicMock, patch

import pytest

from walletconfig.client.retry import retry_with_backoff


class TestRetryWithBackoff:
    """Tests for exponential backoff retry."""

    def test_returns_on_first_success(self) -> None:
        """Should not retry when the call succeeds."""
        func = MagicMock(return_value="ok")
        assert retry_with_backoff(func, (ConnectionError,)) == "ok"
        assert func.call_count == 1

    def test_retries_then_succeeds(self) -> None:
        """Should retry retryable errors until success."""
        func = MagicMock(side_effect=[ConnectionError("down"), ConnectionError("down"), "ok"])
        with patch("walletconfig.client.retry.time.sleep") as mock_sleep:
            result = retry_with_backoff(func, (ConnectionError,), initial_backoff=1.0)
        assert result == "ok"
        assert func.call_count == 3
        assert [c.args[0] for c in mock_sleep.call_args_list] == [1.0, 2.0]

    def test_raises_after_max_retries(self) -> None:
        """Should re-raise the last error once retries are exhausted."""
        func = MagicMock(side_effect=ConnectionError("down"))
        with patch("walletconfig.client.retry.time.sleep"):
            with pytest.raises(ConnectionError):
                retry_with_backoff(func, (ConnectionError,), max_retries=2)
        assert func.call_count == 3

    def test_zero_retries_calls_once(self) -> None:
        """max_retries=0 means a single attempt."""
        func = MagicMock(side_effect=ConnectionError("down"))
        with patch("walletconfig.client.retry.time.sleep") as mock_sleep:
            with pytest.raises(ConnectionError):
                retry_with_backoff(func, (ConnectionError,), max_retries=0)
        assert func.call_count == 1
        mock_sleep.assert_not_called()

    def test_non_retryable_error_propagates(self) -> None:
        """Errors outside retryable_exceptions are raised immediately."""
        func = MagicMock(side_effect=ValueError("bad"))
        with pytest.raises(ValueError):
            retry_with_backoff(func, (ConnectionError,))
        assert func.call_count == 1

    def test_backoff_capped(self) -> None:
        """Backoff should not exceed max_backoff."""
        func = MagicMock(side_effect=[OSError(), OSError(), OSError(), "ok"])
        with patch("walletconfig.client.retry.time.sleep") as mock_sleep:
            retry_with_backoff(func, (OSError,), initial_backoff=4.0, max_backoff=5.0)
        assert [c.args[0] for c in mock_sleep.call_args_list] == [4.0, 5.0, 5.0]
