"""Unit tests for transfer.retry_logic module."""

from unittest.mock import Mock, patch

import pytest

from src.transfer.errors import APIAccessError
from src.transfer.retry_logic import MAX_RETRIES, MAX_RETRY_AFTER, _is_rate_limit_error, retry_on_rate_limit


class RateLimited(Exception):
    """Exception carrying an HTTP status like requests.HTTPError."""

    def __init__(self, status_code: int):
        super().__init__(f"HTTP {status_code}")
        self.status_code = status_code


class TestRetryOnRateLimit:
    """Test cases for retry_on_rate_limit function."""

    @patch('src.transfer.retry_logic.time.sleep')
    def test_success_first_try(self, mock_sleep):
        """A successful call returns immediately."""
        func = Mock(return_value="ok")

        assert retry_on_rate_limit(func, 1, key="v") == "ok"
        func.assert_called_once_with(1, key="v")
        mock_sleep.assert_not_called()

    @patch('src.transfer.retry_logic.time.sleep')
    def test_retries_with_exponential_backoff(self, mock_sleep):
        """Rate limited calls are retried after 1s then 2s."""
        func = Mock(side_effect=[RateLimited(429), RateLimited(503), "ok"])

        assert retry_on_rate_limit(func) == "ok"
        assert [call.args[0] for call in mock_sleep.call_args_list] == [1, 2]

    @patch('src.transfer.retry_logic.time.sleep')
    def test_gives_up_after_max_retries(self, mock_sleep):
        """Persistent rate limiting raises APIAccessError."""
        func = Mock(side_effect=RateLimited(429))

        with pytest.raises(APIAccessError):
            retry_on_rate_limit(func)

        assert func.call_count == MAX_RETRIES + 1
        assert [call.args[0] for call in mock_sleep.call_args_list] == [1, 2, 4]

    @patch('src.transfer.retry_logic.time.sleep')
    def test_other_errors_fail_fast(self, mock_sleep):
        """Errors that are not rate limits propagate without retry."""
        func = Mock(side_effect=ValueError("boom"))

        with pytest.raises(ValueError):
            retry_on_rate_limit(func)

        func.assert_called_once()
        mock_sleep.assert_not_called()


class TestIsRateLimitError:
    """Test cases for _is_rate_limit_error function."""

    def test_message_patterns(self):
        """Known rate limit phrases are recognized."""
        assert _is_rate_limit_error(Exception("429 Client Error: Too Many Requests"))
        assert _is_rate_limit_error(Exception("Rate limit exceeded"))

    def test_response_status(self):
        """A response attribute with status 429 is recognized."""
        error = Exception("failed")
        error.response = Mock(status_code=429)

        assert _is_rate_limit_error(error)

    def test_unrelated_error(self):
        """Other errors are not rate limits."""
        assert not _is_rate_limit_error(Exception("404 Client Error: Not Found"))


class TestRetryAfter:
    """Test cases for honouring the Retry-After header."""

    @patch('src.transfer.retry_logic.time.sleep')
    def test_retry_after_header(self, mock_sleep):
        """A numeric Retry-After replaces the default backoff."""
        error = RateLimited(429)
        error.response = Mock(status_code=429, headers={"Retry-After": "7"})
        func = Mock(side_effect=[error, "ok"])

        assert retry_on_rate_limit(func) == "ok"
        mock_sleep.assert_called_once_with(7)

    @patch('src.transfer.retry_logic.time.sleep')
    def test_retry_after_is_capped(self, mock_sleep):
        """Very long Retry-After values are capped."""
        error = RateLimited(503)
        error.response = Mock(status_code=503, headers={"Retry-After": "3600"})
        func = Mock(side_effect=[error, "ok"])

        retry_on_rate_limit(func)

        mock_sleep.assert_called_once_with(MAX_RETRY_AFTER)
