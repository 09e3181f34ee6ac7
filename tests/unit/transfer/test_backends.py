"""Unit tests for transfer.backends module."""

from unittest.mock import Mock, patch

import pytest
import requests

from src.transfer.backends import ACCEPT_HEADER, HttpTransferBackend
from src.transfer.errors import TransferBackendError

UPLOAD_URL = "http://127.0.0.1:36677/upload"


def _response(status_code=200, json_data=None, content=b"", headers=None):
    response = Mock()
    response.status_code = status_code
    response.content = content
    response.headers = headers or {}
    response.json.return_value = json_data
    response.raise_for_status.return_value = None
    return response


@pytest.fixture
def session():
    mock_session = Mock(spec=requests.Session)
    mock_session.headers = {}
    return mock_session


class TestUploadLocal:
    """Test cases for HttpTransferBackend.upload_local."""

    def test_posts_file_list(self, session):
        """Files are posted as a JSON list and URLs returned in order."""
        session.post.return_value = _response(json_data={
            "success": True,
            "result": ["https://cdn/a.png", "https://cdn/b.png"],
        })
        backend = HttpTransferBackend(UPLOAD_URL, session=session)

        result = backend.upload_local(["/vault/a.png", "/vault/b.png"])

        assert result.success is True
        assert result.urls == ["https://cdn/a.png", "https://cdn/b.png"]
        session.post.assert_called_once_with(
            UPLOAD_URL,
            json={"list": ["/vault/a.png", "/vault/b.png"]},
            headers={},
            timeout=60,
        )

    def test_bearer_token_header(self, session):
        """The upload token is sent as a bearer token."""
        session.post.return_value = _response(json_data={"success": True, "result": []})
        backend = HttpTransferBackend(UPLOAD_URL, upload_token="tok", session=session)

        backend.upload_local(["/vault/a.png"])

        assert session.post.call_args.kwargs["headers"] == {"Authorization": "Bearer tok"}

    def test_failure_message_is_returned(self, session):
        """A rejected upload carries the backend's message."""
        session.post.return_value = _response(json_data={"success": False, "msg": "disk full"})
        backend = HttpTransferBackend(UPLOAD_URL, session=session)

        result = backend.upload_local(["/vault/a.png"])

        assert result.success is False
        assert result.message == "disk full"

    def test_connection_error(self, session):
        """An unreachable service raises TransferBackendError."""
        session.post.side_effect = requests.exceptions.ConnectionError("refused")
        backend = HttpTransferBackend(UPLOAD_URL, session=session)

        with pytest.raises(TransferBackendError) as exc_info:
            backend.upload_local(["/vault/a.png"])

        assert "unreachable" in str(exc_info.value)

    def test_invalid_json(self, session):
        """A non-JSON answer raises TransferBackendError."""
        response = _response()
        response.json.side_effect = ValueError("no json")
        session.post.return_value = response
        backend = HttpTransferBackend(UPLOAD_URL, session=session)

        with pytest.raises(TransferBackendError) as exc_info:
            backend.upload_local(["/vault/a.png"])

        assert "not valid JSON" in str(exc_info.value)

    def test_token_is_redacted_from_errors(self, session):
        """The upload token never appears in error messages."""
        session.post.side_effect = requests.exceptions.RequestException("bad header Bearer tok-123")
        backend = HttpTransferBackend(UPLOAD_URL, upload_token="tok-123", session=session)

        with pytest.raises(TransferBackendError) as exc_info:
            backend.upload_local(["/vault/a.png"])

        assert "tok-123" not in str(exc_info.value)
        assert "***REDACTED***" in str(exc_info.value)


class TestFetchRemote:
    """Test cases for HttpTransferBackend.fetch_remote."""

    def test_returns_status_and_content(self, session):
        """Fetched bytes are returned with the status."""
        session.get.return_value = _response(
            content=b"\x89PNG", headers={"Content-Type": "image/png"}
        )
        backend = HttpTransferBackend(UPLOAD_URL, fetch_timeout=5, session=session)

        result = backend.fetch_remote("https://x.com/a.png")

        assert result.status == 200
        assert result.content == b"\x89PNG"
        assert result.content_type == "image/png"
        session.get.assert_called_once_with(
            "https://x.com/a.png",
            headers={"Accept": ACCEPT_HEADER},
            timeout=5,
        )

    def test_not_found_is_returned_not_raised(self, session):
        """A 404 answer is reported through the status."""
        session.get.return_value = _response(status_code=404)
        backend = HttpTransferBackend(UPLOAD_URL, session=session)

        assert backend.fetch_remote("https://x.com/a.png").status == 404

    @patch('src.transfer.retry_logic.time.sleep')
    def test_rate_limit_is_retried(self, mock_sleep, session):
        """A 429 answer is retried."""
        limited = _response(status_code=429)
        error = requests.exceptions.HTTPError("429 Client Error: Too Many Requests")
        error.response = limited
        limited.raise_for_status.side_effect = error
        session.get.side_effect = [limited, _response(content=b"ok")]
        backend = HttpTransferBackend(UPLOAD_URL, session=session)

        result = backend.fetch_remote("https://x.com/a.png")

        assert result.content == b"ok"
        mock_sleep.assert_called_once_with(1)

    def test_network_error(self, session):
        """Network failures raise TransferBackendError."""
        session.get.side_effect = requests.exceptions.Timeout("timed out")
        backend = HttpTransferBackend(UPLOAD_URL, session=session)

        with pytest.raises(TransferBackendError):
            backend.fetch_remote("https://x.com/a.png")
