"""Transfer backends that move image bytes.

The dispatcher talks to a backend through two blocking calls:

- upload_local(files): hand a list of local file paths (or URLs to re-host)
  to the upload service and get one URL back per input
- fetch_remote(url): download a remote asset

HttpTransferBackend speaks the PicGo/PicList HTTP server protocol:

    POST {upload_url}  {"list": ["/abs/path/a.png", "https://..."]}
    → {"success": true, "result": ["https://cdn/a.png", ...]}
"""

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Protocol

import requests
from requests.exceptions import ConnectionError, RequestException, Timeout

from .errors import TransferBackendError
from .retry_logic import RETRYABLE_STATUS_CODES, retry_on_rate_limit

logger = logging.getLogger(__name__)

USER_AGENT = "image-relay/0.1"
ACCEPT_HEADER = "image/avif,image/webp,image/apng,image/*,*/*;q=0.8"


@dataclass
class UploadResponse:
    """Backend answer to an upload request.

    Attributes:
        success: Whether the backend accepted every file
        urls: Uploaded locations in input order
        message: Backend-provided failure description
    """
    success: bool
    urls: List[str] = field(default_factory=list)
    message: Optional[str] = None


@dataclass
class FetchResponse:
    """Backend answer to a download request."""
    status: int
    content: bytes = b""
    content_type: Optional[str] = None


class TransferBackend(Protocol):
    """External service that actually moves bytes."""

    def upload_local(self, files: List[str]) -> UploadResponse: ...

    def fetch_remote(self, url: str) -> FetchResponse: ...


class HttpTransferBackend:
    """TransferBackend over HTTP using requests.

    Example:
        >>> backend = HttpTransferBackend("http://127.0.0.1:36677/upload")
        >>> response = backend.upload_local(["/vault/assets/a.png"])
        >>> response.urls
        ['https://cdn.example.com/a.png']
    """

    def __init__(
        self,
        upload_url: str,
        upload_token: Optional[str] = None,
        upload_timeout: int = 60,
        fetch_timeout: int = 30,
        session: Optional[requests.Session] = None,
    ):
        self.upload_url = upload_url
        self._upload_token = upload_token
        self.upload_timeout = upload_timeout
        self.fetch_timeout = fetch_timeout
        self._session = session or requests.Session()
        self._session.headers.setdefault("User-Agent", USER_AGENT)

    def _sanitize_credentials(self, text: str) -> str:
        """Mask the upload token and URL credentials in error messages."""
        if not text:
            return text
        sanitized = re.sub(r'://([\w.-]+):([\w.-]+)@', r'://***:***@', text)
        if self._upload_token:
            sanitized = sanitized.replace(self._upload_token, '***REDACTED***')
        return sanitized

    def upload_local(self, files: List[str]) -> UploadResponse:
        """Upload files through the configured endpoint.

        Raises:
            TransferBackendError: On network failure or a malformed response
        """
        headers = {}
        if self._upload_token:
            headers["Authorization"] = f"Bearer {self._upload_token}"

        def _post() -> requests.Response:
            response = self._session.post(
                self.upload_url,
                json={"list": files},
                headers=headers,
                timeout=self.upload_timeout,
            )
            response.raise_for_status()
            return response

        logger.info(f"Uploading {len(files)} file(s) to {self.upload_url}")
        try:
            response = retry_on_rate_limit(_post)
        except (Timeout, ConnectionError) as e:
            raise TransferBackendError(
                self.upload_url, f"Upload service unreachable: {self._sanitize_credentials(str(e))}"
            )
        except RequestException as e:
            raise TransferBackendError(self.upload_url, self._sanitize_credentials(str(e)))

        try:
            payload = response.json()
        except ValueError:
            raise TransferBackendError(self.upload_url, "Response is not valid JSON")

        if not isinstance(payload, dict):
            raise TransferBackendError(self.upload_url, "Response is not a JSON object")

        result = payload.get("result") or []
        if isinstance(result, str):
            result = [result]

        return UploadResponse(
            success=bool(payload.get("success")),
            urls=[str(url) for url in result],
            message=payload.get("msg") or payload.get("message"),
        )

    def fetch_remote(self, url: str) -> FetchResponse:
        """Download a remote asset.

        Non-200 answers are returned, not raised; only rate limit answers
        are retried.

        Raises:
            TransferBackendError: On network failure
        """
        def _get() -> requests.Response:
            response = self._session.get(
                url,
                headers={"Accept": ACCEPT_HEADER},
                timeout=self.fetch_timeout,
            )
            if response.status_code in RETRYABLE_STATUS_CODES:
                response.raise_for_status()
            return response

        logger.debug(f"Fetching {url}")
        try:
            response = retry_on_rate_limit(_get)
        except RequestException as e:
            raise TransferBackendError(url, self._sanitize_credentials(str(e)))

        return FetchResponse(
            status=response.status_code,
            content=response.content,
            content_type=response.headers.get("Content-Type"),
        )
