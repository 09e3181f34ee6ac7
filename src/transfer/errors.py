"""Typed exception hierarchy for transfer errors.

All exceptions inherit from TransferError and include descriptive messages
with context to help with debugging.
"""

from src.image_links.errors import ImageRelayError


class TransferError(ImageRelayError):
    """Base exception for all transfer errors."""
    pass


class TransferBackendError(TransferError):
    """Raised when the transfer backend fails or returns an unusable response."""

    def __init__(self, endpoint: str, reason: str):
        super().__init__(f"Transfer backend failure at {endpoint}: {reason}")
        self.endpoint = endpoint
        self.reason = reason


class APIAccessError(TransferError):
    """Raised when the backend keeps rate limiting after all retries."""

    def __init__(self, message: str = "Transfer backend failure (after 3 retries)"):
        super().__init__(message)


class ResultCountMismatchError(TransferError):
    """Raised when an upload returns a different number of results than inputs.

    The rewrite step must never be applied partially when this happens.
    """

    def __init__(self, expected: int, received: int):
        super().__init__(
            f"Upload returned {received} result(s) for {expected} image(s)"
        )
        self.expected = expected
        self.received = received


class UploadFailedError(TransferError):
    """Raised when an upload call fails as a whole; no rewrite follows."""

    def __init__(self, document_path: str, reason: str):
        super().__init__(f"Upload failed for {document_path}: {reason}")
        self.document_path = document_path
        self.reason = reason
