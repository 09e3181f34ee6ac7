"""Typed exceptions for pipeline orchestration errors."""

from typing import Optional

from src.image_links.errors import ImageRelayError


class PipelineError(ImageRelayError):
    """Base exception for pipeline orchestration errors."""
    pass


class DocumentContextChangedError(PipelineError):
    """Raised when the active document changed while a transfer was in flight.

    The operation is abandoned so the wrong open document is never rewritten.
    """

    def __init__(self, expected: str, actual: Optional[str]):
        super().__init__(
            f"Active document changed from {expected} to {actual or '<none>'}; "
            f"upload result was not applied"
        )
        self.expected = expected
        self.actual = actual


class NotAnImageError(PipelineError):
    """Raised when an image operation is asked to handle a non-image file."""

    def __init__(self, file_path: str):
        super().__init__(f"Not an image file: {file_path}")
        self.file_path = file_path
