"""Typed exception hierarchy for vault (file tree) errors.

All exceptions inherit from VaultError and include descriptive messages
with context to help with debugging.
"""

from typing import Optional

from src.image_links.errors import ImageRelayError


class VaultError(ImageRelayError):
    """Base exception for all vault errors."""
    pass


class FilesystemError(VaultError):
    """Raised when filesystem operations fail (read, write, trash, etc)."""

    def __init__(self, file_path: str, operation: str, reason: Optional[str] = None):
        message = f"Filesystem operation '{operation}' failed for {file_path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.file_path = file_path
        self.operation = operation
        self.reason = reason


class FrontmatterError(VaultError):
    """Raised when YAML frontmatter parsing or validation fails."""

    def __init__(self, file_path: str, message: str):
        super().__init__(
            f"Frontmatter error in {file_path}: {message}"
        )
        self.file_path = file_path
        self.message = message
