"""Data models for interactive paste and drop events."""

import mimetypes
import ntpath
from dataclasses import dataclass, field
from typing import List

from src.vault.path_resolver import is_image_asset


@dataclass(frozen=True)
class ClipboardFile:
    """A file carried by a paste or drop event.

    Attributes:
        name: File name shown to the user
        path: Absolute path of the file on disk
        mime_type: MIME type reported by the host, empty when unknown
    """
    name: str
    path: str
    mime_type: str = ""

    @classmethod
    def from_path(cls, path: str) -> "ClipboardFile":
        """Describe a file on disk, guessing its MIME type from the name."""
        mime_type, _ = mimetypes.guess_type(path)
        name = ntpath.basename(path)
        return cls(name=name, path=path, mime_type=mime_type or "")

    @property
    def is_image(self) -> bool:
        if self.mime_type:
            return self.mime_type.startswith("image")
        return is_image_asset(self.name)


@dataclass
class ClipboardPayload:
    """Content of a paste event.

    Attributes:
        text: Plain text on the clipboard
        files: Files on the clipboard
    """
    text: str = ""
    files: List[ClipboardFile] = field(default_factory=list)
