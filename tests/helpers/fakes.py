"""In-memory collaborators for unit tests.

InMemoryDocumentStore and FakeBackend implement the DocumentStore and
TransferBackend protocols without touching disk or network.
"""

import posixpath
from typing import Dict, List, Optional, Union

from src.image_links.models import VaultFile
from src.transfer.backends import FetchResponse, UploadResponse
from src.vault.errors import FilesystemError

VAULT_ROOT = "/vault"


class InMemoryDocumentStore:
    """Vault held in a dict of path -> text or bytes."""

    def __init__(self, files: Optional[Dict[str, Union[str, bytes]]] = None):
        self.files: Dict[str, Union[str, bytes]] = dict(files or {})
        self.folders: List[str] = []
        self.trashed: List[str] = []
        self.writes: List[str] = []

    def absolute_path(self, path: str) -> str:
        return posixpath.join(VAULT_ROOT, path)

    def read(self, path: str) -> str:
        if path not in self.files:
            raise FilesystemError(path, 'read', 'File not found')
        content = self.files[path]
        return content if isinstance(content, str) else content.decode("utf-8")

    def write(self, path: str, content: str) -> None:
        self.files[path] = content
        self.writes.append(path)

    def write_binary(self, path: str, content: bytes) -> None:
        self.files[path] = content

    def list_files(self) -> List[VaultFile]:
        return [
            VaultFile(path=path, name=posixpath.basename(path))
            for path in sorted(self.files)
        ]

    def list_documents(self, folder: str) -> List[str]:
        return sorted(
            path for path in self.files
            if path.endswith(".md") and posixpath.dirname(path) == folder
        )

    def exists(self, path: str) -> bool:
        return path in self.files

    def ensure_folder(self, path: str) -> None:
        self.folders.append(path)

    def trash(self, path: str) -> None:
        if path not in self.files:
            raise FilesystemError(path, 'trash', 'File not found')
        del self.files[path]
        self.trashed.append(path)


class FakeBackend:
    """Transfer backend answering from canned data.

    Uploads return https://cdn.example.com/<basename> per input unless urls
    is given. Fetches return the bytes registered in remote, or a 404.
    """

    def __init__(
        self,
        urls: Optional[List[str]] = None,
        success: bool = True,
        message: Optional[str] = None,
        error: Optional[Exception] = None,
        remote: Optional[Dict[str, Union[bytes, int]]] = None,
    ):
        self.urls = urls
        self.success = success
        self.message = message
        self.error = error
        self.remote = dict(remote or {})
        self.upload_calls: List[List[str]] = []
        self.fetch_calls: List[str] = []

    def upload_local(self, files: List[str]) -> UploadResponse:
        self.upload_calls.append(list(files))
        if self.error is not None:
            raise self.error
        if not self.success:
            return UploadResponse(success=False, message=self.message)
        if self.urls is not None:
            return UploadResponse(success=True, urls=list(self.urls))
        return UploadResponse(
            success=True,
            urls=[f"https://cdn.example.com/{posixpath.basename(item)}" for item in files],
        )

    def fetch_remote(self, url: str) -> FetchResponse:
        self.fetch_calls.append(url)
        answer = self.remote.get(url, 404)
        if isinstance(answer, int):
            return FetchResponse(status=answer)
        return FetchResponse(status=200, content=answer, content_type="image/png")
