"""Document store over a vault directory on the local file system.

The pipeline only talks to the narrow DocumentStore interface; the
LocalDocumentStore implementation maps vault-relative POSIX paths onto a
root directory, writes atomically and moves deleted files into the vault's
.trash folder instead of unlinking them.
"""

import logging
import os
import posixpath
import shutil
import tempfile
from typing import List, Protocol

from src.image_links.models import VaultFile
from .errors import FilesystemError

logger = logging.getLogger(__name__)

# Maximum document size read into memory
MAX_DOCUMENT_SIZE = 10 * 1024 * 1024  # 10 MB in bytes

TRASH_FOLDER = ".trash"


class DocumentStore(Protocol):
    """File-system primitives the pipeline depends on.

    All paths are vault-relative POSIX strings (e.g., "notes/day.md").
    """

    def read(self, path: str) -> str: ...

    def write(self, path: str, text: str) -> None: ...

    def write_binary(self, path: str, data: bytes) -> None: ...

    def list_files(self) -> List[VaultFile]: ...

    def list_documents(self, folder: str) -> List[str]: ...

    def exists(self, path: str) -> bool: ...

    def ensure_folder(self, path: str) -> None: ...

    def trash(self, path: str) -> None: ...

    def absolute_path(self, path: str) -> str: ...


class LocalDocumentStore:
    """DocumentStore backed by a directory on disk.

    Example:
        >>> store = LocalDocumentStore("./vault")
        >>> text = store.read("notes/day.md")
        >>> store.write("notes/day.md", text.replace("old", "new"))
    """

    def __init__(self, root: str):
        """Initialize the store.

        Args:
            root: Vault root directory

        Raises:
            FilesystemError: If root is not an existing directory
        """
        if not os.path.isdir(root):
            raise FilesystemError(root, 'open', 'Vault root is not a directory')
        self.root = os.path.realpath(root)

    def absolute_path(self, path: str) -> str:
        """Map a vault path to an absolute path inside the vault.

        Raises:
            FilesystemError: If the path escapes the vault root
        """
        candidate = os.path.realpath(os.path.join(self.root, *path.split("/")))
        if not candidate.startswith(self.root + os.sep) and candidate != self.root:
            raise FilesystemError(
                path,
                'validate',
                f'Path traversal detected: {path} is outside vault {self.root}'
            )
        return candidate

    def vault_path(self, absolute: str) -> str:
        """Map an absolute (or cwd-relative) path to a vault path.

        Raises:
            FilesystemError: If the path lies outside the vault root
        """
        real_path = os.path.realpath(absolute)
        if not real_path.startswith(self.root + os.sep) and real_path != self.root:
            raise FilesystemError(absolute, 'validate', f'Path is outside vault {self.root}')
        relative = os.path.relpath(real_path, self.root)
        return "" if relative == "." else relative.replace(os.sep, "/")

    def read(self, path: str) -> str:
        file_path = self.absolute_path(path)
        try:
            size = os.path.getsize(file_path)
            if size > MAX_DOCUMENT_SIZE:
                raise FilesystemError(
                    path,
                    'read',
                    f'File size ({size / (1024 * 1024):.2f} MB) exceeds maximum allowed size'
                )
            with open(file_path, 'r', encoding='utf-8') as f:
                return f.read()
        except FileNotFoundError:
            raise FilesystemError(path, 'read', 'File not found')
        except PermissionError:
            raise FilesystemError(path, 'read', 'Permission denied')
        except UnicodeDecodeError as e:
            raise FilesystemError(path, 'read', f'Not valid UTF-8: {e}')
        except OSError as e:
            raise FilesystemError(path, 'read', str(e))

    def write(self, path: str, text: str) -> None:
        """Replace a document's content atomically.

        The new text is staged in a temporary file next to the target and
        moved over it, so readers never observe a partial write.
        """
        self._write_atomic(path, text.encode('utf-8'))

    def write_binary(self, path: str, data: bytes) -> None:
        self._write_atomic(path, data)

    def _write_atomic(self, path: str, data: bytes) -> None:
        file_path = self.absolute_path(path)
        directory = os.path.dirname(file_path)
        temp_path = None
        try:
            os.makedirs(directory, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(dir=directory, prefix=".image-relay-", suffix=".tmp")
            with os.fdopen(fd, 'wb') as f:
                f.write(data)
            os.replace(temp_path, file_path)
            temp_path = None
        except PermissionError:
            raise FilesystemError(path, 'write', 'Permission denied')
        except OSError as e:
            raise FilesystemError(path, 'write', str(e))
        finally:
            if temp_path and os.path.exists(temp_path):
                try:
                    os.remove(temp_path)
                except OSError as e:
                    logger.warning(f"Failed to remove temp file {temp_path}: {e}")

        logger.debug(f"Wrote {len(data)} byte(s) to {path}")

    def list_files(self) -> List[VaultFile]:
        """List every file in the vault, skipping hidden folders."""
        files: List[VaultFile] = []
        try:
            for root, dirs, names in os.walk(self.root):
                dirs[:] = sorted(d for d in dirs if not d.startswith('.'))
                for name in sorted(names):
                    relative = os.path.relpath(os.path.join(root, name), self.root)
                    files.append(VaultFile(path=relative.replace(os.sep, "/"), name=name))
        except OSError as e:
            raise FilesystemError(self.root, 'list', str(e))
        return files

    def list_documents(self, folder: str) -> List[str]:
        """List the markdown documents directly inside a folder (not recursive)."""
        folder_path = self.absolute_path(folder) if folder else self.root
        if not os.path.isdir(folder_path):
            raise FilesystemError(folder or ".", 'list', 'Not a directory')
        documents = []
        for name in sorted(os.listdir(folder_path)):
            if name.endswith('.md') and os.path.isfile(os.path.join(folder_path, name)):
                documents.append(posixpath.join(folder, name) if folder else name)
        return documents

    def exists(self, path: str) -> bool:
        return os.path.exists(self.absolute_path(path))

    def ensure_folder(self, path: str) -> None:
        folder_path = self.absolute_path(path)
        try:
            os.makedirs(folder_path, exist_ok=True)
        except OSError as e:
            raise FilesystemError(path, 'create_directory', str(e))

    def trash(self, path: str) -> None:
        """Move a file into the vault's .trash folder.

        An existing entry with the same name is never overwritten; a
        numbered suffix is added instead.
        """
        file_path = self.absolute_path(path)
        trash_dir = os.path.join(self.root, TRASH_FOLDER)
        base, ext = os.path.splitext(os.path.basename(file_path))
        target = os.path.join(trash_dir, base + ext)
        index = 1
        while os.path.exists(target):
            target = os.path.join(trash_dir, f"{base} ({index}){ext}")
            index += 1
        try:
            os.makedirs(trash_dir, exist_ok=True)
            shutil.move(file_path, target)
        except OSError as e:
            raise FilesystemError(path, 'trash', str(e))
        logger.info(f"Moved {path} to trash")
