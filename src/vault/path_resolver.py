"""Resolution of local image references against the vault's file tree.

A local reference path is bound to a concrete file using a strict priority
order, first match wins:

1. Exact match of the decoded path against the full-path index
2. For "./" and "../" paths, the path joined with the document's folder
3. The bare file name against the name-only index

The name-only fallback tolerates documents that use short file names
without folders. When several files share a basename, the last one listed
by the store owns the name-only slot, so a short name can bind to a file
in another folder than the author meant.
"""

import logging
import posixpath
from typing import Dict, Iterable, Optional
from urllib.parse import unquote

from src.image_links.models import Reference, ResolvedReference, VaultFile

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = frozenset({
    ".png", ".jpg", ".jpeg", ".bmp", ".gif", ".svg", ".tiff", ".webp", ".avif",
})


def is_image_asset(path: str) -> bool:
    """Check whether a path has a recognized image file extension."""
    return posixpath.splitext(path)[1].lower() in IMAGE_EXTENSIONS


def normalize_path(path: str) -> str:
    """Normalize a vault path to its canonical POSIX form.

    Examples:
        >>> normalize_path("/notes//./img/../pic.png/")
        'notes/pic.png'
    """
    normalized = posixpath.normpath(path.replace("\\", "/"))
    normalized = normalized.strip("/")
    return "" if normalized == "." else normalized


class FileIndex:
    """Full-path and name-only lookup tables over the vault's files."""

    def __init__(self, by_path: Dict[str, VaultFile], by_name: Dict[str, VaultFile]):
        self.by_path = by_path
        self.by_name = by_name

    @classmethod
    def build(cls, files: Iterable[VaultFile]) -> "FileIndex":
        by_path: Dict[str, VaultFile] = {}
        by_name: Dict[str, VaultFile] = {}
        for vault_file in files:
            by_path[vault_file.path] = vault_file
            by_name[vault_file.name] = vault_file
        return cls(by_path, by_name)

    def __len__(self) -> int:
        return len(self.by_path)


class PathResolver:
    """Binds local references to files of a FileIndex.

    Example:
        >>> index = FileIndex.build(store.list_files())
        >>> resolver = PathResolver(index)
        >>> resolved = resolver.resolve(reference, "notes/day.md")
    """

    def __init__(self, index: FileIndex):
        self.index = index

    def find_file(self, reference_path: str, document_path: str) -> Optional[VaultFile]:
        """Look up the file a local reference path points at.

        Args:
            reference_path: Path as written in the document (may be percent-encoded)
            document_path: Vault path of the document containing the reference

        Returns:
            The matching VaultFile, or None when no tier matches
        """
        decoded = unquote(reference_path)

        found = self.index.by_path.get(decoded)
        if found is not None:
            return found

        if decoded.startswith("./") or decoded.startswith("../"):
            joined = normalize_path(posixpath.join(posixpath.dirname(document_path), decoded))
            found = self.index.by_path.get(joined)
            if found is not None:
                return found

        return self.index.by_name.get(posixpath.basename(decoded))

    def resolve(self, reference: Reference, document_path: str) -> Optional[ResolvedReference]:
        """Resolve a reference for transfer.

        Remote references pass through unbound. Local references must bind
        to an image file; anything else is unresolved.

        Args:
            reference: Extracted reference
            document_path: Vault path of the owning document

        Returns:
            ResolvedReference, or None when the local reference is unresolved
        """
        if reference.is_remote:
            return ResolvedReference(reference=reference, path=reference.path, file=None)

        found = self.find_file(reference.path, document_path)
        if found is None:
            logger.debug(f"Unresolved local image: {reference.path}")
            return None

        if not is_image_asset(found.path):
            logger.debug(f"Resolved {reference.path} to non-image file {found.path}")
            return None

        return ResolvedReference(
            reference=reference,
            path=normalize_path(found.path),
            file=found,
        )
