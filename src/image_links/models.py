"""Data models for image references and transfer results.

This module defines the records that flow through the pipeline:
text → Reference → ResolvedReference → TransferResult/DownloadResult.
All models use dataclasses for clean, type-safe data structures.
"""

import re
from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional

REMOTE_SCHEME = re.compile(r"https?://", re.IGNORECASE)


def is_remote_path(path: str) -> bool:
    """Return True when a reference path points at a network resource."""
    return REMOTE_SCHEME.match(path) is not None


@dataclass(frozen=True)
class VaultFile:
    """A file known to the document store.

    Attributes:
        path: Vault-relative POSIX path (e.g., "assets/diagram.png")
        name: File name including extension (e.g., "diagram.png")
    """
    path: str
    name: str


@dataclass(frozen=True)
class Reference:
    """One located image mention inside a document.

    Attributes:
        source: Exact original substring of the document, used as replace key
        path: Extracted target, a local path or an absolute URL
        name: Display label (alt text, wiki display name or derived name)
    """
    source: str
    path: str
    name: str

    @property
    def is_remote(self) -> bool:
        return is_remote_path(self.path)


@dataclass(frozen=True)
class ResolvedReference:
    """A Reference bound to a concrete file (or to nothing, when remote).

    Attributes:
        reference: The reference as extracted from the document
        path: Normalized vault path of the bound file, or the URL when remote
        file: Bound VaultFile, None for remote references
    """
    reference: Reference
    path: str
    file: Optional[VaultFile] = None

    @property
    def source(self) -> str:
        return self.reference.source

    @property
    def name(self) -> str:
        return self.reference.name

    @property
    def is_remote(self) -> bool:
        return self.file is None and is_remote_path(self.path)


@dataclass
class TransferResult:
    """Result of an upload dispatch.

    On success, results is positionally aligned 1:1 with the input list.

    Attributes:
        success: False when the backend reported or raised a failure
        results: Output locations (remote URLs) in input order
        error: Human-readable failure reason when success is False
    """
    success: bool
    results: List[str] = field(default_factory=list)
    error: Optional[str] = None


@dataclass
class DownloadResult:
    """Per-item result of downloading one remote reference.

    Attributes:
        reference: The remote reference that was fetched
        ok: True when the asset was saved locally
        path: Saved location relative to the owning document's directory
        name: Sanitized file stem used for the saved asset
        error: Failure reason when ok is False
    """
    reference: Reference
    ok: bool
    path: str = ""
    name: str = ""
    error: Optional[str] = None


@dataclass(frozen=True)
class BlockList:
    """Set of domain substrings excluded from remote processing.

    Example:
        >>> BlockList.parse("evil.com, ads.example.org,")
        BlockList(domains=frozenset({'evil.com', 'ads.example.org'}))
    """
    domains: FrozenSet[str] = frozenset()

    @classmethod
    def parse(cls, value: Optional[str]) -> "BlockList":
        """Build a block list from a comma-joined configuration string."""
        if not value:
            return cls()
        entries = (item.strip() for item in value.split(","))
        return cls(frozenset(entry for entry in entries if entry))

    def __bool__(self) -> bool:
        return bool(self.domains)
