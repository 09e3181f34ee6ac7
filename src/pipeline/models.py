"""Data models for pipeline results.

All models use dataclasses for clean, type-safe data structures.
"""

from dataclasses import dataclass, field
from typing import List

from src.image_links.models import ResolvedReference


@dataclass
class CollectedImages:
    """References of one document that are ready for transfer.

    Attributes:
        references: Resolved references in extraction order
        candidates: References left after domain filtering
        unresolved: Local references that could not be bound to an image file
    """
    references: List[ResolvedReference] = field(default_factory=list)
    candidates: int = 0
    unresolved: int = 0


@dataclass
class DocumentOutcome:
    """Result of running one transfer operation on one document.

    Attributes:
        document_path: Vault path of the document
        images: Images considered for transfer
        succeeded: Images transferred and rewritten
        unresolved: Local references skipped because no file matched
        trashed: Source files moved to the trash afterwards
    """
    document_path: str
    images: int = 0
    succeeded: int = 0
    unresolved: int = 0
    trashed: int = 0


@dataclass
class BatchSummary:
    """Counters accumulated over a batch run.

    Attributes:
        total_documents: Markdown documents found in the folder
        processed: Documents visited (including skipped and failed ones)
        total_images: Images considered across all documents
        succeeded: Images transferred and rewritten
        failed_documents: Vault paths of documents whose operation failed
    """
    total_documents: int = 0
    processed: int = 0
    total_images: int = 0
    succeeded: int = 0
    failed_documents: List[str] = field(default_factory=list)
