"""Document rewriting after a transfer.

Every occurrence of a reference's source text is replaced with freshly
rendered markup pointing at the transfer result. The new text is computed
in full before the caller writes it back, so a failing rewrite never leaves
a partially updated document.
"""

import logging
from typing import Protocol, Sequence

from src.image_links.models import ResolvedReference
from src.settings.models import DisplayNamePolicy, RelayConfig
from src.transfer.errors import ResultCountMismatchError
from src.vault.document_store import DocumentStore
from src.vault.errors import FilesystemError
from .display_name import render_display_name, render_markup

logger = logging.getLogger(__name__)


class Replaceable(Protocol):
    """Anything carrying a source span and a display name."""

    @property
    def source(self) -> str: ...

    @property
    def name(self) -> str: ...


class DocumentRewriter:
    """Renders transfer results back into document text.

    Example:
        >>> rewriter = DocumentRewriter(DisplayNamePolicy.KEEP, "|300")
        >>> rewriter.rewrite("![a](a.png)", [reference], ["https://cdn/a.png"])
        '![a|300](https://cdn/a.png)'
    """

    def __init__(self, policy: DisplayNamePolicy = DisplayNamePolicy.KEEP, size_suffix: str = ""):
        self.policy = policy
        self.size_suffix = size_suffix

    @classmethod
    def from_config(cls, config: RelayConfig) -> "DocumentRewriter":
        return cls(config.image_desc, config.image_size_suffix)

    def display_name(self, name: str) -> str:
        return render_display_name(name, self.policy, self.size_suffix)

    def markup(self, name: str, target: str) -> str:
        return render_markup(self.display_name(name), target)

    def rewrite(self, text: str, references: Sequence[Replaceable], results: Sequence[str]) -> str:
        """Replace each reference's source with markup for its result.

        Pairs are applied in positional order. All occurrences of an
        identical source are replaced identically. A pair with an empty
        result is skipped.

        Args:
            text: Current document text
            references: References whose sources are replaced
            results: New targets, aligned 1:1 with references

        Returns:
            The rewritten text

        Raises:
            ResultCountMismatchError: If the lengths differ (text is not touched)
        """
        if len(references) != len(results):
            raise ResultCountMismatchError(expected=len(references), received=len(results))

        for reference, result in zip(references, results):
            if not result:
                logger.debug(f"No result for {reference.source!r} - leaving it unchanged")
                continue
            text = text.replace(reference.source, self.markup(reference.name, result))
        return text

    def trash_sources(self, references: Sequence[ResolvedReference], store: DocumentStore) -> int:
        """Move uploaded local source files to the trash, best effort.

        Only references bound to a local file are touched. Failures are
        logged and never undo the rewrite.

        Returns:
            Number of files trashed
        """
        trashed = 0
        seen = set()
        for reference in references:
            if reference.file is None or reference.is_remote:
                continue
            if reference.file.path in seen:
                continue
            seen.add(reference.file.path)
            try:
                store.trash(reference.file.path)
                trashed += 1
            except FilesystemError as e:
                logger.warning(f"Could not delete source image: {e}")
        return trashed
