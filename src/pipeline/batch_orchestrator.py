"""Batch transfer across every markdown document of a folder.

Documents are processed strictly one after another. A failing document is
reported and counted; it never stops the batch.
"""

import logging
from typing import Callable, List, Optional

from .image_pipeline import ImagePipeline
from .models import BatchSummary, DocumentOutcome

logger = logging.getLogger(__name__)


class BatchOrchestrator:
    """Drives the image pipeline over a folder of documents.

    The optional hooks let a host editor follow along: open_document is
    called before each document of an upload batch, and the document that
    was active before the batch is reopened afterwards.

    Example:
        >>> batch = BatchOrchestrator(pipeline)
        >>> summary = asyncio.run(batch.upload_folder("notes"))
        >>> print(f"{summary.succeeded}/{summary.total_images} images uploaded")
    """

    def __init__(
        self,
        pipeline: ImagePipeline,
        open_document: Optional[Callable[[str], None]] = None,
        active_document: Optional[Callable[[], Optional[str]]] = None,
    ):
        self.pipeline = pipeline
        self.open_document = open_document
        self.active_document = active_document

    @property
    def notify(self) -> Callable[[str], None]:
        return self.pipeline.context.notify

    def _list_documents(self, folder: str) -> List[str]:
        documents = self.pipeline.context.store.list_documents(folder)
        if not documents:
            self.notify("No markdown files found in folder")
        else:
            self.notify(f"Processing {len(documents)} file(s)...")
        return documents

    def _record_failure(self, summary: BatchSummary, document: str, error: Exception) -> None:
        logger.error(f"Error processing {document}: {error}")
        self.notify(f"{document}: {error}")
        summary.failed_documents.append(document)

    def _record_outcome(self, summary: BatchSummary, outcome: DocumentOutcome, verb: str) -> None:
        summary.total_images += outcome.images
        summary.succeeded += outcome.succeeded
        if outcome.succeeded:
            self.notify(f"{outcome.document_path}: {verb} {outcome.succeeded} image(s)")

    async def upload_folder(self, folder: str) -> BatchSummary:
        """Upload the images of every markdown document in a folder.

        Args:
            folder: Vault path of the folder (its direct children are used)

        Returns:
            BatchSummary with the accumulated counters
        """
        documents = self._list_documents(folder)
        summary = BatchSummary(total_documents=len(documents))
        if not documents:
            return summary

        original = self.active_document() if self.active_document else None
        try:
            for document in documents:
                try:
                    if self.open_document:
                        self.open_document(document)
                    outcome = await self.pipeline.upload_document(document, announce=False)
                    self._record_outcome(summary, outcome, "uploaded")
                except Exception as e:
                    self._record_failure(summary, document, e)
                summary.processed += 1
        finally:
            if self.open_document and original:
                self.open_document(original)

        logger.info(
            f"Batch upload finished: {summary.processed}/{summary.total_documents} file(s), "
            f"{summary.succeeded}/{summary.total_images} image(s)"
        )
        return summary

    async def download_folder(self, folder: str) -> BatchSummary:
        """Download the remote images of every markdown document in a folder.

        Args:
            folder: Vault path of the folder (its direct children are used)

        Returns:
            BatchSummary with the accumulated counters
        """
        documents = self._list_documents(folder)
        summary = BatchSummary(total_documents=len(documents))

        for document in documents:
            try:
                outcome = await self.pipeline.download_document(document)
                self._record_outcome(summary, outcome, "downloaded")
            except Exception as e:
                self._record_failure(summary, document, e)
            summary.processed += 1

        logger.info(
            f"Batch download finished: {summary.processed}/{summary.total_documents} file(s), "
            f"{summary.succeeded}/{summary.total_images} image(s)"
        )
        return summary
