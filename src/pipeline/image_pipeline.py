"""Shared extract → filter → resolve → transfer → rewrite pipeline.

ImagePipeline runs the full flow on one stored document. It backs the
single-document commands and is called once per document by the batch
orchestrator.

Every rewrite re-reads the document right before writing it, so the change
applies to the then-current text. There is no lock between operations:
two operations writing the same document at the same time keep only the
last write.
"""

import logging
import posixpath
from dataclasses import replace
from typing import Callable, List, Optional, Sequence, Tuple
from urllib.parse import unquote

from src.image_links.domain_filter import filter_references
from src.image_links.extractor import extract_references
from src.image_links.models import ResolvedReference, VaultFile
from src.rewriter.display_name import encode_uri
from src.rewriter.document_rewriter import DocumentRewriter
from src.transfer.dispatcher import TransferDispatcher
from src.transfer.errors import ResultCountMismatchError, UploadFailedError
from src.vault.path_resolver import FileIndex, PathResolver, is_image_asset, normalize_path
from .context import RelayContext
from .errors import DocumentContextChangedError, NotAnImageError
from .models import CollectedImages, DocumentOutcome

logger = logging.getLogger(__name__)


class ImagePipeline:
    """Runs image transfers for stored documents.

    Example:
        >>> context = RelayContext(config, LocalDocumentStore("./vault"), backend)
        >>> pipeline = ImagePipeline(context)
        >>> outcome = asyncio.run(pipeline.upload_document("notes/day.md"))
        >>> print(f"{outcome.succeeded}/{outcome.images} uploaded")
    """

    def __init__(
        self,
        context: RelayContext,
        dispatcher: Optional[TransferDispatcher] = None,
        rewriter: Optional[DocumentRewriter] = None,
    ):
        self.context = context
        self.dispatcher = dispatcher or TransferDispatcher(context.backend, context.store)
        self.rewriter = rewriter or DocumentRewriter.from_config(context.config)

    def build_resolver(self) -> PathResolver:
        """Index the vault's current file tree."""
        return PathResolver(FileIndex.build(self.context.store.list_files()))

    def collect(
        self,
        text: str,
        document_path: str,
        resolver: Optional[PathResolver] = None,
    ) -> CollectedImages:
        """Extract, filter and resolve the image references of a text.

        Args:
            text: Document text
            document_path: Vault path of the document (for relative paths)
            resolver: Resolver to use; a fresh index is built when omitted

        Returns:
            CollectedImages with the transferable references
        """
        config = self.context.config
        candidates = filter_references(
            extract_references(text),
            config.block_list,
            include_remote=config.work_on_network,
        )
        resolver = resolver or self.build_resolver()

        collected = CollectedImages(candidates=len(candidates))
        for reference in candidates:
            resolved = resolver.resolve(reference, document_path)
            if resolved is None:
                collected.unresolved += 1
            else:
                collected.references.append(resolved)

        if collected.unresolved:
            logger.info(f"{document_path}: {collected.unresolved} local image(s) not found in vault")
        return collected

    async def upload_document(
        self,
        document_path: str,
        active_document: Optional[Callable[[], Optional[str]]] = None,
        announce: bool = True,
    ) -> DocumentOutcome:
        """Upload every image of a document and rewrite its references.

        Args:
            document_path: Vault path of the document
            active_document: Returns the document currently open in the host
                editor; when given, the result is only applied if it is
                still document_path
            announce: Emit "found"/"not found" notices

        Returns:
            DocumentOutcome of the operation

        Raises:
            UploadFailedError: If the backend failed (document unchanged)
            ResultCountMismatchError: If result count differs (document unchanged)
            DocumentContextChangedError: If the active document changed
            FilesystemError: If the document cannot be read or written
        """
        text = self.context.store.read(document_path)
        collected = self.collect(text, document_path)
        outcome = DocumentOutcome(
            document_path=document_path,
            images=collected.candidates,
            unresolved=collected.unresolved,
        )

        if not collected.references:
            if announce:
                self.context.notify("Can not find image file")
            return outcome

        if announce:
            self.context.notify(f"Have found {len(collected.references)} images")

        result = await self.dispatcher.upload(collected.references)
        if not result.success:
            raise UploadFailedError(document_path, result.error or "unknown error")

        if len(result.results) != len(collected.references):
            raise ResultCountMismatchError(len(collected.references), len(result.results))

        if active_document is not None:
            current = active_document()
            if current != document_path:
                raise DocumentContextChangedError(document_path, current)

        outcome.succeeded, outcome.trashed = self._apply_upload(
            document_path, collected.references, result.results
        )
        return outcome

    async def upload_image_file(self, document_path: str, image_path: str) -> DocumentOutcome:
        """Upload one image file and rewrite the references to it in a document.

        References are matched by file name: every reference whose decoded
        basename equals the image's name is replaced.

        Args:
            document_path: Vault path of the document
            image_path: Vault path of the image file

        Raises:
            NotAnImageError: If image_path is not an image file
            UploadFailedError: If the backend failed (document unchanged)
        """
        if not is_image_asset(image_path):
            raise NotAnImageError(image_path)

        image_path = normalize_path(image_path)
        image_file = VaultFile(path=image_path, name=posixpath.basename(image_path))
        text = self.context.store.read(document_path)

        matches: List[ResolvedReference] = [
            ResolvedReference(reference=reference, path=image_file.path, file=image_file)
            for reference in extract_references(text)
            if posixpath.basename(unquote(reference.path)) == image_file.name
        ]

        outcome = DocumentOutcome(document_path=document_path, images=len(matches))
        if not matches:
            self.context.notify("Can not find image file")
            return outcome

        result = await self.dispatcher.upload(matches)
        if not result.success:
            raise UploadFailedError(document_path, result.error or "unknown error")

        outcome.succeeded, outcome.trashed = self._apply_upload(document_path, matches, result.results)
        return outcome

    def _apply_upload(
        self,
        document_path: str,
        references: Sequence[ResolvedReference],
        results: Sequence[str],
    ) -> Tuple[int, int]:
        store = self.context.store
        current = store.read(document_path)
        store.write(document_path, self.rewriter.rewrite(current, references, results))
        succeeded = sum(1 for url in results if url)
        logger.info(f"{document_path}: rewrote {succeeded} image reference(s)")

        trashed = 0
        if self.context.config.delete_source:
            trashed = self.rewriter.trash_sources(references, store)
        return succeeded, trashed

    async def download_document(self, document_path: str) -> DocumentOutcome:
        """Download every remote image of a document and point it at the local copy.

        Individual download failures leave those references unchanged.

        Args:
            document_path: Vault path of the document

        Returns:
            DocumentOutcome of the operation

        Raises:
            FilesystemError: If the document or attachment folder is unusable
        """
        text = self.context.store.read(document_path)
        remote = []
        seen_sources = set()
        for reference in extract_references(text):
            # Identical markup is rewritten in one go, so fetch it once
            if reference.is_remote and reference.source not in seen_sources:
                seen_sources.add(reference.source)
                remote.append(reference)
        outcome = DocumentOutcome(document_path=document_path, images=len(remote))
        if not remote:
            return outcome

        results = await self.dispatcher.download(
            remote, document_path, self.context.config.attachment_folder
        )
        saved = [result for result in results if result.ok]
        failed = len(results) - len(saved)
        if failed:
            self.context.notify(f"{document_path}: {failed} image(s) could not be downloaded")

        if saved:
            current = self.context.store.read(document_path)
            rewritten = self.rewriter.rewrite(
                current,
                [replace(result.reference, name=result.name) for result in saved],
                [encode_uri(result.path) for result in saved],
            )
            self.context.store.write(document_path, rewritten)

        outcome.succeeded = len(saved)
        return outcome
