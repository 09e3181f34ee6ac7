"""Transfer dispatch between the pipeline and a transfer backend.

Uploads are a single backend call whose results must line up with the
inputs; any failure fails the whole call. Downloads run one reference at a
time and tolerate individual failures.

Backend calls block, so they run in a worker thread to keep the event loop
free for other interactive operations.
"""

import asyncio
import logging
import posixpath
import uuid
from typing import List, Sequence

from src.image_links.models import DownloadResult, Reference, ResolvedReference, TransferResult
from src.vault.document_store import DocumentStore
from src.vault.errors import FilesystemError
from .backends import TransferBackend
from .filesafe_converter import FilesafeConverter

logger = logging.getLogger(__name__)


class TransferDispatcher:
    """Sends local files to the backend and fetches remote images locally.

    Example:
        >>> dispatcher = TransferDispatcher(backend, store)
        >>> result = await dispatcher.upload(resolved_references)
        >>> if result.success:
        ...     print(result.results)
    """

    def __init__(self, backend: TransferBackend, store: DocumentStore):
        self.backend = backend
        self.store = store

    def _upload_item(self, reference: ResolvedReference) -> str:
        if reference.file is not None:
            return self.store.absolute_path(reference.file.path)
        if not reference.is_remote:
            raise ValueError(f"Unresolved local image cannot be uploaded: {reference.path}")
        return reference.path

    async def upload(self, references: Sequence[ResolvedReference]) -> TransferResult:
        """Upload resolved references in one backend call.

        Bound local references are sent as absolute file paths, remote ones
        as their URL so the backend re-hosts them.

        Args:
            references: Resolved references, in document order

        Returns:
            TransferResult whose results follow the input order
        """
        items = [self._upload_item(reference) for reference in references]
        return await self.upload_files(items)

    async def upload_files(self, items: Sequence[str]) -> TransferResult:
        """Upload raw file paths or URLs in one backend call.

        Args:
            items: Absolute file paths or remote URLs

        Returns:
            TransferResult; success is False when the backend raised or
            reported a failure
        """
        if not items:
            return TransferResult(success=True, results=[])

        try:
            response = await asyncio.to_thread(self.backend.upload_local, list(items))
        except Exception as e:
            logger.error(f"Upload of {len(items)} file(s) failed: {e}")
            return TransferResult(success=False, error=str(e))

        if not response.success:
            reason = response.message or "Upload service reported a failure"
            logger.error(f"Upload rejected by backend: {reason}")
            return TransferResult(success=False, error=reason)

        logger.info(f"Uploaded {len(items)} file(s), received {len(response.urls)} URL(s)")
        return TransferResult(success=True, results=list(response.urls))

    async def download(
        self,
        references: Sequence[Reference],
        document_path: str,
        attachment_folder: str,
    ) -> List[DownloadResult]:
        """Download remote references into the attachment folder.

        References are fetched one after another; a failed download is
        recorded and the next one proceeds.

        Args:
            references: Remote references of one document
            document_path: Vault path of the owning document
            attachment_folder: Vault folder receiving the files

        Returns:
            One DownloadResult per reference, in input order

        Raises:
            FilesystemError: If the attachment folder cannot be created
        """
        self.store.ensure_folder(attachment_folder)
        results: List[DownloadResult] = []
        for reference in references:
            results.append(await self._download_one(reference, document_path, attachment_folder))
        return results

    def _target_path(self, folder: str, name: str, ext: str) -> str:
        target = posixpath.join(folder, f"{name}.{ext}")
        if self.store.exists(target):
            # Never overwrite an existing asset
            target = posixpath.join(folder, f"{uuid.uuid4().hex}.{ext}")
        return target

    async def _download_one(
        self,
        reference: Reference,
        document_path: str,
        attachment_folder: str,
    ) -> DownloadResult:
        url = reference.path
        name = FilesafeConverter.stem_from_url(url)
        ext = FilesafeConverter.extension_from_url(url)

        try:
            response = await asyncio.to_thread(self.backend.fetch_remote, url)
        except Exception as e:
            logger.warning(f"Download failed for {url}: {e}")
            return DownloadResult(reference=reference, ok=False, error=str(e))

        if response.status != 200:
            logger.warning(f"Download failed for {url}: HTTP {response.status}")
            return DownloadResult(reference=reference, ok=False, error=f"HTTP {response.status}")

        target = self._target_path(attachment_folder, name, ext)
        try:
            self.store.write_binary(target, response.content)
        except FilesystemError as e:
            logger.warning(f"Could not save {url}: {e}")
            return DownloadResult(reference=reference, ok=False, error=str(e))

        document_dir = posixpath.dirname(document_path) or "."
        relative = posixpath.relpath(target, document_dir)
        logger.debug(f"Saved {url} as {target}")
        return DownloadResult(reference=reference, ok=True, path=relative, name=name)
