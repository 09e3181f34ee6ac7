"""Placeholder-anchored transfers for an open editor.

A transfer triggered from the editor first inserts a placeholder holding a
fresh random token at the cursor, then runs in its own task. When the
transfer settles, the first remaining occurrence of that placeholder is
replaced by the final image markup, or by a failure marker. Tokens are
unique per transfer, so overlapping transfers never touch each other's
placeholder.

Each settlement reads the editor's current text and writes the replacement
without suspending in between. Nothing else serializes edits, so a host
editor that writes the same text concurrently keeps only the last write.
"""

import asyncio
import logging
import random
import string
from typing import Awaitable, Callable, List, Optional, Sequence, Set, Tuple

from src.image_links.domain_filter import filter_references
from src.image_links.extractor import extract_references
from src.image_links.models import ResolvedReference
from src.pipeline.context import RelayContext
from src.rewriter.document_rewriter import DocumentRewriter
from src.transfer.dispatcher import TransferDispatcher
from src.transfer.errors import TransferError
from src.vault.frontmatter_handler import FrontmatterHandler
from .editor import EditorSurface
from .models import ClipboardFile, ClipboardPayload

logger = logging.getLogger(__name__)

TOKEN_ALPHABET = string.digits + string.ascii_lowercase
TOKEN_LENGTH = 5
FAILURE_MARKER = "⚠️upload failed, check logs"

Transfer = Callable[[], Awaitable[str]]


class InteractiveSessionManager:
    """Runs interactive uploads against an editor surface.

    Must be used from inside a running event loop: every trigger schedules
    an asyncio task.

    Example:
        >>> manager = InteractiveSessionManager(context)
        >>> token, task = manager.trigger(editor, "shot.png", upload_shot)
        >>> await task
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
        self._pending: Set[str] = set()
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending_tokens(self) -> Set[str]:
        """Tokens whose placeholders have not settled yet."""
        return set(self._pending)

    def new_token(self) -> str:
        """Generate a token not used by any pending transfer."""
        while True:
            token = "".join(random.choices(TOKEN_ALPHABET, k=TOKEN_LENGTH))
            if token not in self._pending:
                return token

    @staticmethod
    def placeholder_for(token: str) -> str:
        return f"![Uploading file...{token}]()"

    def insert_placeholder(self, editor: EditorSurface, token: str) -> None:
        self._pending.add(token)
        editor.replace_selection(self.placeholder_for(token) + "\n")

    def settle_success(self, editor: EditorSurface, token: str, url: str, name: str = "") -> bool:
        """Replace a placeholder with markup pointing at the uploaded image."""
        return self._settle(editor, token, self.rewriter.markup(name, url))

    def settle_failure(self, editor: EditorSurface, token: str, reason: str) -> bool:
        """Replace a placeholder with the failure marker and report the reason."""
        logger.error(f"Upload failed: {reason}")
        self.context.notify(reason)
        return self._settle(editor, token, FAILURE_MARKER)

    def _settle(self, editor: EditorSurface, token: str, replacement: str) -> bool:
        if token not in self._pending:
            logger.debug(f"Placeholder {token} already settled")
            return False
        self._pending.discard(token)

        placeholder = self.placeholder_for(token)
        text = editor.get_value()
        index = text.find(placeholder)
        if index == -1:
            # The user removed the placeholder; nothing left to replace
            logger.info(f"Placeholder {token} no longer present in editor")
            return False
        editor.replace_range(replacement, index, index + len(placeholder))
        return True

    def _schedule(self, coroutine: Awaitable[None]) -> asyncio.Task:
        task = asyncio.ensure_future(coroutine)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def wait_idle(self) -> None:
        """Wait until every scheduled transfer has settled."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def trigger(self, editor: EditorSurface, name: str, transfer: Transfer) -> Tuple[str, asyncio.Task]:
        """Insert a placeholder and start one transfer in the background.

        The placeholder is in the editor when this returns. The task settles
        it with the URL returned by transfer, or with the failure marker if
        transfer raises or returns an empty URL.

        Args:
            editor: Editor receiving the image
            name: Display name of the image
            transfer: Coroutine function returning the uploaded URL

        Returns:
            Tuple of (token, task)
        """
        token = self.new_token()
        self.insert_placeholder(editor, token)
        return token, self._schedule(self._run_transfer(editor, token, name, transfer))

    async def _run_transfer(self, editor: EditorSurface, token: str, name: str, transfer: Transfer) -> None:
        try:
            url = await transfer()
        except Exception as e:
            self.settle_failure(editor, token, str(e) or type(e).__name__)
            return
        if not url:
            self.settle_failure(editor, token, "Upload service returned no URL")
            return
        self.settle_success(editor, token, url, name)

    def can_upload(self, clipboard: ClipboardPayload) -> bool:
        """Whether a paste should upload the clipboard's image file.

        An image file alone is uploaded. When text comes along with it,
        the apply_image setting decides.
        """
        if not clipboard.files or not clipboard.files[0].is_image:
            return False
        if clipboard.text:
            return self.context.config.apply_image
        return True

    def upload_allowed(self, editor: EditorSurface) -> bool:
        """Whether automatic upload is on for the editor's document.

        The image-auto-upload frontmatter key overrides upload_on_paste.
        """
        return FrontmatterHandler.auto_upload_enabled(
            editor.get_value(), self.context.config.upload_on_paste
        )

    async def _upload_file(self, path: str) -> str:
        result = await self.dispatcher.upload_files([path])
        if not result.success:
            raise TransferError(result.error or "Upload failed")
        if not result.results:
            raise TransferError("Upload service returned no URL")
        return result.results[0]

    def paste(self, editor: EditorSurface, clipboard: ClipboardPayload) -> List[asyncio.Task]:
        """Handle a paste into the editor.

        An uploadable image file is replaced by a placeholder that settles
        with its URL. Otherwise the clipboard text is inserted, and when
        network work is enabled its remote, non-blocked image links are
        re-hosted and rewritten in the editor.

        Args:
            editor: Editor receiving the paste
            clipboard: Pasted content

        Returns:
            Tasks started for the paste (possibly empty)
        """
        if not self.upload_allowed(editor):
            editor.replace_selection(clipboard.text)
            return []

        tasks: List[asyncio.Task] = []
        if self.can_upload(clipboard):
            image = clipboard.files[0]
            _, task = self.trigger(editor, image.name, lambda: self._upload_file(image.path))
            tasks.append(task)
        else:
            editor.replace_selection(clipboard.text)

        if self.context.config.work_on_network and clipboard.text:
            remote = [
                ResolvedReference(reference=reference, path=reference.path)
                for reference in filter_references(
                    extract_references(clipboard.text), self.context.config.block_list
                )
                if reference.is_remote
            ]
            if remote:
                tasks.append(self._schedule(self._rehost(editor, remote)))
        return tasks

    async def _rehost(self, editor: EditorSurface, references: Sequence[ResolvedReference]) -> None:
        result = await self.dispatcher.upload(references)
        if not result.success:
            self.context.notify(result.error or "Upload failed")
            return
        current = editor.get_value()
        try:
            rewritten = self.rewriter.rewrite(current, references, result.results)
        except TransferError as e:
            logger.error(f"Re-hosting pasted images failed: {e}")
            self.context.notify(str(e))
            return
        if rewritten != current:
            editor.replace_range(rewritten, 0, len(current))

    def drop(self, editor: EditorSurface, files: Sequence[ClipboardFile]) -> Optional[asyncio.Task]:
        """Handle files dropped onto the editor.

        One placeholder per file is inserted before a single upload call.
        Each placeholder settles with the URL at its position, or with the
        failure marker when the call fails or returns too few URLs.

        Args:
            editor: Editor receiving the drop
            files: Dropped files; nothing happens unless the first is an image

        Returns:
            The upload task, or None when the drop was not handled
        """
        if not files or not files[0].is_image:
            return None
        if not self.upload_allowed(editor):
            return None

        tokens = []
        for _ in files:
            token = self.new_token()
            self.insert_placeholder(editor, token)
            tokens.append(token)
        return self._schedule(self._run_drop(editor, tokens, files))

    async def _run_drop(self, editor: EditorSurface, tokens: List[str], files: Sequence[ClipboardFile]) -> None:
        result = await self.dispatcher.upload_files([file.path for file in files])
        if not result.success:
            reason = result.error or "Upload failed"
            for token in tokens:
                self.settle_failure(editor, token, reason)
            return

        for index, (token, file) in enumerate(zip(tokens, files)):
            url = result.results[index] if index < len(result.results) else ""
            if url:
                self.settle_success(editor, token, url, file.name)
            else:
                self.settle_failure(editor, token, f"No URL returned for {file.name}")
