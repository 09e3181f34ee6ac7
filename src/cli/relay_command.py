"""Relay command orchestration for CLI.

This module provides the RelayCommand class that loads the vault
configuration, builds the relay context, runs the selected operation on the
event loop and translates failures into exit codes.
"""

import asyncio
import logging
import os
from typing import List, Optional, Sequence

from src.pipeline.batch_orchestrator import BatchOrchestrator
from src.pipeline.context import RelayContext
from src.pipeline.errors import PipelineError
from src.pipeline.image_pipeline import ImagePipeline
from src.session.editor import TextBuffer
from src.session.interactive_session import FAILURE_MARKER, InteractiveSessionManager
from src.session.models import ClipboardFile
from src.settings.auth import apply_environment
from src.settings.config_loader import ConfigLoader
from src.settings.errors import ConfigError
from src.settings.models import RelayConfig
from src.transfer.backends import HttpTransferBackend, TransferBackend
from src.transfer.errors import TransferError
from src.vault.document_store import DocumentStore, LocalDocumentStore
from src.vault.errors import FilesystemError
from src.vault.path_resolver import normalize_path
from .errors import CLIError
from .models import ExitCode, RelayMode
from .output import OutputHandler

logger = logging.getLogger(__name__)


class RelayCommand:
    """Runs one image-relay operation against a vault.

    Dependencies are optional so tests can inject a store, a backend or a
    ready configuration. In production they are built from the vault.

    Example:
        >>> output = OutputHandler(verbosity=1)
        >>> command = RelayCommand(vault="./notes", output_handler=output)
        >>> exit_code = command.run(RelayMode.UPLOAD, document="day.md")
        >>> sys.exit(exit_code)
    """

    def __init__(
        self,
        vault: str = ".",
        output_handler: Optional[OutputHandler] = None,
        config: Optional[RelayConfig] = None,
        store: Optional[DocumentStore] = None,
        backend: Optional[TransferBackend] = None,
    ):
        self.vault = vault
        self.output_handler = output_handler or OutputHandler()
        self.config = config
        self.store = store
        self.backend = backend

    def run(
        self,
        mode: RelayMode,
        document: Optional[str] = None,
        folder: Optional[str] = None,
        image: Optional[str] = None,
        embed: Optional[Sequence[str]] = None,
    ) -> ExitCode:
        """Execute one operation.

        Args:
            mode: Operation to run
            document: Document path (single-document modes)
            folder: Folder path (batch modes)
            image: Image file path (UPLOAD_IMAGE)
            embed: Image file paths to embed (EMBED)

        Returns:
            ExitCode indicating success or specific failure type
        """
        try:
            context = self._build_context()

            if mode == RelayMode.UPLOAD:
                return self._run_upload(context, self._vault_path(document))
            elif mode == RelayMode.DOWNLOAD:
                return self._run_download(context, self._vault_path(document))
            elif mode in (RelayMode.UPLOAD_FOLDER, RelayMode.DOWNLOAD_FOLDER):
                return self._run_batch(context, self._vault_path(folder), mode)
            elif mode == RelayMode.UPLOAD_IMAGE:
                return self._run_upload_image(context, self._vault_path(document), self._vault_path(image))
            elif mode == RelayMode.EMBED:
                return self._run_embed(context, self._vault_path(document), embed or [])
            raise CLIError(f"Unsupported mode: {mode}")

        except ConfigError as e:
            logger.error(f"Configuration error: {e}")
            self.output_handler.error(f"Configuration error: {e}")
            return ExitCode.CONFIG_ERROR

        except TransferError as e:
            logger.error(f"Transfer failed: {e}")
            self.output_handler.error(f"Transfer failed: {e}")
            self.output_handler.info("Check that the upload service is running and reachable")
            return ExitCode.TRANSFER_FAILED

        except (PipelineError, FilesystemError, CLIError) as e:
            logger.error(f"Error: {e}")
            self.output_handler.error(f"Error: {e}")
            return ExitCode.GENERAL_ERROR

        except Exception as e:
            logger.exception("Unexpected error during relay")
            self.output_handler.error(f"Unexpected error: {e}")
            return ExitCode.GENERAL_ERROR

    def _build_context(self) -> RelayContext:
        if self.config is None:
            config_path = ConfigLoader.config_path_for(self.vault)
            logger.info(f"Loading configuration from {config_path}")
            self.config = apply_environment(ConfigLoader.load_or_default(config_path))

        if self.store is None:
            self.store = LocalDocumentStore(self.vault)

        if self.backend is None:
            self.backend = HttpTransferBackend(
                upload_url=self.config.upload_url,
                upload_token=self.config.upload_token,
                upload_timeout=self.config.upload_timeout,
                fetch_timeout=self.config.fetch_timeout,
            )

        return RelayContext(
            config=self.config,
            store=self.store,
            backend=self.backend,
            notify=self.output_handler.warning,
        )

    def _vault_path(self, path: Optional[str]) -> str:
        """Map a command line path to a vault path.

        Vault-relative paths win. Otherwise a path that exists relative to
        the working directory is mapped through the vault root.
        """
        if path is None:
            raise CLIError("Missing path argument")
        relative = normalize_path(path)
        if not os.path.isabs(path) and self.store.exists(relative):
            return relative
        if os.path.exists(path) and isinstance(self.store, LocalDocumentStore):
            return self.store.vault_path(path)
        return relative

    def _run_upload(self, context: RelayContext, document: str) -> ExitCode:
        pipeline = ImagePipeline(context)
        with self.output_handler.spinner(f"Uploading images of {document}..."):
            outcome = asyncio.run(pipeline.upload_document(document))
        if outcome.succeeded:
            self.output_handler.print_document_summary(outcome, "Uploaded")
        return ExitCode.SUCCESS

    def _run_download(self, context: RelayContext, document: str) -> ExitCode:
        pipeline = ImagePipeline(context)
        with self.output_handler.spinner(f"Downloading images of {document}..."):
            outcome = asyncio.run(pipeline.download_document(document))
        if outcome.images == 0:
            self.output_handler.print("No remote images found")
            return ExitCode.SUCCESS
        self.output_handler.print_document_summary(outcome, "Downloaded")
        return ExitCode.SUCCESS if outcome.succeeded == outcome.images else ExitCode.TRANSFER_FAILED

    def _run_batch(self, context: RelayContext, folder: str, mode: RelayMode) -> ExitCode:
        batch = BatchOrchestrator(ImagePipeline(context))
        if mode == RelayMode.UPLOAD_FOLDER:
            summary = asyncio.run(batch.upload_folder(folder))
            self.output_handler.print_batch_summary(summary, "Uploaded")
        else:
            summary = asyncio.run(batch.download_folder(folder))
            self.output_handler.print_batch_summary(summary, "Downloaded")
        return ExitCode.TRANSFER_FAILED if summary.failed_documents else ExitCode.SUCCESS

    def _run_upload_image(self, context: RelayContext, document: str, image: str) -> ExitCode:
        pipeline = ImagePipeline(context)
        with self.output_handler.spinner(f"Uploading {image}..."):
            outcome = asyncio.run(pipeline.upload_image_file(document, image))
        if outcome.succeeded:
            self.output_handler.print_document_summary(outcome, "Uploaded")
        return ExitCode.SUCCESS

    def _run_embed(self, context: RelayContext, document: str, images: Sequence[str]) -> ExitCode:
        files: List[ClipboardFile] = []
        for path in images:
            if not os.path.isfile(path):
                raise CLIError(f"Image file not found: {path}")
            file = ClipboardFile.from_path(os.path.abspath(path))
            if not file.is_image:
                raise CLIError(f"Not an image file: {path}")
            files.append(file)
        if not files:
            raise CLIError("No image files to embed")

        return asyncio.run(self._embed(context, document, files))

    async def _embed(self, context: RelayContext, document: str, files: List[ClipboardFile]) -> ExitCode:
        text = context.store.read(document)
        if text and not text.endswith("\n"):
            text += "\n"
        buffer = TextBuffer(text)

        manager = InteractiveSessionManager(context)
        if manager.drop(buffer, files) is None:
            self.output_handler.warning(f"Automatic upload is disabled for {document}")
            return ExitCode.SUCCESS

        await manager.wait_idle()
        result = buffer.get_value()
        context.store.write(document, result)

        failed = result.count(FAILURE_MARKER) - text.count(FAILURE_MARKER)
        if failed:
            self.output_handler.error(f"{failed} of {len(files)} image(s) could not be uploaded")
            return ExitCode.TRANSFER_FAILED
        self.output_handler.success(f"Embedded {len(files)} image(s) in {document}")
        return ExitCode.SUCCESS
