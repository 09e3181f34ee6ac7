"""Explicit context passed into every pipeline call."""

import logging
from dataclasses import dataclass, field
from typing import Callable

from src.settings.models import RelayConfig
from src.transfer.backends import TransferBackend
from src.vault.document_store import DocumentStore

logger = logging.getLogger(__name__)


def log_notice(message: str) -> None:
    logger.warning(message)


@dataclass
class RelayContext:
    """Everything a pipeline operation needs, with no global state.

    Attributes:
        config: Settings applied to the operation
        store: Document store of the vault
        backend: Transfer backend moving the bytes
        notify: Callable receiving short user-facing notices
    """
    config: RelayConfig
    store: DocumentStore
    backend: TransferBackend
    notify: Callable[[str], None] = field(default=log_notice)
