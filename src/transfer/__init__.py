"""Transfer of image assets between the vault and remote hosts.

This package provides the backend protocol and its HTTP implementation,
retry handling for rate-limited hosts, and the dispatcher the pipeline
uses for uploads and downloads.
"""

from .backends import FetchResponse, HttpTransferBackend, TransferBackend, UploadResponse
from .dispatcher import TransferDispatcher
from .filesafe_converter import FilesafeConverter
from .errors import (
    TransferError,
    TransferBackendError,
    APIAccessError,
    ResultCountMismatchError,
    UploadFailedError,
)

__all__ = [
    'FetchResponse',
    'HttpTransferBackend',
    'TransferBackend',
    'UploadResponse',
    'TransferDispatcher',
    'FilesafeConverter',
    'TransferError',
    'TransferBackendError',
    'APIAccessError',
    'ResultCountMismatchError',
    'UploadFailedError',
]
