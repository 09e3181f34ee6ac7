"""Data models for CLI operations."""

from enum import Enum, IntEnum


class ExitCode(IntEnum):
    """Exit codes for CLI operations.

    - SUCCESS (0): Operation completed successfully
    - GENERAL_ERROR (1): General error (bad arguments, unreadable documents)
    - TRANSFER_FAILED (2): An upload or download did not complete
    - CONFIG_ERROR (3): Configuration file is invalid

    Example:
        >>> exit_code = ExitCode.SUCCESS
        >>> sys.exit(exit_code)
    """
    SUCCESS = 0
    GENERAL_ERROR = 1
    TRANSFER_FAILED = 2
    CONFIG_ERROR = 3


class RelayMode(str, Enum):
    """Operation selected on the command line."""
    UPLOAD = "upload"
    DOWNLOAD = "download"
    UPLOAD_FOLDER = "upload-folder"
    DOWNLOAD_FOLDER = "download-folder"
    UPLOAD_IMAGE = "upload-image"
    EMBED = "embed"
