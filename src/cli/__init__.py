"""Command-line interface for image-relay.

This package provides the `image-relay` CLI tool that uploads the images of
Markdown notes to a hosting service, downloads remote images into the vault,
and embeds freshly uploaded images into notes.
"""

from .relay_command import RelayCommand
from .init_command import InitCommand
from .models import ExitCode, RelayMode
from .errors import CLIError, InitError

__all__ = [
    'RelayCommand',
    'InitCommand',
    'ExitCode',
    'RelayMode',
    'CLIError',
    'InitError',
]
