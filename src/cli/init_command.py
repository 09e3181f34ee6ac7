"""InitCommand for configuration initialization.

This module implements the --init command that writes a default
configuration file into a vault.
"""

import logging
import os
from typing import Optional

from src.settings.config_loader import ConfigLoader
from src.settings.models import RelayConfig
from src.vault.errors import FilesystemError
from .errors import InitError

logger = logging.getLogger(__name__)


class InitCommand:
    """Creates <vault>/.image-relay/config.yaml with default settings.

    Example:
        >>> init = InitCommand()
        >>> init.run(vault="./notes")
        >>> print(init.config_path)
    """

    def __init__(self, config: Optional[RelayConfig] = None):
        """Initialize the init command.

        Args:
            config: Configuration to write (defaults to RelayConfig())
        """
        self.config = config or RelayConfig()
        self.config_path: Optional[str] = None

    def run(self, vault: str) -> None:
        """Write the configuration file.

        Args:
            vault: Vault root directory

        Raises:
            InitError: If the vault is missing, a configuration already
                exists, or the file cannot be written
        """
        if not os.path.isdir(vault):
            raise InitError(f"Vault directory does not exist: {vault}")

        self.config_path = ConfigLoader.config_path_for(vault)
        if os.path.exists(self.config_path):
            raise InitError(
                f"Configuration file already exists at {self.config_path}\n"
                "Please delete it first if you want to reinitialize."
            )

        try:
            ConfigLoader.save(self.config_path, self.config)
        except FilesystemError as e:
            raise InitError(f"Failed to save configuration: {e}")

        logger.info(f"Configuration saved to {self.config_path}")
