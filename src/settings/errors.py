"""Typed exceptions for configuration errors."""

from typing import Optional

from src.image_links.errors import ImageRelayError


class ConfigError(ImageRelayError):
    """Raised when configuration validation fails."""

    def __init__(self, message: str, config_field: Optional[str] = None):
        if config_field:
            full_message = f"Configuration error in field '{config_field}': {message}"
        else:
            full_message = f"Configuration error: {message}"
        super().__init__(full_message)
        self.config_field = config_field
        self.original_message = message
