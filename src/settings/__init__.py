"""Configuration for image-relay.

This package provides the RelayConfig model, its YAML loader and the
environment overrides for backend credentials.
"""

from .models import DisplayNamePolicy, RelayConfig
from .config_loader import ConfigLoader, DEFAULT_CONFIG_PATH
from .auth import apply_environment
from .errors import ConfigError

__all__ = [
    'DisplayNamePolicy',
    'RelayConfig',
    'ConfigLoader',
    'DEFAULT_CONFIG_PATH',
    'apply_environment',
    'ConfigError',
]
