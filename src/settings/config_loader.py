"""YAML configuration loading and validation.

This module handles loading and saving the relay configuration stored at
<vault>/.image-relay/config.yaml. Every key is optional; missing keys take
the defaults of RelayConfig.
"""

import logging
import os
from typing import Any, Dict

import yaml

from src.vault.errors import FilesystemError
from .errors import ConfigError
from .models import DisplayNamePolicy, RelayConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = ".image-relay/config.yaml"


class ConfigLoader:
    """Handles configuration file loading, validation, and saving.

    Configuration file structure:
        image_size_suffix: ""
        image_desc: keep            # keep | blank | blank-if-default
        work_on_network: false
        network_block_domains: "evil.com,ads.example.org"
        delete_source: false
        upload_on_paste: true
        apply_image: true
        attachment_folder: assets
        upload_url: http://127.0.0.1:36677/upload
        upload_timeout: 60
        fetch_timeout: 30
    """

    STRING_FIELDS = ('image_size_suffix', 'network_block_domains', 'attachment_folder', 'upload_url')
    BOOL_FIELDS = ('work_on_network', 'delete_source', 'upload_on_paste', 'apply_image')
    INT_FIELDS = ('upload_timeout', 'fetch_timeout')

    @classmethod
    def config_path_for(cls, vault_root: str) -> str:
        return os.path.join(vault_root, *DEFAULT_CONFIG_PATH.split("/"))

    @classmethod
    def load(cls, config_path: str) -> RelayConfig:
        """Load and parse configuration from a YAML file.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            RelayConfig with parsed configuration

        Raises:
            FilesystemError: If file cannot be read
            ConfigError: If configuration is invalid or malformed
        """
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            raise FilesystemError(config_path, 'read', 'Configuration file not found')
        except PermissionError:
            raise FilesystemError(config_path, 'read', 'Permission denied')
        except OSError as e:
            raise FilesystemError(config_path, 'read', str(e))

        try:
            config_dict = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML syntax: {str(e)}")

        if config_dict is None:
            return RelayConfig()

        if not isinstance(config_dict, dict):
            raise ConfigError(
                f"Configuration must be a YAML dictionary, got {type(config_dict).__name__}"
            )

        return cls._parse_config(config_dict)

    @classmethod
    def load_or_default(cls, config_path: str) -> RelayConfig:
        """Load configuration, using defaults when the file does not exist."""
        if not os.path.exists(config_path):
            logger.info(f"No configuration at {config_path} - using defaults")
            return RelayConfig()
        return cls.load(config_path)

    @classmethod
    def save(cls, config_path: str, config: RelayConfig) -> None:
        """Save configuration to a YAML file.

        The upload token is never written; it only comes from the environment.

        Raises:
            FilesystemError: If file cannot be written
        """
        config_dict: Dict[str, Any] = {
            'image_size_suffix': config.image_size_suffix,
            'image_desc': config.image_desc.value,
            'work_on_network': config.work_on_network,
            'network_block_domains': config.network_block_domains,
            'delete_source': config.delete_source,
            'upload_on_paste': config.upload_on_paste,
            'apply_image': config.apply_image,
            'attachment_folder': config.attachment_folder,
            'upload_url': config.upload_url,
            'upload_timeout': config.upload_timeout,
            'fetch_timeout': config.fetch_timeout,
        }

        yaml_str = yaml.safe_dump(
            config_dict,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False
        )

        config_dir = os.path.dirname(config_path)
        if config_dir:
            try:
                os.makedirs(config_dir, exist_ok=True)
            except OSError as e:
                raise FilesystemError(config_dir, 'create_directory', str(e))

        try:
            with open(config_path, 'w', encoding='utf-8') as f:
                f.write(yaml_str)
        except PermissionError:
            raise FilesystemError(config_path, 'write', 'Permission denied')
        except OSError as e:
            raise FilesystemError(config_path, 'write', str(e))

    @classmethod
    def _parse_config(cls, config_dict: Dict[str, Any]) -> RelayConfig:
        """Validate a raw configuration dictionary.

        Raises:
            ConfigError: If a field has the wrong type or an unknown value
        """
        known = set(cls.STRING_FIELDS) | set(cls.BOOL_FIELDS) | set(cls.INT_FIELDS) | {'image_desc'}
        unknown = set(config_dict.keys()) - known
        if unknown:
            logger.warning(f"Ignoring unknown configuration field(s): {', '.join(sorted(unknown))}")

        values: Dict[str, Any] = {}

        for name in cls.STRING_FIELDS:
            if name in config_dict and config_dict[name] is not None:
                value = config_dict[name]
                if not isinstance(value, str):
                    raise ConfigError(f"Must be a string, got {type(value).__name__}", name)
                values[name] = value

        for name in cls.BOOL_FIELDS:
            if name in config_dict and config_dict[name] is not None:
                value = config_dict[name]
                if not isinstance(value, bool):
                    raise ConfigError(f"Must be true or false, got {value!r}", name)
                values[name] = value

        for name in cls.INT_FIELDS:
            if name in config_dict and config_dict[name] is not None:
                value = config_dict[name]
                if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                    raise ConfigError(f"Must be a positive integer, got {value!r}", name)
                values[name] = value

        if config_dict.get('image_desc') is not None:
            raw = config_dict['image_desc']
            try:
                values['image_desc'] = DisplayNamePolicy(raw)
            except ValueError:
                allowed = ", ".join(policy.value for policy in DisplayNamePolicy)
                raise ConfigError(f"Unknown policy {raw!r} (expected one of: {allowed})", 'image_desc')

        if 'attachment_folder' in values:
            values['attachment_folder'] = values['attachment_folder'].strip("/")

        return RelayConfig(**values)
