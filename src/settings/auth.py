"""Environment overrides for the transfer backend.

Upload endpoint and token can be provided through environment variables or
a .env file (loaded with python-dotenv) so the token never has to live in
the vault's configuration file:

    IMAGE_RELAY_UPLOAD_URL: Upload endpoint (overrides upload_url)
    IMAGE_RELAY_UPLOAD_TOKEN: Bearer token sent with uploads
"""

import logging
import os
from dataclasses import replace

from dotenv import load_dotenv

from .models import RelayConfig

logger = logging.getLogger(__name__)

UPLOAD_URL_ENV = 'IMAGE_RELAY_UPLOAD_URL'
UPLOAD_TOKEN_ENV = 'IMAGE_RELAY_UPLOAD_TOKEN'


def apply_environment(config: RelayConfig) -> RelayConfig:
    """Return a copy of config with environment overrides applied.

    Args:
        config: Configuration loaded from the vault

    Returns:
        New RelayConfig; the input is left untouched
    """
    load_dotenv()

    overrides = {}
    upload_url = os.getenv(UPLOAD_URL_ENV)
    if upload_url:
        overrides['upload_url'] = upload_url
        logger.debug(f"Upload endpoint overridden by {UPLOAD_URL_ENV}")

    upload_token = os.getenv(UPLOAD_TOKEN_ENV)
    if upload_token:
        overrides['upload_token'] = upload_token
        logger.debug(f"Upload token loaded from {UPLOAD_TOKEN_ENV}")

    return replace(config, **overrides) if overrides else config
