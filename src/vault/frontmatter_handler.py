"""YAML frontmatter reading for markdown documents.

Documents can opt in or out of automatic uploads with a frontmatter key:

    ---
    image-auto-upload: false
    ---

The value overrides the global upload-on-paste setting for that document.
"""

import logging
import re
from typing import Any, Dict

import yaml

from .errors import FrontmatterError

logger = logging.getLogger(__name__)


class FrontmatterHandler:
    """Parses YAML frontmatter blocks at the top of markdown content."""

    # Regex pattern to match YAML frontmatter (between --- delimiters)
    FRONTMATTER_PATTERN = re.compile(
        r'^---\s*\n(.*?)\n---\s*(?:\n|$)',
        re.DOTALL
    )

    AUTO_UPLOAD_KEY = "image-auto-upload"

    # Maximum allowed depth for YAML structures to prevent DoS attacks
    MAX_YAML_DEPTH = 10

    @classmethod
    def _validate_yaml_depth(cls, obj: Any, current_depth: int = 0, max_depth: int = MAX_YAML_DEPTH) -> None:
        """Reject YAML structures nested deeper than max_depth.

        Raises:
            FrontmatterError: If depth exceeds maximum
        """
        if current_depth > max_depth:
            raise FrontmatterError(
                "<yaml>",
                f"YAML structure exceeds maximum depth of {max_depth}"
            )

        if isinstance(obj, dict):
            for value in obj.values():
                cls._validate_yaml_depth(value, current_depth + 1, max_depth)
        elif isinstance(obj, list):
            for item in obj:
                cls._validate_yaml_depth(item, current_depth + 1, max_depth)

    @classmethod
    def parse(cls, file_path: str, content: str) -> Dict[str, Any]:
        """Parse the frontmatter of a document into a dictionary.

        Args:
            file_path: Path to the document (for error messages)
            content: Full markdown content

        Returns:
            Frontmatter fields, empty when the document has no frontmatter

        Raises:
            FrontmatterError: If the frontmatter is not a valid YAML mapping
        """
        match = cls.FRONTMATTER_PATTERN.match(content)
        if not match:
            return {}

        try:
            frontmatter = yaml.safe_load(match.group(1))
        except yaml.YAMLError as e:
            raise FrontmatterError(file_path, f"Invalid YAML syntax: {str(e)}")

        if frontmatter is None:
            return {}

        if not isinstance(frontmatter, dict):
            raise FrontmatterError(
                file_path,
                f"Frontmatter must be a YAML dictionary, got {type(frontmatter).__name__}"
            )

        try:
            cls._validate_yaml_depth(frontmatter)
        except FrontmatterError as e:
            raise FrontmatterError(file_path, e.message)

        return frontmatter

    @classmethod
    def get_value(cls, content: str, key: str, default: Any = None, file_path: str = "<editor>") -> Any:
        """Read one frontmatter key, falling back to a default.

        Malformed frontmatter is logged and treated as absent.
        """
        try:
            frontmatter = cls.parse(file_path, content)
        except FrontmatterError as e:
            logger.warning(f"{e} - using default for '{key}'")
            return default
        return frontmatter.get(key, default)

    @classmethod
    def auto_upload_enabled(cls, content: str, default: bool) -> bool:
        """Whether automatic upload is enabled for a document."""
        return bool(cls.get_value(content, cls.AUTO_UPLOAD_KEY, default))
