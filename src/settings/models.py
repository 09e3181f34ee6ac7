"""Configuration models for image-relay.

All models use dataclasses for clean, type-safe data structures.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from src.image_links.models import BlockList


class DisplayNamePolicy(str, Enum):
    """How the display name of rewritten image markup is chosen.

    - KEEP: keep the reference's name and append the size suffix
    - BLANK: always use an empty name
    - BLANK_IF_DEFAULT: empty name when the name is the default "image.png"
    """
    KEEP = "keep"
    BLANK = "blank"
    BLANK_IF_DEFAULT = "blank-if-default"


@dataclass
class RelayConfig:
    """Settings applied uniformly to every pipeline operation.

    Attributes:
        image_size_suffix: Appended to kept display names (e.g., "|300")
        image_desc: Display-name policy for rewritten markup
        work_on_network: Include remote references when uploading
        network_block_domains: Comma-joined domains excluded from remote work
        delete_source: Trash local files after a successful upload
        upload_on_paste: Default for the image-auto-upload frontmatter key
        apply_image: Upload the image when a paste carries text and an image
        attachment_folder: Vault folder receiving downloaded images
        upload_url: Upload endpoint of the transfer backend
        upload_token: Optional bearer token (from environment only, never saved)
        upload_timeout: Seconds before an upload request is abandoned
        fetch_timeout: Seconds before a download request is abandoned
    """
    image_size_suffix: str = ""
    image_desc: DisplayNamePolicy = DisplayNamePolicy.KEEP
    work_on_network: bool = False
    network_block_domains: str = ""
    delete_source: bool = False
    upload_on_paste: bool = True
    apply_image: bool = True
    attachment_folder: str = "assets"
    upload_url: str = "http://127.0.0.1:36677/upload"
    upload_token: Optional[str] = None
    upload_timeout: int = 60
    fetch_timeout: int = 30

    @property
    def block_list(self) -> BlockList:
        return BlockList.parse(self.network_block_domains)
