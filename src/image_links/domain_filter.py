"""Domain block list filtering for remote image references."""

import logging
from typing import Iterable, List
from urllib.parse import urlsplit

from .models import BlockList, Reference

logger = logging.getLogger(__name__)


def has_blocked_domain(url: str, block_list: BlockList) -> bool:
    """Check whether a URL's hostname contains any blocked domain.

    A URL whose hostname cannot be extracted is kept (returns False), so an
    unusual string routed here never gets silently discarded.

    Args:
        url: Remote reference path
        block_list: Domains to match as substrings of the hostname

    Returns:
        True if the reference must be excluded
    """
    if not block_list:
        return False

    try:
        hostname = urlsplit(url).hostname
    except ValueError as e:
        logger.warning(f"Could not parse hostname of {url}: {e}")
        return False

    if not hostname:
        return False

    return any(domain in hostname for domain in block_list.domains)


def filter_references(
    references: Iterable[Reference],
    block_list: BlockList,
    include_remote: bool = True,
) -> List[Reference]:
    """Drop remote references that are disabled or blocked.

    Local references pass through unchanged. Remote references are kept only
    when include_remote is set and their hostname is not on the block list.

    Args:
        references: Extracted references
        block_list: Blocked domain substrings
        include_remote: Whether remote references take part at all

    Returns:
        Filtered list in input order
    """
    kept: List[Reference] = []
    for reference in references:
        if reference.is_remote:
            if not include_remote:
                continue
            if has_blocked_domain(reference.path, block_list):
                logger.debug(f"Skipping blocked domain: {reference.path}")
                continue
        kept.append(reference)
    return kept
