"""Image reference model, extraction and filtering.

This package turns raw markdown text into typed Reference records and
filters remote references against a domain block list.
"""

from .errors import ImageRelayError, MalformedReferenceError
from .models import (
    BlockList,
    DownloadResult,
    Reference,
    ResolvedReference,
    TransferResult,
    VaultFile,
    is_remote_path,
)
from .extractor import (
    extract_references,
    extract_bracket_references,
    extract_wiki_references,
    extract_html_references,
    derive_html_name,
)
from .domain_filter import filter_references, has_blocked_domain

__all__ = [
    'ImageRelayError',
    'MalformedReferenceError',
    'BlockList',
    'DownloadResult',
    'Reference',
    'ResolvedReference',
    'TransferResult',
    'VaultFile',
    'is_remote_path',
    'extract_references',
    'extract_bracket_references',
    'extract_wiki_references',
    'extract_html_references',
    'derive_html_name',
    'filter_references',
    'has_blocked_domain',
]
