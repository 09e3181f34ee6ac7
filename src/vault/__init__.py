"""Vault access for image-relay.

This package provides the document store over a vault directory, the path
resolver that binds local image references to files, and frontmatter
reading for per-document settings.
"""

from .document_store import DocumentStore, LocalDocumentStore
from .path_resolver import FileIndex, PathResolver, is_image_asset, normalize_path
from .frontmatter_handler import FrontmatterHandler
from .errors import VaultError, FilesystemError, FrontmatterError

__all__ = [
    'DocumentStore',
    'LocalDocumentStore',
    'FileIndex',
    'PathResolver',
    'is_image_asset',
    'normalize_path',
    'FrontmatterHandler',
    'VaultError',
    'FilesystemError',
    'FrontmatterError',
]
