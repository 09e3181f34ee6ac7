"""Test helper modules for image-relay testing.

This package provides in-memory stand-ins for the collaborators of the
pipeline:
- fakes: InMemoryDocumentStore and FakeBackend
"""

from .fakes import VAULT_ROOT, FakeBackend, InMemoryDocumentStore

__all__ = [
    'VAULT_ROOT',
    'FakeBackend',
    'InMemoryDocumentStore',
]
