"""Document rewriting for image-relay.

This package renders display names and image markup and applies transfer
results back to document text.
"""

from .display_name import DEFAULT_IMAGE_NAME, encode_uri, render_display_name, render_markup
from .document_rewriter import DocumentRewriter

__all__ = [
    'DEFAULT_IMAGE_NAME',
    'encode_uri',
    'render_display_name',
    'render_markup',
    'DocumentRewriter',
]
