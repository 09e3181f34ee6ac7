"""Interactive transfers for an open editor.

This package implements the placeholder flow used when images are pasted,
dropped or embedded into a document being edited.
"""

from .editor import EditorSurface, TextBuffer
from .models import ClipboardFile, ClipboardPayload
from .interactive_session import FAILURE_MARKER, InteractiveSessionManager

__all__ = [
    'EditorSurface',
    'TextBuffer',
    'ClipboardFile',
    'ClipboardPayload',
    'FAILURE_MARKER',
    'InteractiveSessionManager',
]
