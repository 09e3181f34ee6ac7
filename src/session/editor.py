"""Editor surfaces used by interactive transfers.

An editor surface is any text holder with a selection: a host editor, or the
in-memory TextBuffer used by the command line embed flow.
"""

from typing import Optional, Protocol


class EditorSurface(Protocol):
    """Text with a selection that can be edited in place."""

    def get_value(self) -> str: ...

    def get_selection(self) -> str: ...

    def replace_selection(self, text: str) -> None: ...

    def replace_range(self, text: str, start: int, end: int) -> None: ...


class TextBuffer:
    """In-memory editor surface.

    The selection is the half-open span [selection_start, selection_end).
    An empty selection is a plain cursor. Edits before the selection shift
    it so it keeps pointing at the same text.

    Example:
        >>> buffer = TextBuffer("hello\\n")
        >>> buffer.replace_selection("![a](a.png)\\n")
        >>> buffer.get_value()
        'hello\\n![a](a.png)\\n'
    """

    def __init__(self, text: str = "", cursor: Optional[int] = None, selection_end: Optional[int] = None):
        self._text = text
        start = len(text) if cursor is None else cursor
        end = start if selection_end is None else selection_end
        if not 0 <= start <= end <= len(text):
            raise ValueError(f"Invalid selection {start}:{end} for text of length {len(text)}")
        self.selection_start = start
        self.selection_end = end

    def get_value(self) -> str:
        return self._text

    def get_selection(self) -> str:
        return self._text[self.selection_start:self.selection_end]

    def replace_selection(self, text: str) -> None:
        """Replace the selection and leave the cursor after the new text."""
        start = self.selection_start
        self._text = self._text[:start] + text + self._text[self.selection_end:]
        self.selection_start = self.selection_end = start + len(text)

    def replace_range(self, text: str, start: int, end: int) -> None:
        """Replace text[start:end], keeping the selection on the same content."""
        if not 0 <= start <= end <= len(self._text):
            raise ValueError(f"Invalid range {start}:{end} for text of length {len(self._text)}")
        self._text = self._text[:start] + text + self._text[end:]
        delta = len(text) - (end - start)
        self.selection_start = self._shift(self.selection_start, start, end, delta)
        self.selection_end = self._shift(self.selection_end, start, end, delta)

    @staticmethod
    def _shift(offset: int, start: int, end: int, delta: int) -> int:
        if offset >= end:
            return offset + delta
        if offset > start:
            # Inside the replaced span: collapse to its end
            return end + delta
        return offset
