"""Unit tests for session.models module."""

from src.session.models import ClipboardFile, ClipboardPayload


class TestClipboardFile:
    """Test cases for ClipboardFile."""

    def test_from_path_guesses_mime_type(self):
        """The MIME type is guessed from the file name."""
        file = ClipboardFile.from_path("/tmp/shot.png")

        assert file.name == "shot.png"
        assert file.mime_type == "image/png"
        assert file.is_image

    def test_from_windows_path(self):
        """Backslash-separated paths give the bare file name."""
        file = ClipboardFile.from_path("C:\\Users\\me\\shot.jpg")

        assert file.name == "shot.jpg"
        assert file.mime_type == "image/jpeg"

    def test_extension_fallback(self):
        """Without a MIME type, the extension decides."""
        assert ClipboardFile(name="shot.webp", path="/tmp/shot.webp").is_image
        assert not ClipboardFile(name="notes.txt", path="/tmp/notes.txt").is_image

    def test_non_image_mime_type(self):
        """A non-image MIME type is not an image."""
        file = ClipboardFile(name="doc.pdf", path="/tmp/doc.pdf", mime_type="application/pdf")

        assert not file.is_image


class TestClipboardPayload:
    """Test cases for ClipboardPayload defaults."""

    def test_empty_payload(self):
        """A payload defaults to no text and no files."""
        payload = ClipboardPayload()

        assert payload.text == ""
        assert payload.files == []
