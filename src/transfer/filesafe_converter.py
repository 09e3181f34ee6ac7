"""Filesafe names for downloaded images.

Converts a remote image URL into a file name that is valid on every file
system, keeping the original case.
"""

import posixpath
import re
from urllib.parse import unquote, urlsplit


class FilesafeConverter:
    """Derives local file names for remote image URLs.

    Conversion rules:
    - The name is the URL path's last segment, percent-decoded, extension stripped
    - Characters illegal on common file systems (\\ / : * ? " < > |) → hyphens (-)
    - An empty result falls back to "image"
    - The extension is kept when it is a known image type, else "jpg"

    Examples:
        - "https://x.com/a/My%20Chart.png" → "My Chart" + "png"
        - "https://x.com/render?id=1" → "render" + "jpg"
    """

    ILLEGAL_CHARACTERS = re.compile(r'[\\/:*?"<>|]')

    DOWNLOAD_EXTENSIONS = frozenset({'jpg', 'jpeg', 'png', 'gif', 'webp', 'bmp', 'svg'})

    DEFAULT_EXTENSION = 'jpg'

    DEFAULT_NAME = 'image'

    @staticmethod
    def _last_segment(url: str) -> str:
        try:
            path = urlsplit(url).path
        except ValueError:
            path = url.split('?')[0].split('#')[0]
        return posixpath.basename(path)

    @classmethod
    def stem_from_url(cls, url: str) -> str:
        """Build the filesafe base name (without extension) for a URL.

        Examples:
            >>> FilesafeConverter.stem_from_url("https://x.com/a/My%20Chart.png")
            'My Chart'
            >>> FilesafeConverter.stem_from_url("https://x.com/a/b:c.png")
            'b-c'
        """
        segment = unquote(cls._last_segment(url))
        stem = posixpath.splitext(segment)[0]
        stem = cls.ILLEGAL_CHARACTERS.sub('-', stem).strip()
        return stem or cls.DEFAULT_NAME

    @classmethod
    def extension_from_url(cls, url: str) -> str:
        """Pick the saved file's extension from the URL suffix.

        Examples:
            >>> FilesafeConverter.extension_from_url("https://x.com/a.PNG?x=1")
            'png'
            >>> FilesafeConverter.extension_from_url("https://x.com/render")
            'jpg'
        """
        ext = posixpath.splitext(cls._last_segment(url))[1].lstrip('.').lower()
        if ext in cls.DOWNLOAD_EXTENSIONS:
            return ext
        return cls.DEFAULT_EXTENSION
