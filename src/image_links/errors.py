"""Typed exception hierarchy root for image-relay.

This module defines the base exception every other package derives from,
plus the error raised internally when a reference match cannot be turned
into a usable Reference.
"""


class ImageRelayError(Exception):
    """Base exception for all image-relay errors.

    Use this to catch any application-level error from the tool.
    """
    pass


class MalformedReferenceError(ImageRelayError):
    """Raised when a matched image reference has no extractable path.

    The extractor catches this and drops the match silently; it never
    reaches callers of extract_references().
    """

    def __init__(self, source: str):
        super().__init__(f"Malformed image reference: {source!r}")
        self.source = source
