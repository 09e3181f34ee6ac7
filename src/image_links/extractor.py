"""Image reference extraction from markdown text.

This module scans raw document text for the three image reference syntaxes
found in markdown vaults and wraps every match in a Reference record:

- Bracket form: ![alt](path.png), ![alt](<path with spaces.png>),
  ![alt](path.png "title"), ![alt](https://host/anything)
- Wiki form: ![[target.png]] and ![[target.png|display]]
- HTML form: <img src="target" ... />

Each syntax is handled by its own pure function so it can be tested in
isolation. Matches are not deduplicated across syntaxes: an <img> tag
nested inside another form is reported by both patterns.
"""

import logging
import posixpath
import re
from typing import Callable, List, Optional
from urllib.parse import SplitResult, urlsplit

from .errors import MalformedReferenceError
from .models import Reference

logger = logging.getLogger(__name__)

# Local targets need an extension; angle brackets allow spaces but not line
# breaks in the path.
# Remote targets only need an http(s) scheme.
BRACKET_PATTERN = re.compile(
    r'!\[(.*?)\]\(<([^<>\n]+\.\w+)>\)'
    r'|!\[(.*?)\]\((\S+\.\w+)(?:\s+"[^"]*")?\)'
    r'|!\[(.*?)\]\((https?://.*?)\)'
)

WIKI_PATTERN = re.compile(r'!\[\[(.*?)(\s*?\|.*?)?\]\]')

HTML_IMG_PATTERN = re.compile(
    r'<img[^>]+src\s*=\s*["\']([^"\']+)["\'][^>]*/?>',
    re.IGNORECASE
)

DEFAULT_HTML_NAME = "image"


def _build_reference(source: str, path: Optional[str], name: Optional[str]) -> Reference:
    if not path:
        raise MalformedReferenceError(source)
    return Reference(source=source, path=path, name=name or "")


def _collect(
    pattern: "re.Pattern[str]",
    text: str,
    build: Callable[["re.Match[str]"], Reference],
) -> List[Reference]:
    references: List[Reference] = []
    for match in pattern.finditer(text):
        try:
            references.append(build(match))
        except MalformedReferenceError as e:
            logger.debug(f"Dropping reference: {e}")
    return references


def _bracket_reference(match: "re.Match[str]") -> Reference:
    # Exactly one of the three alternatives matched; pick its (alt, path) pair
    groups = match.groups()
    for index in (0, 2, 4):
        if groups[index + 1] is not None:
            return _build_reference(match.group(0), groups[index + 1], groups[index])
    raise MalformedReferenceError(match.group(0))


def _wiki_reference(match: "re.Match[str]") -> Reference:
    target = match.group(1)
    name = posixpath.splitext(posixpath.basename(target))[0]
    if match.group(2):
        name = f"{name}{match.group(2)}"
    return _build_reference(match.group(0), target, name)


def _parse_absolute_url(raw: str) -> Optional[SplitResult]:
    try:
        parsed = urlsplit(raw)
    except ValueError:
        return None
    if not parsed.scheme:
        return None
    return parsed


def _name_from_url_filename(raw: str) -> Optional[str]:
    parsed = _parse_absolute_url(raw)
    if parsed is None:
        return None
    pathname = parsed.path or "/"
    filename = pathname[pathname.rfind("/") + 1:]
    if filename and "." in filename:
        return filename
    return None


def _name_from_url_pathname(raw: str) -> Optional[str]:
    parsed = _parse_absolute_url(raw)
    if parsed is None:
        return None
    pathname = parsed.path or "/"
    if pathname == "/":
        return None
    return pathname[1:] if pathname.startswith("/") else pathname


def _name_from_raw_segment(raw: str) -> Optional[str]:
    # Only used when the src is not an absolute URL
    if _parse_absolute_url(raw) is not None or "/" not in raw:
        return None
    return raw.split("/")[-1].split("?")[0]


# Evaluated in order until one strategy yields a non-empty name
HTML_NAME_STRATEGIES: List[Callable[[str], Optional[str]]] = [
    _name_from_url_filename,
    _name_from_url_pathname,
    _name_from_raw_segment,
]


def derive_html_name(src: str) -> str:
    """Derive a display name for an <img> src attribute.

    Examples:
        >>> derive_html_name("https://x.com/a/b.png?x=1")
        'b.png'
        >>> derive_html_name("https://x.com/gallery/item")
        'gallery/item'
        >>> derive_html_name("assets/pic.png")
        'pic.png'
        >>> derive_html_name("pic")
        'image'
    """
    for strategy in HTML_NAME_STRATEGIES:
        name = strategy(src)
        if name:
            return name
    return DEFAULT_HTML_NAME


def _html_reference(match: "re.Match[str]") -> Reference:
    src = match.group(1)
    return _build_reference(match.group(0), src, derive_html_name(src))


def extract_bracket_references(text: str) -> List[Reference]:
    """Extract ![alt](target) references in document order."""
    return _collect(BRACKET_PATTERN, text, _bracket_reference)


def extract_wiki_references(text: str) -> List[Reference]:
    """Extract ![[target|display]] references in document order."""
    return _collect(WIKI_PATTERN, text, _wiki_reference)


def extract_html_references(text: str) -> List[Reference]:
    """Extract <img src="..."> references in document order."""
    return _collect(HTML_IMG_PATTERN, text, _html_reference)


def extract_references(text: str) -> List[Reference]:
    """Extract all image references from markdown text.

    Results of the three syntaxes are concatenated (bracket, wiki, HTML).
    Order across syntaxes carries no meaning: rewriting is keyed on each
    reference's source text, not on its offset.

    Args:
        text: Full document text

    Returns:
        List of Reference objects; malformed matches are dropped
    """
    references = (
        extract_bracket_references(text)
        + extract_wiki_references(text)
        + extract_html_references(text)
    )
    logger.debug(f"Extracted {len(references)} image reference(s)")
    return references
