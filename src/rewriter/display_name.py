"""Display names and markup for rewritten image references."""

from urllib.parse import quote

from src.settings.models import DisplayNamePolicy

# Name the clipboard gives pasted screenshots
DEFAULT_IMAGE_NAME = "image.png"

# Characters encodeURI leaves untouched
_URI_SAFE = "/;,?:@&=+$-_.!~*'()#"


def render_display_name(name: str, policy: DisplayNamePolicy, size_suffix: str = "") -> str:
    """Apply the display-name policy to a reference name.

    Examples:
        >>> render_display_name("chart", DisplayNamePolicy.KEEP, "|300")
        'chart|300'
        >>> render_display_name("image.png", DisplayNamePolicy.BLANK_IF_DEFAULT)
        ''
    """
    if policy is DisplayNamePolicy.BLANK:
        return ""
    if policy is DisplayNamePolicy.BLANK_IF_DEFAULT and name == DEFAULT_IMAGE_NAME:
        return ""
    return f"{name}{size_suffix or ''}"


def render_markup(name: str, target: str) -> str:
    return f"![{name}]({target})"


def encode_uri(path: str) -> str:
    """Percent-encode a relative path for use as a markdown link target.

    Example:
        >>> encode_uri("assets/My Chart.png")
        'assets/My%20Chart.png'
    """
    return quote(path, safe=_URI_SAFE)
