"""Unit tests for image_links.extractor module."""

import pytest

from src.image_links.extractor import (
    DEFAULT_HTML_NAME,
    derive_html_name,
    extract_bracket_references,
    extract_html_references,
    extract_references,
    extract_wiki_references,
)
from src.image_links.models import Reference
from src.rewriter.display_name import render_markup


class TestBracketReferences:
    """Test cases for ![alt](target) extraction."""

    def test_plain_local_path(self):
        """Local path with extension is extracted with its alt text."""
        refs = extract_bracket_references("before ![cat](assets/cat.png) after")

        assert refs == [Reference(source="![cat](assets/cat.png)", path="assets/cat.png", name="cat")]

    def test_angle_brackets_allow_spaces(self):
        """Angle-bracketed path keeps its spaces."""
        refs = extract_bracket_references("![alt](<./a b.png>)")

        assert len(refs) == 1
        assert refs[0].path == "./a b.png"
        assert refs[0].name == "alt"
        assert refs[0].source == "![alt](<./a b.png>)"

    def test_empty_alt_on_remote_url(self):
        """Empty alt text gives an empty name."""
        refs = extract_bracket_references("![](https://x.com/i.png)")

        assert len(refs) == 1
        assert refs[0].path == "https://x.com/i.png"
        assert refs[0].name == ""
        assert refs[0].is_remote

    def test_title_is_not_part_of_path(self):
        """A quoted title after the path is ignored."""
        refs = extract_bracket_references('![a](img/a.jpg "A title")')

        assert refs[0].path == "img/a.jpg"
        assert refs[0].source == '![a](img/a.jpg "A title")'

    def test_remote_url_without_extension(self):
        """Remote targets do not need an extension."""
        refs = extract_bracket_references("![x](https://img.host/render?id=42)")

        assert refs[0].path == "https://img.host/render?id=42"

    def test_local_path_without_extension_is_ignored(self):
        """Local targets without an extension are not image references."""
        assert extract_bracket_references("![x](notes/readme)") == []

    def test_plain_link_is_ignored(self):
        """Links without the leading ! are not images."""
        assert extract_bracket_references("[doc](file.pdf)") == []

    def test_multiple_references_in_order(self):
        """References are returned in document order."""
        text = "![a](a.png)\ntext\n![b](b.gif)"

        assert [ref.path for ref in extract_bracket_references(text)] == ["a.png", "b.gif"]

    def test_angle_brackets_do_not_span_lines(self):
        """An unclosed angle bracket never swallows the following lines."""
        text = "![draft](<todo\n\nKeep this paragraph intact, see notes.png>)\n"

        assert extract_bracket_references(text) == []

    def test_http_prefixed_folder_is_local(self):
        """A relative path starting with "http" is not a URL."""
        refs = extract_bracket_references("![a](httpdocs/pic.png)")

        assert refs[0].path == "httpdocs/pic.png"
        assert not refs[0].is_remote


class TestWikiReferences:
    """Test cases for ![[target|display]] extraction."""

    def test_bare_target(self):
        """Name is the target's basename without extension."""
        refs = extract_wiki_references("![[folder/pic.png]]")

        assert refs == [Reference(source="![[folder/pic.png]]", path="folder/pic.png", name="pic")]

    def test_display_suffix_is_appended(self):
        """The |display part is appended to the derived name."""
        refs = extract_wiki_references("![[pic.png|100]]")

        assert refs[0].path == "pic.png"
        assert refs[0].name == "pic|100"

    def test_plain_wiki_link_is_ignored(self):
        """Non-embedded wiki links are not images."""
        assert extract_wiki_references("[[pic.png]]") == []


class TestHtmlReferences:
    """Test cases for <img src> extraction."""

    def test_name_from_url_with_query(self):
        """Name is the URL filename without the query."""
        refs = extract_html_references('<img src="https://x.com/a/b.png?x=1">')

        assert refs[0].path == "https://x.com/a/b.png?x=1"
        assert refs[0].name == "b.png"

    def test_single_quotes_and_self_closing(self):
        """Single-quoted src and self-closing tags are matched."""
        refs = extract_html_references("<IMG width='20' src='assets/pic.png' />")

        assert refs[0].path == "assets/pic.png"
        assert refs[0].name == "pic.png"

    def test_unquoted_src_is_ignored(self):
        """An unquoted src attribute does not match."""
        assert extract_html_references("<img src=pic.png>") == []


class TestDeriveHtmlName:
    """Test cases for derive_html_name fallback strategies."""

    @pytest.mark.parametrize("src,expected", [
        ("https://x.com/a/b.png?x=1", "b.png"),
        ("https://x.com/gallery/item", "gallery/item"),
        ("assets/pic.png?v=2", "pic.png"),
        ("pic", DEFAULT_HTML_NAME),
        ("https://x.com/", DEFAULT_HTML_NAME),
    ])
    def test_strategies_in_order(self, src, expected):
        """First non-empty strategy result wins."""
        assert derive_html_name(src) == expected


class TestExtractReferences:
    """Test cases for the combined extract_references function."""

    def test_concatenates_syntaxes(self):
        """Bracket, wiki and HTML results are concatenated in that order."""
        text = '<img src="c.png">\n![[b.png]]\n![a](a.png)'

        refs = extract_references(text)

        assert [ref.path for ref in refs] == ["a.png", "b.png", "c.png"]

    def test_text_without_images(self):
        """Text without images yields an empty list."""
        assert extract_references("# Title\n\nJust [a link](https://x.com).") == []

    def test_html_inside_bracket_is_reported_twice(self):
        """An <img> tag embedded in bracket markup is reported by both syntaxes."""
        text = '![<img src="https://x.com/a.png">](https://x.com/a.png)'

        refs = extract_references(text)

        assert len(refs) == 2

    @pytest.mark.parametrize("text", [
        "![a](assets/a.png)",
        "![[a.png|200]]",
        '<img src="https://x.com/a/b.png">',
    ])
    def test_rendered_markup_extracts_same_path(self, text):
        """Rendering a reference as bracket markup and extracting again keeps its path."""
        original = extract_references(text)[0]

        again = extract_references(render_markup(original.name, original.path))

        assert len(again) == 1
        assert again[0].path == original.path

    def test_rewritten_text_extracts_only_remote_references(self):
        """Text rewritten with uploaded URLs is not matched as local or malformed."""
        text = "![a](https://cdn.example.com/a.png)\n![b|300](https://cdn.example.com/b.png)"

        refs = extract_references(text)

        assert len(refs) == 2
        assert all(ref.is_remote for ref in refs)
