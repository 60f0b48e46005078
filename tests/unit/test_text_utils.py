#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for tidymd.utils.text."""

import pytest

from tidymd.dom import parse_fragment
from tidymd.utils.text import (
    clean_text,
    collapse_blank_lines,
    delimit_code,
    display_width,
    escape_markup,
    indent_lines,
)


@pytest.mark.unit
class TestDelimitCode:
    """Test choosing code delimiters."""

    def test_plain_code(self):
        """Code without backticks uses the given delimiter."""
        assert delimit_code("code", "`") == "`code`"

    def test_embedded_backtick(self):
        """A backtick inside the code lengthens the delimiter."""
        assert delimit_code("a`b", "`") == "``a`b``"

    def test_embedded_double_backtick(self):
        """A run matching the delimiter exactly forces a longer one."""
        assert delimit_code("a``b", "`") == "`a``b`"
        assert delimit_code("a``b", "``") == "```a``b```"

    def test_edge_backticks_padded(self):
        """Code starting or ending with a backtick is padded with spaces."""
        assert delimit_code("`a", "`") == "`` `a``"
        assert delimit_code("a`", "`") == "``a` ``"

    def test_fence_around_fence(self):
        """A code block containing a fence gets a longer fence."""
        assert delimit_code("md\n```\nx\n```\n", "```") == "````md\n```\nx\n```\n````"


@pytest.mark.unit
class TestCleanText:
    """Test text node normalization."""

    def test_whitespace_collapsed(self):
        """Whitespace runs collapse to one space outside pre."""
        root = parse_fragment("<p>a  \n  b</p>")
        assert clean_text(root.p.contents[0]) == "a b"

    def test_pre_whitespace_kept(self):
        """Whitespace is significant inside pre and code in pre."""
        root = parse_fragment("<pre><code>a   b\n  c</code></pre>")
        assert clean_text(root.code.contents[0]) == "a   b\n  c"

    def test_smart_punctuation(self):
        """Typographic quotes, dashes and ellipses become ASCII."""
        root = parse_fragment("<p>“it’s” — ‘ok’…</p>")
        assert clean_text(root.p.contents[0]) == "\"it's\" -- 'ok'..."

    def test_code_punctuation_kept(self):
        """Code keeps its characters verbatim."""
        root = parse_fragment("<p><code>“x”</code></p>")
        assert clean_text(root.code.contents[0]) == "“x”"

    def test_entities_decoded_once(self):
        """Escaped markup stays text instead of turning into a tag."""
        root = parse_fragment("<p>use &lt;div&gt; &amp;amp; &#8212; AT&amp;T</p>")
        assert clean_text(root.p.contents[0]) == "use &lt;div> &amp;amp; -- AT&T"

    def test_code_not_escaped(self):
        """Code is written verbatim."""
        root = parse_fragment("<p><code>&lt;div&gt;</code></p>")
        assert clean_text(root.code.contents[0]) == "<div>"

    def test_escape_markup(self):
        """Only text that would start a tag or a reference is escaped."""
        assert escape_markup("a < b && c") == "a < b && c"
        assert escape_markup("<x> </x> <!-- -->") == "&lt;x> &lt;/x> &lt;!-- -->"
        assert escape_markup("&copy; &copy &#169; &#xA9;") == "&amp;copy; &amp;copy &amp;#169; &amp;#xA9;"
        assert escape_markup("AT&T") == "AT&T"


@pytest.mark.unit
class TestLayoutHelpers:
    """Test line-level helpers."""

    def test_collapse_blank_lines(self):
        """Runs of blank lines collapse to one."""
        assert collapse_blank_lines("a\n\n\n\nb\n\nc") == "a\n\nb\n\nc"

    def test_indent_lines(self):
        """Blank lines get the blank prefix."""
        assert indent_lines("a\n\nb", "> ", ">") == "> a\n>\n> b"
        assert indent_lines("a\n\nb", "  ") == "  a\n\n  b"

    def test_display_width(self):
        """Wide characters occupy two columns."""
        assert display_width("abc") == 3
        assert display_width("表格") == 4
        assert display_width("") == 0
