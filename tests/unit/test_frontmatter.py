#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for YAML front matter handling."""

import pytest

from tidymd.frontmatter import dump_front_matter, split_front_matter


@pytest.mark.unit
class TestSplitFrontMatter:
    """Test separating front matter from the body."""

    def test_mapping(self):
        """A YAML mapping is split off the body."""
        attributes, body = split_front_matter("---\ntitle: Hello\ncount: 3\n---\n# Body\n")
        assert attributes == {"title": "Hello", "count": 3}
        assert body == "# Body\n"

    def test_no_front_matter(self):
        """Documents without a leading delimiter are all body."""
        content = "# Title\n\n---\n\ntext\n"
        assert split_front_matter(content) == ({}, content)

    def test_unterminated(self):
        """An opening delimiter without a closing one is not front matter."""
        content = "---\ntitle: x\n"
        assert split_front_matter(content) == ({}, content)

    def test_dots_terminator(self):
        """The block may also end with a YAML document end marker."""
        attributes, body = split_front_matter("---\na: 1\n...\nbody")
        assert attributes == {"a": 1}
        assert body == "body"

    def test_invalid_yaml(self):
        """Unparseable front matter leaves the whole input as the body."""
        content = "---\na: [unclosed\n---\nbody\n"
        assert split_front_matter(content) == ({}, content)

    def test_not_a_mapping(self):
        """A scalar or list block is not treated as attributes."""
        content = "---\n- a\n- b\n---\nbody\n"
        assert split_front_matter(content) == ({}, content)

    def test_empty_block(self):
        """An empty block yields no attributes."""
        assert split_front_matter("---\n---\nbody") == ({}, "body")

    def test_byte_order_mark(self):
        """A leading byte order mark does not hide the front matter."""
        attributes, body = split_front_matter("\ufeff---\na: 1\n---\nbody")
        assert attributes == {"a": 1}
        assert body == "body"


@pytest.mark.unit
class TestDumpFrontMatter:
    """Test writing front matter back."""

    def test_empty(self):
        """No attributes means no block."""
        assert dump_front_matter({}) == ""

    def test_key_order_and_unicode(self):
        """Keys keep their order and non-ASCII text is written as is."""
        result = dump_front_matter({"title": "Café", "tags": ["a", "b"], "author": "x"})
        assert result == "---\ntitle: Café\ntags:\n- a\n- b\nauthor: x\n---\n\n"
