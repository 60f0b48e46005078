#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for the conversion state side-table."""

import pytest

from tidymd.converters import RULES
from tidymd.dom import parse_fragment
from tidymd.exceptions import ConversionError
from tidymd.state import NO_WHITESPACE, ConversionState, Link, Whitespace

PARAGRAPH_RULE = RULES[1]


@pytest.mark.unit
class TestLink:
    """Test link references."""

    def test_definition(self):
        """Definitions carry the title only when present."""
        assert Link("a", "http://a.com").definition() == "[a]: http://a.com"
        assert Link("a", "http://a.com", "Title").definition() == '[a]: http://a.com "Title"'

    def test_ordering(self):
        """Links sort by name, then url."""
        links = [Link("b", "http://b"), Link("a", "http://z"), Link("a", "http://y")]
        assert [(link.name, link.url) for link in sorted(links)] == [
            ("a", "http://y"),
            ("a", "http://z"),
            ("b", "http://b"),
        ]


@pytest.mark.unit
class TestConversionState:
    """Test annotation bookkeeping."""

    def test_record_and_read(self):
        """A processed node exposes its replacement and whitespace."""
        root = parse_fragment("<p>a</p>")
        state = ConversionState()
        state.assign_rule(root.p, PARAGRAPH_RULE)
        assert state.rule_of(root.p) is PARAGRAPH_RULE
        assert state.replacement_of(root.p) is None

        state.record(root.p, "a", Whitespace("\n\n", "\n\n"))
        assert state.replacement_of(root.p) == "a"
        assert state.whitespace_of(root.p) == Whitespace("\n\n", "\n\n")
        assert len(state) == 1

    def test_rule_assigned_once(self):
        """Assigning a second rule is an error."""
        root = parse_fragment("<p>a</p>")
        state = ConversionState()
        state.assign_rule(root.p, PARAGRAPH_RULE)
        with pytest.raises(ConversionError):
            state.assign_rule(root.p, PARAGRAPH_RULE)

    def test_record_once(self):
        """A node is converted exactly once."""
        root = parse_fragment("<p>a</p>")
        state = ConversionState()
        state.assign_rule(root.p, PARAGRAPH_RULE)
        state.record(root.p, "a", NO_WHITESPACE)
        with pytest.raises(ConversionError, match="already converted"):
            state.record(root.p, "b", NO_WHITESPACE)

    def test_record_without_rule(self):
        """Nodes without a rule cannot be recorded."""
        root = parse_fragment("<p>a</p>")
        with pytest.raises(ConversionError):
            ConversionState().record(root.p, "a", NO_WHITESPACE)

    def test_identical_siblings_distinct(self):
        """Structurally equal nodes keep separate annotations."""
        root = parse_fragment("<p>a</p><p>a</p>")
        first, second = root.find_all("p")
        assert first == second
        state = ConversionState()
        state.assign_rule(first, PARAGRAPH_RULE)
        assert state.has_rule(first)
        assert not state.has_rule(second)
        assert state.whitespace_of(second) is NO_WHITESPACE

    def test_links_kept_as_tuple(self):
        """The link table is immutable for the whole conversion."""
        state = ConversionState([Link("a", "http://a")])
        assert state.links == (Link("a", "http://a"),)
