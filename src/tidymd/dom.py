#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tidymd/dom.py
"""Narrowing helpers over the parsed HTML tree.

The tree itself comes from BeautifulSoup. Its node variants map onto the
document model used by the converter as follows:

- ``BeautifulSoup`` object: the fragment root
- ``Tag``: an element (mutable ``name``, ``attrs`` mapping)
- ``NavigableString``: a text node
- ``Comment``: a comment node

The helpers here are plain predicates so that rule matching can dispatch on
the variant and tag name without subclassing BeautifulSoup's classes.

"""

from __future__ import annotations

from typing import Optional

from bs4 import (
    BeautifulSoup,
    CData,
    Comment,
    Declaration,
    Doctype,
    NavigableString,
    PageElement,
    ProcessingInstruction,
    Tag,
)
from bs4.element import PreformattedString

from tidymd.constants import BLOCK_TAGS, VOID_TAGS


def parse_fragment(html: str) -> BeautifulSoup:
    """Parse an HTML fragment into a tree.

    Attribute values are kept as the literal strings found in the markup
    (``class`` is not split into a list) so that rules can match them with
    regular expressions.

    Parameters
    ----------
    html : str
        HTML markup, typically the output of the Markdown renderer

    Returns
    -------
    BeautifulSoup
        The fragment root

    """
    return BeautifulSoup(html, "html.parser", multi_valued_attributes=None)


def is_root(node: Optional[PageElement]) -> bool:
    return isinstance(node, BeautifulSoup)


def is_element(node: Optional[PageElement]) -> bool:
    """Check whether a node is an element (a tag other than the fragment root)."""
    return isinstance(node, Tag) and not isinstance(node, BeautifulSoup)


def is_parent(node: Optional[PageElement]) -> bool:
    """Check whether a node can hold children (elements and the root)."""
    return isinstance(node, Tag)


def is_comment(node: Optional[PageElement]) -> bool:
    """Check whether a node is a comment.

    CDATA sections, processing instructions and declarations count as
    comments too, the way an HTML5 fragment parser reads them as bogus
    comments.
    """
    return isinstance(node, (Comment, CData, ProcessingInstruction)) or (
        isinstance(node, Declaration) and not isinstance(node, Doctype)
    )


def is_doctype(node: Optional[PageElement]) -> bool:
    return isinstance(node, Doctype)


def is_text(node: Optional[PageElement]) -> bool:
    """Check whether a node is character data.

    Comments, CDATA sections, doctypes and processing instructions are string
    subclasses in BeautifulSoup but are not text for our purposes.
    """
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def tag_name(node: Optional[PageElement]) -> Optional[str]:
    """Return the tag name of an element, or None for any other node."""
    if is_element(node):
        return node.name  # type: ignore[union-attr]
    return None


def node_type(node: Optional[PageElement]) -> str:
    """Describe the variant of a node for error messages."""
    if node is None:
        return "none"
    if is_element(node):
        return f"element <{node.name}>"  # type: ignore[union-attr]
    if is_root(node):
        return "root"
    return type(node).__name__


def get_attribute(node: Optional[PageElement], attribute: str) -> Optional[str]:
    """Get an attribute value, treating missing and empty values alike.

    Parameters
    ----------
    node : PageElement or None
        Node to read from; non-elements have no attributes
    attribute : str
        Attribute name

    Returns
    -------
    str or None
        The attribute value, or None when absent or empty

    """
    if not is_element(node):
        return None
    value = node.get(attribute)  # type: ignore[union-attr]
    if isinstance(value, list):
        value = " ".join(value)
    return value or None


def no_extra_attributes(node: PageElement, *attributes: str) -> bool:
    """Check that an element carries no attributes besides the given ones.

    Returns
    -------
    bool
        True if every attribute of the node is in ``attributes``

    """
    if not is_element(node):
        return True
    allowed = set(attributes)
    return all(name in allowed for name in node.attrs)  # type: ignore[union-attr]


def child_index(node: PageElement) -> int:
    """Position of a node among its parent's children.

    Identity is used rather than equality because BeautifulSoup compares
    tags structurally, which would conflate identical siblings.
    """
    parent = node.parent
    if parent is None:
        return -1
    for index, child in enumerate(parent.contents):
        if child is node:
            return index
    return -1


def is_block(node: Optional[PageElement]) -> bool:
    """Check whether a node always starts on its own line."""
    if not is_element(node):
        return False
    if node.name == "code" and tag_name(node.parent) == "pre":  # type: ignore[union-attr]
        # code tags in a pre are treated as blocks
        return True
    return node.name in BLOCK_TAGS  # type: ignore[union-attr]


def is_void(node: Optional[PageElement]) -> bool:
    return is_element(node) and node.name in VOID_TAGS  # type: ignore[union-attr]
