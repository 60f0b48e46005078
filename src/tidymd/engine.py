#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tidymd/engine.py
"""Markdown tidying pipeline.

This module rewrites "dirty" Markdown into a canonical, consistently styled
document. The input is rendered to HTML, parsed into a tree, and the tree is
converted back into Markdown by the ordered rules in
:mod:`tidymd.converters`:

1. Split off YAML front matter.
2. Render the body with mistune and collect its link references.
3. Parse the HTML into a tree and drop insignificant whitespace.
4. Repair the heading hierarchy.
5. Resolve a rule for every element, breadth first.
6. Convert the elements in reverse order, so every node's descendants are
   converted before the node itself.
7. Assemble the document and append the link reference definitions.

Examples
--------
Fix a skipped heading level and normalize emphasis:

    >>> from tidymd import tidy_markdown
    >>> tidy_markdown("# Title\\n\\n### Section\\n\\nSome *text*.")
    '# Title\\n\\n## Section\\n\\nSome _text_.\\n'

Keep the level of the first heading:

    >>> tidy_markdown("## Part\\n\\n#### Detail", ensure_first_header_is_h1=False)
    '## Part\\n\\n### Detail\\n'

"""

from __future__ import annotations

import logging
import re
from collections import deque
from typing import Any, Literal, Optional

from bs4 import BeautifulSoup, NavigableString, PageElement, Tag

from tidymd.constants import COMMENT_TAG
from tidymd.converters import find_rule
from tidymd.dom import (
    is_block,
    is_comment,
    is_doctype,
    is_element,
    is_parent,
    is_text,
    is_void,
    node_type,
    parse_fragment,
    tag_name,
)
from tidymd.exceptions import ConversionError, InputError
from tidymd.frontmatter import dump_front_matter, split_front_matter
from tidymd.headings import fix_headings
from tidymd.options import TidyOptions
from tidymd.parsing import escape_list_triggers, render_markdown
from tidymd.state import ConversionState, Link, Whitespace
from tidymd.utils.text import clean_text, collapse_blank_lines

logger = logging.getLogger(__name__)

_LEADING_WHITESPACE = re.compile(r"^\s")
_TRAILING_WHITESPACE = re.compile(r"\s$")


def convert_comment_node(root: PageElement, comment: PageElement) -> Tag:
    """Replace a comment with a ``_comment`` element holding its text."""
    factory = root if isinstance(root, BeautifulSoup) else BeautifulSoup("", "html.parser")
    element = factory.new_tag(COMMENT_TAG)
    element.append(NavigableString(str(comment)))
    comment.replace_with(element)
    return element


def bfs_order(root: PageElement) -> list[Tag]:
    """Flatten the elements below ``root`` into breadth-first order.

    Comments are converted into ``_comment`` elements as they are reached and
    doctypes are dropped. The root itself is not part of the result.
    """
    queue: deque[PageElement] = deque([root])
    order: list[Tag] = []
    while queue:
        node = queue.popleft()
        order.append(node)  # type: ignore[arg-type]
        if not is_parent(node):
            continue
        for child in list(node.contents):  # type: ignore[attr-defined]
            if is_doctype(child):
                child.extract()
            elif is_comment(child):
                queue.append(convert_comment_node(root, child))
            elif is_element(child):
                queue.append(child)

    return order[1:]


def remove_empty_nodes(node: PageElement) -> None:
    """Remove whitespace-only text children that carry no meaning.

    Such a child is insignificant when it is the first or last child, or
    when it sits next to a block element.
    """
    if not is_parent(node):
        return
    empty = []
    for child in node.contents:  # type: ignore[attr-defined]
        if is_text(child) and str(child).strip() == "":
            previous, following = child.previous_sibling, child.next_sibling
            if previous is None or following is None or is_block(previous) or is_block(following):
                empty.append(child)
    for child in empty:
        child.extract()


def get_child_text(child: PageElement, state: ConversionState) -> str:
    """Return the converted Markdown of a child node.

    Raises
    ------
    ConversionError
        If the child is neither converted nor a text node

    """
    if state.has_rule(child):
        replacement = state.replacement_of(child)
        if replacement is None:
            raise ConversionError(f"{node_type(child)} was used before it was converted", node_name=node_type(child))
        return replacement
    if is_text(child):
        return clean_text(child)
    raise ConversionError(f"Unsupported node type: {node_type(child)}", node_name=node_type(child))


def get_content(node: PageElement, state: ConversionState) -> str:
    """Construct the Markdown content of a node from its children.

    Whitespace around ``<br>`` is dropped, and between two siblings the
    flanking whitespace of both is inserted, with blank line runs collapsed
    to a single blank line.
    """
    if is_text(node):
        return str(node)

    content = ""
    previous: Optional[PageElement] = None
    for child in getattr(node, "contents", []):
        child_text = get_child_text(child, state)

        # prevent extra whitespace around <br>s
        if tag_name(child) == "br":
            content = content.rstrip()
        if tag_name(previous) == "br":
            child_text = child_text.lstrip()

        if previous is not None:
            gap = state.whitespace_of(previous).trailing + state.whitespace_of(child).leading
            if "\n" in gap:
                # no spaces at the end or start of a line
                content = content.rstrip(" ")
                child_text = child_text.lstrip(" ")
                gap = collapse_blank_lines(gap.replace(" ", ""))
            content += gap

        content += child_text
        previous = child

    return content


def is_flanked_by_whitespace(side: Literal["left", "right"], node: PageElement, state: ConversionState) -> bool:
    """Check whether an inline neighbour already supplies whitespace on ``side``."""
    if side == "left":
        sibling = node.previous_sibling
        pattern = _TRAILING_WHITESPACE
    else:
        sibling = node.next_sibling
        pattern = _LEADING_WHITESPACE

    if sibling is None or is_block(sibling):
        return False
    return bool(pattern.search(get_content(sibling, state)))


def flanking_whitespace(node: PageElement, state: ConversionState) -> Whitespace:
    """Compute the whitespace an inline node contributes to its neighbours.

    An inline node whose content starts (or ends) with whitespace gets a
    single space on that side, unless the neighbouring inline sibling already
    provides one. The outer whitespace of the first and last child is passed
    up as well.
    """
    leading = ""
    trailing = ""

    if not is_block(node):
        content = get_content(node, state)
        if _LEADING_WHITESPACE.search(content) and not is_flanked_by_whitespace("left", node, state):
            leading = " "
        if _TRAILING_WHITESPACE.search(content) and not is_flanked_by_whitespace("right", node, state):
            trailing = " "

    children = getattr(node, "contents", [])
    if children:
        leading += state.whitespace_of(children[0]).leading
        trailing += state.whitespace_of(children[-1]).trailing

    return Whitespace(leading, trailing)


def process(node: Tag, state: ConversionState) -> None:
    """Convert one element whose descendants are already converted."""
    rule = state.rule_of(node)
    if rule is None:
        raise ConversionError(f"No rule resolved for {node_type(node)}", node_name=node_type(node))

    content = "" if is_void(node) else get_content(node, state).strip()

    if rule.surrounding_blank_lines:
        whitespace = Whitespace("\n\n", "\n\n")
    else:
        whitespace = flanking_whitespace(node, state)
    if rule.trailing_whitespace is not None:
        whitespace = whitespace._replace(trailing=whitespace.trailing + rule.trailing_whitespace)

    if tag_name(node) == "li":
        # list items never get leading whitespace
        whitespace = whitespace._replace(leading="")

    state.record(node, rule.replacement(content, node, state), whitespace)


def convert_tree(root: PageElement, links: list[Link], options: TidyOptions) -> str:
    """Convert a parsed HTML tree into Markdown.

    Parameters
    ----------
    root : PageElement
        The fragment root; its headings may be renamed
    links : list[Link]
        Link references, in output order
    options : TidyOptions
        Conversion options

    Returns
    -------
    str
        The Markdown body, ending in a single newline, without the link
        reference definitions

    """
    # whitespace directly below the root goes first
    remove_empty_nodes(root)
    for node in bfs_order(root):
        remove_empty_nodes(node)

    if options.align_headers:
        fix_headings(root, options.ensure_first_header_is_h1)

    state = ConversionState(links)
    nodes = bfs_order(root)
    # parents resolve first, since some rules depend on the parent's rule
    for node in nodes:
        rule = find_rule(node, state)
        if rule is not None:
            state.assign_rule(node, rule)
    logger.debug("Resolved rules for %d elements", len(state))

    # deepest elements come last in breadth-first order
    for node in reversed(nodes):
        process(node, state)

    return get_content(root, state).rstrip() + "\n"


def _resolve_options(options: Optional[TidyOptions], overrides: dict[str, Any]) -> TidyOptions:
    options = options or TidyOptions()
    if overrides:
        options = options.create_updated(**overrides)
    return options


def tidy_markdown(dirty_markdown: str, options: Optional[TidyOptions] = None, **kwargs: Any) -> str:
    """Rewrite Markdown into its canonical form.

    Parameters
    ----------
    dirty_markdown : str
        Markdown source, optionally starting with YAML front matter
    options : TidyOptions, optional
        Conversion options; defaults to ``TidyOptions()``
    **kwargs
        Individual option overrides, e.g. ``align_headers=False``

    Returns
    -------
    str
        The tidied document: front matter, body, and link reference
        definitions

    Raises
    ------
    InputError
        If the input is not a string
    ValidationError
        If an option is unknown or invalid
    ConversionError
        If the document cannot be represented as Markdown

    """
    if not isinstance(dirty_markdown, str):
        raise InputError("Markdown input is not a string", input_type=type(dirty_markdown))

    options = _resolve_options(options, kwargs)

    attributes, body = split_front_matter(dirty_markdown)
    html, links = render_markdown(body)
    root = parse_fragment(escape_list_triggers(html))

    out = dump_front_matter(attributes)
    out += convert_tree(root, links, options)

    if links:
        out += "\n"
    for link in links:
        out += link.definition() + "\n"

    return out
