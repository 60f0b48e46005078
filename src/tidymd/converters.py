#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tidymd/converters.py
"""The ordered table of conversion rules.

Each :class:`Rule` turns one kind of element into Markdown. ``filter``
decides which nodes the rule applies to, ``replacement`` receives the
trimmed, already converted content of the node and returns its Markdown,
``surrounding_blank_lines`` puts the result on its own paragraph and
``trailing_whitespace`` is appended after the node.

Rules are matched from the top of :data:`RULES` downwards and the first
match wins. The last rule matches everything, so every element resolves to
some rule. The order is significant: the rule for children of unrecognized
elements must come first so it shadows every other rule below it.

"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from typing import Callable, Collection, Optional, Sequence, Union

from bs4 import Comment, NavigableString, PageElement, Tag

from tidymd.constants import (
    BLOCKQUOTE_PREFIX,
    CODE_HIGHLIGHT_PATTERN,
    COMMENT_TAG,
    DEFAULT_CODE_FENCE,
    DEFAULT_CODE_SPAN,
    HORIZONTAL_RULE,
    LANGUAGE_CODE_REWRITES,
    LIST_BULLET,
    MAILTO_PREFIX_PATTERN,
    VALID_AUTOLINK_PATTERN,
)
from tidymd.dom import (
    child_index,
    get_attribute,
    is_element,
    is_text,
    is_void,
    no_extra_attributes,
    tag_name,
)
from tidymd.exceptions import RuleFilterError
from tidymd.state import ConversionState, Link
from tidymd.tables import extract_rows, format_table
from tidymd.utils.text import delimit_code, indent_lines

__all__ = ["Link", "Rule", "RULES", "FALLBACK_RULE", "can_convert", "find_rule", "find_reference"]

logger = logging.getLogger(__name__)

NodePredicate = Callable[[PageElement, ConversionState], bool]
RuleFilter = Union[str, Collection[str], NodePredicate]
Replacement = Callable[[str, Tag, ConversionState], str]


@dataclass(frozen=True)
class Rule:
    """A conversion rule.

    Parameters
    ----------
    name : str
        Identifier used in log messages
    filter : str, collection of str, or callable
        A tag name, a set of tag names, or a predicate taking the node and
        the conversion state
    replacement : callable
        Producer taking ``(content, node, state)``; the state gives access to
        the document's link references
    surrounding_blank_lines : bool, default False
        Surround the output with blank lines
    trailing_whitespace : str or None, default None
        Whitespace always emitted after the node

    """

    name: str
    filter: RuleFilter
    replacement: Replacement
    surrounding_blank_lines: bool = False
    trailing_whitespace: Optional[str] = None


def find_reference(links: Sequence[Link], url: str, title: Optional[str]) -> Optional[Link]:
    """Find the link reference with exactly this url and title."""
    for link in links:
        if link.url == url and link.title == title:
            return link
    return None


def is_valid_autolink(url: str) -> bool:
    return bool(VALID_AUTOLINK_PATTERN.search(url))


def highlight_language(node: Optional[PageElement]) -> Optional[str]:
    """Read a language from a highlighting class such as ``language-python``."""
    class_name = get_attribute(node, "class")
    if class_name is None:
        return None
    match = CODE_HIGHLIGHT_PATTERN.search(class_name)
    return match.group(1) if match else None


def _has_direct_text(node: Tag) -> bool:
    return any(is_text(child) for child in node.contents)


def indent_children(node: Tag) -> None:
    """Put each child of an element on its own indented line.

    Elements that contain text directly are left alone, since adding
    whitespace would change their content. Void elements cannot have
    children at all.
    """
    if is_void(node) or _has_direct_text(node):
        return
    for child in list(node.contents):
        child.insert_before(NavigableString("\n  "))
    node.append(NavigableString("\n"))


# =============================================================================
# Replacements
# =============================================================================


def _fallback_child(content: str, node: Tag, state: ConversionState) -> str:
    # serialized along with the unrecognized parent
    return ""


def _content(content: str, node: Tag, state: ConversionState) -> str:
    return content


def _nothing(content: str, node: Tag, state: ConversionState) -> str:
    return ""


def _strikethrough(content: str, node: Tag, state: ConversionState) -> str:
    return f"~~{content}~~"


def _emphasis(content: str, node: Tag, state: ConversionState) -> str:
    if "_" in content:
        return "*" + content.replace("*", "\\*") + "*"
    return "_" + content.replace("_", "\\_") + "_"


def _strong(content: str, node: Tag, state: ConversionState) -> str:
    return "**" + content.replace("*", "\\*") + "**"


def _line_break(content: str, node: Tag, state: ConversionState) -> str:
    return "<br>"


def _link(content: str, node: Tag, state: ConversionState) -> str:
    url = get_attribute(node, "href") or ""
    title = get_attribute(node, "title")

    reference = find_reference(state.links, url, title)
    if reference is not None:
        if content.lower() == reference.name:
            return f"[{content}]"
        return f"[{content}][{reference.name}]"
    if title:
        return f'[{content}]({url} "{title}")'
    if is_valid_autolink(url) and (content == url or content == MAILTO_PREFIX_PATTERN.sub("", url)):
        return f"<{content}>"
    return f"[{content}]({url})"


def _image(content: str, node: Tag, state: ConversionState) -> str:
    alt = get_attribute(node, "alt") or ""
    url = get_attribute(node, "src") or ""
    title = get_attribute(node, "title")

    reference = find_reference(state.links, url, title)
    if reference is not None:
        if alt.lower() == reference.name:
            return f"![{alt}]"
        return f"![{alt}][{reference.name}]"
    if title:
        return f'![{alt}]({url} "{title}")'
    return f"![{alt}]({url})"


def _checkbox(content: str, node: Tag, state: ConversionState) -> str:
    return "[x] " if node.has_attr("checked") else "[ ] "


def _table(content: str, node: Tag, state: ConversionState) -> str:
    alignments, rows = extract_rows(node, state.replacement_of)
    return format_table(alignments, rows)


def _code_block(content: str, node: Tag, state: ConversionState) -> str:
    language = None
    first = node.contents[0] if node.contents else None
    if tag_name(first) == "code":
        language = highlight_language(first)
    if language is None and tag_name(node.parent) == "div":
        language = highlight_language(node.parent)
    if language is not None:
        language = language.lower()
        language = LANGUAGE_CODE_REWRITES.get(language, language)
    return delimit_code(f"{language or ''}\n{content}\n", DEFAULT_CODE_FENCE)


def _code(content: str, node: Tag, state: ConversionState) -> str:
    if tag_name(node.parent) != "pre":
        return delimit_code(content, DEFAULT_CODE_SPAN)
    # handled once the enclosing pre is reached; passing it through here
    # keeps it from being serialized as raw markup
    return content


def _heading(content: str, node: Tag, state: ConversionState) -> str:
    level = int(node.name[1])
    return f"{'#' * level} {content}"


def _horizontal_rule(content: str, node: Tag, state: ConversionState) -> str:
    return HORIZONTAL_RULE


def _blockquote(content: str, node: Tag, state: ConversionState) -> str:
    return indent_lines(content, BLOCKQUOTE_PREFIX, BLOCKQUOTE_PREFIX.rstrip())


def _list_item(content: str, node: Tag, state: ConversionState) -> str:
    if tag_name(node.parent) == "ol":
        prefix = f"{child_index(node) + 1}. "
    else:
        prefix = LIST_BULLET
    if "\n" in content:
        # continuation lines line up with the text after the marker, so "10. "
        # needs four spaces where "- " needs two
        content = indent_lines(content, " " * len(prefix)).lstrip()
    return prefix + content


def _comment(content: str, node: Tag, state: ConversionState) -> str:
    return f"<!-- {content} -->"


def _serialize(content: str, node: Tag, state: ConversionState) -> str:
    """Re-serialize an unrecognized element as HTML.

    The element and its children are laid out one child per indented line.
    This happens on a copy so the document tree itself is never modified.
    """
    clone = copy.copy(node)
    pairs = [(node, clone), *zip(node.descendants, clone.descendants)]

    to_indent = [
        duplicate
        for original, duplicate in pairs
        if original is node or state.rule_of(original) in (FALLBACK_RULE, FALLBACK_CHILD_RULE)
    ]
    comments = [duplicate for original, duplicate in pairs if tag_name(original) == COMMENT_TAG]

    for duplicate in to_indent:
        indent_children(duplicate)
    for duplicate in comments:
        duplicate.replace_with(Comment(duplicate.get_text()))

    return str(clone)


# =============================================================================
# Filters
# =============================================================================


def _is_fallback_child(node: PageElement, state: ConversionState) -> bool:
    return state.rule_of(node.parent) is FALLBACK_RULE


def _is_plain_image(node: PageElement, state: ConversionState) -> bool:
    # images with custom styling or other attributes are kept as HTML
    return tag_name(node) == "img" and no_extra_attributes(node, "alt", "src", "title")


def _is_task_checkbox(node: PageElement, state: ConversionState) -> bool:
    if tag_name(node) != "input" or (get_attribute(node, "type") or "").lower() != "checkbox":
        return False
    parent = node.parent
    if tag_name(parent) == "p":
        parent = parent.parent
    return tag_name(parent) == "li"


def _is_highlight_wrapper(node: PageElement, state: ConversionState) -> bool:
    return tag_name(node) == "div" and highlight_language(node) is not None


def _matches_anything(node: PageElement, state: ConversionState) -> bool:
    return True


# =============================================================================
# Rule table
# =============================================================================

FALLBACK_CHILD_RULE = Rule("fallback-child", _is_fallback_child, _fallback_child)
FALLBACK_RULE = Rule("fallback", _matches_anything, _serialize, surrounding_blank_lines=True)

RULES: tuple[Rule, ...] = (
    FALLBACK_CHILD_RULE,
    Rule("paragraph", "p", _content, surrounding_blank_lines=True),
    Rule("table-cell", ("td", "th"), _content),
    Rule("table-section", ("tbody", "thead", "tfoot", "tr"), _nothing),
    Rule("strikethrough", ("del", "s", "strike"), _strikethrough),
    Rule("emphasis", ("em", "i"), _emphasis),
    Rule("strong", ("strong", "b"), _strong),
    Rule("line-break", "br", _line_break, trailing_whitespace="\n"),
    Rule("link", "a", _link),
    Rule("image", _is_plain_image, _image),
    Rule("task-checkbox", _is_task_checkbox, _checkbox),
    Rule("table", "table", _table, surrounding_blank_lines=True),
    Rule("code-block", "pre", _code_block, surrounding_blank_lines=True),
    Rule("code", "code", _code),
    Rule("highlight-wrapper", _is_highlight_wrapper, _content, surrounding_blank_lines=True),
    Rule("heading", ("h1", "h2", "h3", "h4", "h5", "h6"), _heading, surrounding_blank_lines=True),
    Rule("horizontal-rule", "hr", _horizontal_rule, surrounding_blank_lines=True),
    Rule("blockquote", "blockquote", _blockquote, surrounding_blank_lines=True),
    Rule("list-item", "li", _list_item, trailing_whitespace="\n"),
    Rule("list", ("ul", "ol"), _content, surrounding_blank_lines=True),
    Rule("comment", COMMENT_TAG, _comment),
    FALLBACK_RULE,
)


def can_convert(node: PageElement, rule_filter: RuleFilter, state: ConversionState) -> bool:
    """Check whether a rule filter accepts ``node``.

    Raises
    ------
    RuleFilterError
        If the filter is neither a tag name, a collection of tag names nor a
        callable

    """
    if isinstance(rule_filter, str):
        return is_element(node) and node.name == rule_filter
    if isinstance(rule_filter, (tuple, list, set, frozenset)):
        return is_element(node) and node.name in rule_filter
    if callable(rule_filter):
        return bool(rule_filter(node, state))
    raise RuleFilterError(rule_filter)


def find_rule(node: PageElement, state: ConversionState, rules: Sequence[Rule] = RULES) -> Optional[Rule]:
    """Return the first rule whose filter accepts ``node``."""
    for rule in rules:
        if can_convert(node, rule.filter, state):
            return rule
    return None
