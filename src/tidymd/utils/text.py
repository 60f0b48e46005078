#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tidymd/utils/text.py
"""Character-level text utilities for the conversion pipeline.

Functions
---------
escape_markup : Escape text that would read back as HTML
clean_text : Normalize the content of a text node for Markdown output
collapse_blank_lines : Reduce runs of blank lines to a single blank line
delimit_code : Wrap code in a backtick delimiter that it cannot close
indent_lines : Prefix lines of a block of text
display_width : Terminal column width of a string

Examples
--------
Choosing a code span delimiter:

    >>> from tidymd.utils.text import delimit_code
    >>> delimit_code("a ` b", "`")
    '``a ` b``'

Measuring wide characters:

    >>> display_width("表格")
    4

"""

from __future__ import annotations

import re
from html.entities import html5

from bs4 import PageElement
from wcwidth import wcswidth, wcwidth

from tidymd.constants import SMART_PUNCTUATION
from tidymd.dom import tag_name

_WHITESPACE_RUN = re.compile(r"\s+")
_EXCESS_NEWLINES = re.compile(r"\n{3,}")
_TAG_START = re.compile(r"<(?=[A-Za-z/!?])")
# legacy entities such as "&copy" are decoded even without the semicolon
_LEGACY_ENTITIES = sorted((name for name in html5 if not name.endswith(";")), key=len, reverse=True)
_REFERENCE_START = re.compile(
    r"&(?=#[0-9]+|#[xX][0-9A-Fa-f]+|[A-Za-z][A-Za-z0-9]*;|" + "|".join(_LEGACY_ENTITIES) + ")"
)


def escape_markup(text: str) -> str:
    """Escape ``<`` and ``&`` where they would start a tag or an entity.

    BeautifulSoup has already decoded the references in the source, so
    ``&lt;b&gt;`` arrives as ``<b>`` and has to be escaped again to stay text.
    A lone ``<`` or ``&`` is left alone.

        >>> escape_markup("a <b> & &amp; c")
        'a &lt;b> & &amp;amp; c'

    """
    text = _REFERENCE_START.sub("&amp;", text)
    return _TAG_START.sub("&lt;", text)


def clean_text(node: PageElement) -> str:
    """Normalize the text of a text node.

    Whitespace runs are collapsed to one space unless the node sits inside a
    ``pre`` (as its child or grandchild). Typographic punctuation is replaced
    with its ASCII equivalent, and text that would parse as markup is
    escaped, unless the node is directly inside ``code`` or ``pre``, whose
    content is whitespace- and character-sensitive.

    Parameters
    ----------
    node : PageElement
        A text node

    Returns
    -------
    str
        The cleaned text

    """
    parent = node.parent
    parent_name = tag_name(parent)
    grandparent_name = tag_name(parent.parent) if parent is not None else None

    text = str(node)

    if "pre" not in (parent_name, grandparent_name):
        text = _WHITESPACE_RUN.sub(" ", text)

    if parent_name in ("code", "pre"):
        return text

    for char, replacement in SMART_PUNCTUATION:
        text = text.replace(char, replacement)
    return escape_markup(text)


def collapse_blank_lines(text: str) -> str:
    """Replace every run of three or more newlines with exactly two."""
    return _EXCESS_NEWLINES.sub("\n\n", text)


def delimit_code(code: str, delimiter: str) -> str:
    """Wrap code with backtick delimiters.

    Parameters
    ----------
    code : str
        The code to wrap
    delimiter : str
        The delimiter to start with. Additional backticks are added while a
        run of exactly that many backticks occurs inside the code, since it
        would end the code span (or fence) prematurely.

    Returns
    -------
    str
        The delimited code

    """
    while re.search(rf"([^`]|^){delimiter}([^`]|$)", code):
        delimiter += "`"

    if code.startswith("`"):
        code = f" {code}"
    if code.endswith("`"):
        code += " "
    return delimiter + code + delimiter


def indent_lines(text: str, prefix: str, blank_prefix: str = "") -> str:
    """Prefix every line of ``text``.

    Parameters
    ----------
    text : str
        Text to indent
    prefix : str
        Prefix for lines with content
    blank_prefix : str, default ""
        Prefix for empty lines

    Returns
    -------
    str
        The indented text

    """
    return "\n".join(prefix + line if line else blank_prefix for line in text.split("\n"))


def display_width(text: str) -> int:
    """Return the number of terminal columns needed to show ``text``.

    East Asian wide and full-width characters count as two columns and
    combining characters as zero. Non-printable characters, which make
    ``wcswidth`` give up, count as zero.
    """
    width = wcswidth(text)
    if width >= 0:
        return width
    return sum(max(wcwidth(char), 0) for char in text)
