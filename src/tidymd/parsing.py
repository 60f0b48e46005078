#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tidymd/parsing.py
"""Markdown lexing and HTML rendering.

The body of the document is rendered to HTML with mistune. Raw HTML in the
source is passed through unescaped so that it survives the round trip, and
the link reference definitions collected by the block parser are returned
alongside the HTML.

"""

from __future__ import annotations

import logging
import re

import mistune

from tidymd.constants import MISTUNE_PLUGINS, ORDERED_LIST_TRIGGER_PATTERN
from tidymd.state import Link

logger = logging.getLogger(__name__)

# Code is left verbatim when escaping list triggers
_CODE_SEGMENT = re.compile(r"(<pre\b.*?</pre>|<code\b.*?</code>)", re.DOTALL | re.IGNORECASE)


def create_markdown() -> mistune.Markdown:
    """Build a mistune parser that renders HTML without escaping raw markup."""
    return mistune.create_markdown(escape=False, plugins=list(MISTUNE_PLUGINS))


def extract_links(ref_links: dict) -> list[Link]:
    """Build the sorted link table from mistune's reference definitions.

    Parameters
    ----------
    ref_links : dict
        ``state.env["ref_links"]``, keyed by normalized label

    Returns
    -------
    list[Link]
        Links with lower-cased names, sorted by name then url

    """
    links = [
        Link(name=key.lower(), url=data["url"], title=data.get("title") or None) for key, data in ref_links.items()
    ]
    return sorted(links, key=lambda link: (link.name, link.url))


def render_markdown(content: str) -> tuple[str, list[Link]]:
    """Render Markdown to HTML and collect its link references.

    Parameters
    ----------
    content : str
        Markdown body (without front matter)

    Returns
    -------
    tuple[str, list[Link]]
        The rendered HTML and the sorted link references

    """
    html, state = create_markdown().parse(content)
    links = extract_links(state.env.get("ref_links", {}))
    logger.debug("Rendered %d characters of HTML with %d link references", len(html), len(links))
    return str(html), links


def escape_list_triggers(html: str) -> str:
    """Escape ``12. `` sequences so the text is not read back as a list marker."""
    segments = _CODE_SEGMENT.split(html)
    for index in range(0, len(segments), 2):
        segments[index] = ORDERED_LIST_TRIGGER_PATTERN.sub(r"\1\\. ", segments[index])
    return "".join(segments)
