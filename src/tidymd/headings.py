#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tidymd/headings.py
"""Repair of skipped heading levels.

Some people accidentally skip levels in their headings (like jumping from h1
to h3), which breaks things like tables of contents. The repair assumes that
the relations between nearby headings are meaningful and tries to preserve
them: ``h1, h3, h3`` becomes ``h1, h2, h2`` rather than ``h1, h2, h3``.

Only headings that are direct children of the document root are considered;
headings nested in lists, quotes or raw HTML blocks are left alone.

"""

from __future__ import annotations

import logging
from typing import Sequence

from bs4 import PageElement, Tag

from tidymd.constants import HEADING_TAG_PATTERN
from tidymd.dom import is_element
from tidymd.exceptions import ConversionError

logger = logging.getLogger(__name__)

MAX_HEADING_LEVEL = 6


def top_level_headings(root: PageElement) -> list[Tag]:
    """Return the headings that are not nested in any other element."""
    return [
        child
        for child in getattr(root, "contents", [])
        if is_element(child) and HEADING_TAG_PATTERN.fullmatch(child.name)
    ]


def normalize_levels(levels: Sequence[int], ensure_first_header_is_h1: bool = True) -> list[int]:
    """Repair a flat sequence of heading levels.

    Every heading must lie between the root depth and one level below the
    previous heading. A heading outside that range is shifted into it, along
    with the run of headings directly after it that are at least as deep,
    so the run keeps its internal structure. The shifted heading is then
    examined again so its new level can trigger a further correction.

    Parameters
    ----------
    levels : sequence of int
        Heading levels in document order
    ensure_first_header_is_h1 : bool, default True
        Force the first heading to level 1. Otherwise the first heading's
        level becomes the root depth that no later heading may go above.

    Returns
    -------
    list[int]
        The repaired levels

    Raises
    ------
    ConversionError
        If the repair does not settle, which would indicate a bug

    Examples
    --------
    >>> normalize_levels([1, 3, 3])
    [1, 2, 2]
    >>> normalize_levels([3, 5], ensure_first_header_is_h1=False)
    [3, 4]

    """
    levels = list(levels)
    if not levels:
        return levels

    # starting at 0 forces the first heading to be an h1
    last_depth = 0
    if not ensure_first_header_is_h1:
        # act as though the level above the first heading were the root
        last_depth = (levels[0] - 1) or 0

    # no heading may go above the first one, e.g. h3, h4, h2 becomes h3, h4, h3
    root_depth = last_depth + 1

    # every heading is corrected at most once and accepted once
    attempts_left = 2 * len(levels) + 1
    index = 0
    while index < len(levels):
        attempts_left -= 1
        if attempts_left < 0:
            raise ConversionError("Heading levels did not converge", node_name="h")

        depth = levels[index]
        if root_depth <= depth <= last_depth + 1:
            last_depth = depth
            index += 1
            continue

        # shift the offending heading and the headings nested under it by the
        # gap to the nearest acceptable level
        if depth <= root_depth:
            gap = depth - root_depth
        else:
            gap = depth - (last_depth + 1)

        for following in range(index, len(levels)):
            if levels[following] < depth:
                break
            levels[following] = min(levels[following] - gap, MAX_HEADING_LEVEL)

        # don't advance: the shifted heading must be checked again so that it
        # sets the new last depth

    return levels


def fix_headings(root: PageElement, ensure_first_header_is_h1: bool = True) -> None:
    """Rewrite the tag names of the top-level headings under ``root`` in place.

    Documents without headings are left untouched.
    """
    headings = top_level_headings(root)
    if not headings:
        return

    original = [int(heading.name[1]) for heading in headings]
    repaired = normalize_levels(original, ensure_first_header_is_h1)
    for heading, before, after in zip(headings, original, repaired):
        if before != after:
            logger.debug("Rewriting heading h%d -> h%d", before, after)
            heading.name = f"h{after}"
