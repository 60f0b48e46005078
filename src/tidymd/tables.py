#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tidymd/tables.py
"""Layout of pipe-delimited Markdown tables.

Rows are read from an already converted table subtree: every cell carries its
own Markdown replacement by the time the ``table`` element is processed, so
this module only deals with strings, alignments and column widths.

Column widths are measured in terminal columns rather than code points, so
tables containing CJK text or emoji line up when viewed in a monospace font.

"""

from __future__ import annotations

import re
from collections import deque
from typing import Callable, Optional, Sequence

from bs4 import PageElement

from tidymd.constants import (
    MIN_SEPARATOR_WIDTHS,
    TABLE_ALIGNMENT_PATTERN,
    TABLE_CELL_TAGS,
    TABLE_COLUMN_SEPARATOR,
    TABLE_SINGLE_COLUMN_PREFIX,
    TABLE_SINGLE_COLUMN_SUFFIX,
    Alignment,
)
from tidymd.dom import get_attribute, is_element, is_text, tag_name
from tidymd.exceptions import TableAlignmentError, TableStructureError
from tidymd.utils.text import display_width

ReplacementLookup = Callable[[PageElement], Optional[str]]

# a pipe preceded by an even number of backslashes still separates cells
_UNESCAPED_PIPE = re.compile(r"(?<!\\)((?:\\\\)*)\|")


def get_cell_alignment(cell: PageElement) -> Optional[Alignment]:
    """Read the alignment of a table cell from its ``style`` attribute.

    Returns
    -------
    {"left", "center", "right"} or None
        None when the cell does not declare a ``text-align``

    """
    style = get_attribute(cell, "style")
    if style is None:
        return None
    match = TABLE_ALIGNMENT_PATTERN.search(style)
    return match.group(1) if match else None  # type: ignore[return-value]


def join_columns(columns: Sequence[str]) -> str:
    """Join the cells of a single row.

    Single column tables are wrapped in pipes instead, otherwise the output
    would not be recognized as a table.
    """
    if len(columns) > 1:
        return TABLE_COLUMN_SEPARATOR.join(columns)
    return TABLE_SINGLE_COLUMN_PREFIX + (columns[0] if columns else "") + TABLE_SINGLE_COLUMN_SUFFIX


def escape_pipes(cell: str) -> str:
    """Escape the pipes in a cell so they do not end the column."""
    return _UNESCAPED_PIPE.sub(r"\1\\|", cell)


def extract_columns(row: PageElement, replacement_of: ReplacementLookup) -> tuple[list[str], list[Optional[Alignment]]]:
    """Collect the converted cells of one ``tr`` and their alignments.

    ``th`` and ``td`` are treated alike since Markdown cannot tell them
    apart; the first row always holds the headers.

    Raises
    ------
    TableStructureError
        If text appears directly inside the row

    """
    columns: list[str] = []
    alignments: list[Optional[Alignment]] = []
    for cell in row.contents:  # type: ignore[attr-defined]
        if tag_name(cell) in TABLE_CELL_TAGS:
            replacement = replacement_of(cell)
            if replacement is None:
                continue
            columns.append(escape_pipes(replacement))
            alignments.append(get_cell_alignment(cell))
        elif is_text(cell):
            raise TableStructureError(f"Cannot handle text {str(cell).strip()!r} in table row", node_name="tr")
    return columns, alignments


def extract_rows(
    table: PageElement, replacement_of: ReplacementLookup
) -> tuple[list[Optional[Alignment]], list[list[str]]]:
    """Find every row below a table element, breadth first.

    Parameters
    ----------
    table : PageElement
        The ``table`` element
    replacement_of : callable
        Returns the converted Markdown of a cell element

    Returns
    -------
    tuple[list, list[list[str]]]
        Column alignments and the rows of converted cells

    Raises
    ------
    TableAlignmentError
        If two rows disagree on the alignment of a column
    TableStructureError
        If the table has no rows or a row contains bare text

    """
    alignments: list[Optional[Alignment]] = []
    rows: list[list[str]] = []
    queue: deque[PageElement] = deque([table])

    while queue:
        element = queue.popleft()
        for child in element.contents:  # type: ignore[attr-defined]
            if tag_name(child) == "tr":
                columns, row_alignments = extract_columns(child, replacement_of)
                rows.append(columns)

                # alignment is column-wide in Markdown, so later rows may only
                # repeat what the earlier rows established
                for index, alignment in enumerate(row_alignments):
                    if index + 1 > len(alignments):
                        alignments.append(alignment)
                    if alignment != alignments[index]:
                        raise TableAlignmentError(index)
            elif is_element(child):
                queue.append(child)

    if not rows:
        raise TableStructureError("Table has no rows", node_name="table")

    # alignments for columns past the header that don't align anything
    while len(alignments) > len(rows[0]) and alignments[-1] is None:
        alignments.pop()

    return alignments, rows


def get_column_widths(rows: Sequence[Sequence[str]], alignments: Sequence[Optional[Alignment]] = ()) -> list[int]:
    """Compute the display width of each header column.

    The width of a column is the widest of its cells, never less than the
    length of its header, and never so narrow that the separator marker for
    its alignment would lose its ``-``.
    """
    widths = [len(cell or "") for cell in rows[0]]
    for row in rows:
        for index, cell in enumerate(row):
            if index < len(widths):
                widths[index] = max(display_width(cell), widths[index])

    for index, alignment in enumerate(alignments[: len(widths)]):
        widths[index] = max(widths[index], MIN_SEPARATOR_WIDTHS[alignment])
    return widths


def _pad_cell(cell: str, alignment: Optional[Alignment], width: Optional[int]) -> str:
    if width is None:
        return cell
    whitespace = max(width - display_width(cell), 0)
    if alignment == "right":
        return " " * whitespace + cell
    if alignment == "center":
        # rounding biases to the left since there are no half characters
        left = whitespace // 2
        return " " * left + cell + " " * (whitespace - left)
    # left is the default alignment when formatting
    return cell + " " * whitespace


def format_row(row: Sequence[str], alignments: Sequence[Optional[Alignment]], widths: Sequence[int]) -> str:
    """Pad the cells of a row to their column widths and join them.

    Cells beyond the header width are left unpadded. Trailing padding is
    trimmed from the joined line.
    """
    cells = [
        _pad_cell(
            cell,
            alignments[index] if index < len(alignments) else None,
            widths[index] if index < len(widths) else None,
        )
        for index, cell in enumerate(row)
    ]
    return join_columns(cells).rstrip()


def format_header_separator(alignments: Sequence[Optional[Alignment]], widths: Sequence[int]) -> str:
    """Build the row of ``---``, ``:--``, ``--:`` and ``:-:`` markers."""
    markers = []
    for index, alignment in enumerate(alignments):
        width = max(widths[index] if index < len(widths) else 0, MIN_SEPARATOR_WIDTHS[alignment])
        if alignment == "center":
            markers.append(":" + "-" * (width - 2) + ":")
        elif alignment == "left":
            markers.append(":" + "-" * (width - 1))
        elif alignment == "right":
            markers.append("-" * (width - 1) + ":")
        else:
            markers.append("-" * width)
    return join_columns(markers)


def format_table(alignments: Sequence[Optional[Alignment]], rows: Sequence[Sequence[str]]) -> str:
    """Lay out a whole table: header row, separator, then the body rows."""
    widths = get_column_widths(rows, alignments)
    lines = [
        format_row(rows[0], alignments, widths),
        format_header_separator(alignments, widths),
        *(format_row(row, alignments, widths) for row in rows[1:]),
    ]
    return "\n".join(lines)
