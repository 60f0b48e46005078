"""Test utilities for the tidymd test suite.

Helpers for converting HTML fragments directly, bypassing the Markdown
renderer, and for loading golden fixtures.
"""

from pathlib import Path
from typing import Sequence

from tidymd.dom import parse_fragment
from tidymd.engine import convert_tree
from tidymd.options import TidyOptions
from tidymd.state import Link

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def convert_html(html: str, links: Sequence[Link] = (), **options) -> str:
    """Convert an HTML fragment to tidy Markdown.

    Parameters
    ----------
    html : str
        HTML fragment, as the Markdown renderer would produce it
    links : sequence of Link
        Link references known to the document
    **options
        ``TidyOptions`` overrides

    Returns
    -------
    str
        The converted Markdown body, without link definitions

    """
    return convert_tree(parse_fragment(html), list(links), TidyOptions(**options))


def load_fixture_pairs() -> list[tuple[str, str, str]]:
    """Load ``<name>.input.md`` / ``<name>.expected.md`` pairs from the fixtures directory."""
    pairs = []
    for input_path in sorted(FIXTURES_DIR.glob("*.input.md")):
        name = input_path.name[: -len(".input.md")]
        expected_path = FIXTURES_DIR / f"{name}.expected.md"
        pairs.append(
            (
                name,
                input_path.read_text(encoding="utf-8"),
                expected_path.read_text(encoding="utf-8"),
            )
        )
    return pairs
