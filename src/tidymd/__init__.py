"""tidymd - Fix ugly Markdown.

tidymd rewrites "dirty" Markdown into a canonical, consistently styled
document. The source is rendered to HTML, parsed, and converted back into
Markdown by a fixed, ordered table of rules, which makes the output
independent of the many ways the same document can be written.

Key Features
------------
- Heading hierarchy repair (``h1, h3, h3`` becomes ``h1, h2, h2``)
- Consistent emphasis, strong and list markers
- Tables padded and aligned by display width
- Fenced code blocks with canonical language names
- Reference links collapsed and their definitions sorted at the end
- Typographic quotes, dashes and ellipses replaced with ASCII
- YAML front matter preserved

Requirements
------------
- Python 3.10+
- mistune, beautifulsoup4, PyYAML, wcwidth

Examples
--------
    >>> from tidymd import tidy_markdown
    >>> print(tidy_markdown("Title\\n=====\\n\\n* one\\n* two"), end="")
    # Title
    <BLANKLINE>
    - one
    - two

Tidied Markdown is a fixed point:

    >>> text = tidy_markdown("Some __strong__ text")
    >>> tidy_markdown(text) == text
    True

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "tidymd requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "2.1.2"

from tidymd.engine import tidy_markdown
from tidymd.exceptions import (
    ConversionError,
    InputError,
    RuleFilterError,
    TableAlignmentError,
    TableStructureError,
    TidyMdError,
    ValidationError,
)
from tidymd.options import TidyOptions
from tidymd.state import Link

__all__ = [
    "__version__",
    "tidy_markdown",
    "TidyOptions",
    "Link",
    # Exceptions
    "TidyMdError",
    "ValidationError",
    "RuleFilterError",
    "InputError",
    "ConversionError",
    "TableStructureError",
    "TableAlignmentError",
]
