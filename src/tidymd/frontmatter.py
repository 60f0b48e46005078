#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tidymd/frontmatter.py
"""YAML front matter handling.

Front matter is a YAML mapping at the very start of a document, delimited by
``---`` lines (the closing line may also be ``...``). It is split off before
the body is tidied and written back, normalized, in front of the result.

A block that does not parse as a YAML mapping is not an error: the whole
input is then treated as the document body.

"""

from __future__ import annotations

import logging
from typing import Any

import yaml

logger = logging.getLogger(__name__)

FRONT_MATTER_DELIMITER = "---"
FRONT_MATTER_END_DELIMITERS = ("---", "...")


def split_front_matter(content: str) -> tuple[dict[str, Any], str]:
    """Separate front matter attributes from the document body.

    Parameters
    ----------
    content : str
        The raw document

    Returns
    -------
    tuple[dict, str]
        The front matter attributes (empty if there are none) and the body

    """
    text = content[1:] if content.startswith("\ufeff") else content
    if not (text.startswith("---\n") or text.startswith("---\r\n")):
        return {}, content

    lines = text.splitlines(keepends=True)
    end_index = -1
    for i in range(1, len(lines)):
        if lines[i].rstrip() in FRONT_MATTER_END_DELIMITERS:
            end_index = i
            break

    if end_index <= 0:
        return {}, content

    yaml_content = "".join(lines[1:end_index])
    body = "".join(lines[end_index + 1 :])

    try:
        attributes = yaml.safe_load(yaml_content)
    except yaml.YAMLError as e:
        logger.debug("Ignoring front matter that is not valid YAML: %s", e)
        return {}, content

    if attributes is None:
        attributes = {}
    if not isinstance(attributes, dict):
        logger.debug("Ignoring front matter that is not a mapping (got %s)", type(attributes).__name__)
        return {}, content

    return attributes, body


def dump_front_matter(attributes: dict[str, Any]) -> str:
    """Render attributes as a front matter block followed by a blank line.

    Returns an empty string when there are no attributes.
    """
    if not attributes:
        return ""
    dumped = yaml.safe_dump(attributes, sort_keys=False, allow_unicode=True, default_flow_style=False)
    return f"{FRONT_MATTER_DELIMITER}\n{dumped.strip()}\n{FRONT_MATTER_DELIMITER}\n\n"
