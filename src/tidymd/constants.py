#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and static lookup tables for tidymd.

This module centralizes the read-only tables and default values shared by the
conversion pipeline. Everything defined here is initialized once at import
time and never mutated afterwards, so it is safe to share between concurrent
conversions of different documents.

Constants are organized by category:
1. Type Definitions
2. Element Classification - block and void tag sets
3. Code Blocks - language detection and language-name rewrites
4. Tables - alignment detection and separator markers
5. Conversion Defaults
6. Configuration Discovery
"""

from __future__ import annotations

import re
from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

Alignment = Literal["left", "center", "right"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# =============================================================================
# Element Classification
# =============================================================================

# Elements that always start on their own line
BLOCK_TAGS: frozenset[str] = frozenset(
    {
        "address",
        "article",
        "aside",
        "audio",
        "blockquote",
        "body",
        "canvas",
        "center",
        "dd",
        "dir",
        "div",
        "dl",
        "dt",
        "fieldset",
        "figcaption",
        "figure",
        "footer",
        "form",
        "frameset",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "header",
        "hgroup",
        "hr",
        "html",
        "isindex",
        "li",
        "main",
        "menu",
        "nav",
        "noframes",
        "noscript",
        "ol",
        "output",
        "p",
        "pre",
        "section",
        "table",
        "tbody",
        "td",
        "tfoot",
        "th",
        "thead",
        "tr",
        "ul",
    }
)

# Elements that never have children
VOID_TAGS: frozenset[str] = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "command",
        "embed",
        "hr",
        "img",
        "input",
        "keygen",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

HEADING_TAG_PATTERN = re.compile(r"h[0-6]")

# Synthetic element that carries the text of an HTML comment through conversion
COMMENT_TAG = "_comment"

# =============================================================================
# Code Blocks
# =============================================================================

CODE_HIGHLIGHT_PATTERN = re.compile(r"(?:highlight highlight|lang(?:uage)?)-(\S+)")

DEFAULT_CODE_FENCE = "```"
DEFAULT_CODE_SPAN = "`"

# Canonical names for the language tags of fenced code blocks. No value may
# also appear as a key, otherwise rewrites would chain.
LANGUAGE_CODE_REWRITES: dict[str, str] = {
    "c++": "cpp",
    "c#": "csharp",
    "cs": "csharp",
    "coffee": "coffeescript",
    "coffee-script": "coffeescript",
    "cson": "coffeescript",
    "docker": "dockerfile",
    "el": "lisp",
    "elisp": "lisp",
    "emacs-lisp": "lisp",
    "erl": "erlang",
    "f#": "fsharp",
    "golang": "go",
    "h": "c",
    "hpp": "cpp",
    "hs": "haskell",
    "htm": "html",
    "js": "javascript",
    "jsonc": "json",
    "kt": "kotlin",
    "md": "markdown",
    "mkd": "markdown",
    "node": "javascript",
    "objc": "objectivec",
    "objective-c": "objectivec",
    "pl": "perl",
    "ps1": "powershell",
    "posh": "powershell",
    "py": "python",
    "py3": "python",
    "python3": "python",
    "rb": "ruby",
    "rs": "rust",
    "scm": "scheme",
    "sh": "bash",
    "shell": "bash",
    "shell-script": "bash",
    "styl": "stylus",
    "ts": "typescript",
    "vb": "vbnet",
    "xhtml": "html",
    "yml": "yaml",
    "zsh": "bash",
}

# =============================================================================
# Tables
# =============================================================================

TABLE_ALIGNMENT_PATTERN = re.compile(r"text-align:\s*(right|left|center)")
TABLE_CELL_TAGS: frozenset[str] = frozenset({"th", "td"})
TABLE_COLUMN_SEPARATOR = " | "
TABLE_SINGLE_COLUMN_PREFIX = "| "
TABLE_SINGLE_COLUMN_SUFFIX = " |"

# Narrowest column that still leaves one "-" in its separator marker
MIN_SEPARATOR_WIDTHS: dict[Alignment | None, int] = {
    None: 1,
    "left": 2,
    "right": 2,
    "center": 3,
}

# =============================================================================
# Conversion Defaults
# =============================================================================

DEFAULT_ENSURE_FIRST_HEADER_IS_H1 = True
DEFAULT_ALIGN_HEADERS = True

HORIZONTAL_RULE = "-" * 80
LIST_BULLET = "- "
BLOCKQUOTE_PREFIX = "> "

# Escapes "12. " in rendered HTML so the text is not re-read as a list marker
ORDERED_LIST_TRIGGER_PATTERN = re.compile(r"(\d+)\. ")

# Mirrors the autolink check of classic Markdown renderers
VALID_AUTOLINK_PATTERN = re.compile(r".+(?:@|:/).+")

MAILTO_PREFIX_PATTERN = re.compile(r"^mailto:")

# Smart punctuation replacements applied to ordinary text
SMART_PUNCTUATION: tuple[tuple[str, str], ...] = (
    ("\u2014", "--"),  # em-dash
    ("\u2018", "'"),  # opening single quote
    ("\u2019", "'"),  # closing single quote, apostrophe
    ("\u201c", '"'),
    ("\u201d", '"'),
    ("\u2026", "..."),  # ellipsis
)

MISTUNE_PLUGINS: tuple[str, ...] = ("strikethrough", "table", "task_lists")

# =============================================================================
# Configuration Discovery
# =============================================================================

ENV_VAR_PREFIX = "TIDYMD_"
CONFIG_FILENAMES: tuple[str, ...] = (".tidymd.toml", ".tidymd.yaml", ".tidymd.yml", ".tidymd.json")
PYPROJECT_TOOL_SECTION = "tidymd"
DEFAULT_LOG_LEVEL: LogLevel = "WARNING"
