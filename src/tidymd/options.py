#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for tidying Markdown.

Options are immutable; use :meth:`TidyOptions.create_updated` to derive a
modified copy.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, fields, replace
from typing import Any, Mapping

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from tidymd.constants import DEFAULT_ALIGN_HEADERS, DEFAULT_ENSURE_FIRST_HEADER_IS_H1
from tidymd.exceptions import ValidationError


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        Raises
        ------
        ValidationError
            If a keyword does not name an option

        """
        known = {f.name for f in fields(self)}
        for key in kwargs:
            if key not in known:
                raise ValidationError(f"Unknown option: {key}", parameter_name=key, parameter_value=kwargs[key])
        return replace(self, **kwargs)


@dataclass(frozen=True)
class TidyOptions(CloneFrozenMixin):
    """Options controlling how a document is tidied.

    Parameters
    ----------
    ensure_first_header_is_h1 : bool, default True
        Force the first top-level heading to be an h1. Disable this when
        the Markdown is a piece of a larger document rather than a full one.
    align_headers : bool, default True
        Repair skipped heading levels. When disabled, headings keep their
        original levels.

    """

    ensure_first_header_is_h1: bool = field(
        default=DEFAULT_ENSURE_FIRST_HEADER_IS_H1,
        metadata={
            "help": "Force the first heading to be an H1",
            "cli_name": "no-ensure-first-header-is-h1",
        },
    )
    align_headers: bool = field(
        default=DEFAULT_ALIGN_HEADERS,
        metadata={
            "help": "Repair skipped heading levels",
            "cli_name": "no-align-headers",
        },
    )

    def __post_init__(self) -> None:
        """Validate option types.

        Raises
        ------
        ValidationError
            If an option is not a boolean

        """
        for f in fields(self):
            value = getattr(self, f.name)
            if not isinstance(value, bool):
                raise ValidationError(
                    f"{f.name} must be a boolean, got {type(value).__name__}",
                    parameter_name=f.name,
                    parameter_value=value,
                )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "TidyOptions":
        """Build options from a configuration mapping.

        Keys may be written in snake_case or kebab-case.

        Raises
        ------
        ValidationError
            If a key does not name an option or a value is not a boolean

        """
        return cls().create_updated(**{key.replace("-", "_"): value for key, value in data.items()})
