#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the tidymd library.

This module defines the exception classes raised while tidying a Markdown
document. Conversion is deterministic, so every error here is fatal for the
document being processed: callers receive either a complete result or one of
these exceptions, never a partially converted document.

Exception Hierarchy
-------------------
- TidyMdError (base exception)

  - ValidationError (parameter/option validation)
    - RuleFilterError (malformed entry in the conversion rule table)

  - InputError (input that is not Markdown text)

  - ConversionError (tree conversion failures)
    - TableStructureError (unexpected content inside a table row)
    - TableAlignmentError (conflicting column alignment)

Front-matter parse failures are deliberately absent: they are recovered from
by treating the whole input as the document body.

"""

from __future__ import annotations

from typing import Any


class TidyMdError(Exception):
    """Base exception class for all tidymd-specific errors.

    Catching this will catch every error raised by the library.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(TidyMdError):
    """Exception raised for invalid parameters or options.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class RuleFilterError(ValidationError):
    """Exception raised when a conversion rule carries an unusable filter.

    This points at a programming error in the rule table rather than at the
    document being converted.

    Parameters
    ----------
    filter_value : any
        The filter that could not be interpreted

    """

    def __init__(self, filter_value: Any):
        """Initialize the rule filter error."""
        super().__init__(
            f"Rule filter must be a tag name, a collection of tag names or a callable, "
            f"got {type(filter_value).__name__}",
            parameter_name="filter",
            parameter_value=filter_value,
        )


class InputError(TidyMdError):
    """Exception raised when the input is not Markdown text.

    Parameters
    ----------
    message : str
        Description of the input problem
    input_type : type or str, optional
        The type of the rejected input, or a label such as "file"

    """

    def __init__(self, message: str, input_type: type | str | None = None, original_error: Exception | None = None):
        """Initialize the input error."""
        super().__init__(message, original_error=original_error)
        self.input_type = input_type


class ConversionError(TidyMdError):
    """Exception raised when the document tree cannot be converted to Markdown.

    Parameters
    ----------
    message : str
        Description of the conversion failure
    node_name : str, optional
        Tag name (or node type) of the offending node

    """

    def __init__(self, message: str, node_name: str | None = None, original_error: Exception | None = None):
        """Initialize the conversion error."""
        super().__init__(message, original_error=original_error)
        self.node_name = node_name


class TableStructureError(ConversionError):
    """Exception raised for content that cannot be laid out as a Markdown table."""


class TableAlignmentError(ConversionError):
    """Exception raised when the cells of one column disagree on their alignment.

    Markdown alignment is column-wide, so a column whose cells request
    different ``text-align`` values cannot be represented.

    Parameters
    ----------
    column : int
        Zero-based index of the inconsistent column

    """

    def __init__(self, column: int):
        """Initialize the alignment error for the given column."""
        super().__init__(f"Alignment in a table column {column} is not consistent", node_name="table")
        self.column = column
