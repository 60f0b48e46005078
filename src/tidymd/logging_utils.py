#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Logging setup for the tidymd command line.

Handlers are attached to the ``tidymd`` package logger rather than the root
logger, so embedding applications keep their own logging configuration.
Every record is tagged with the document being tidied, which makes the
output of a run over many files readable::

    DEBUG: docs/intro.md: Rewriting heading h3 -> h2

"""

from __future__ import annotations

import logging
import sys
import time
from contextlib import contextmanager
from typing import Iterator, Optional

PACKAGE_LOGGER = "tidymd"
NO_DOCUMENT = "-"

CONSOLE_FORMAT = "%(levelname)s: %(document)s: %(message)s"
TRACE_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] [%(document)s] %(message)s"
TRACE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger(__name__)


class DocumentFilter(logging.Filter):
    """Add the name of the current document to each record as ``document``."""

    def __init__(self) -> None:
        super().__init__()
        self.document = NO_DOCUMENT

    def filter(self, record: logging.LogRecord) -> bool:
        record.document = self.document
        return True


_document_filter = DocumentFilter()


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
) -> logging.Logger:
    """Configure the handlers of the ``tidymd`` logger.

    Parameters
    ----------
    log_level : int | str
        Numeric logging level or string name (e.g., "INFO").
    log_file : str, optional
        Also append log output to this file.
    trace_mode : bool, default False
        When true, emit timestamps and logger names.

    Returns
    -------
    logging.Logger
        The configured package logger.

    """
    resolved_level = log_level if isinstance(log_level, int) else getattr(logging, str(log_level).upper(), logging.INFO)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(resolved_level)
    package_logger.propagate = False
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    if trace_mode:
        formatter = logging.Formatter(TRACE_FORMAT, datefmt=TRACE_DATE_FORMAT)
    else:
        formatter = logging.Formatter(CONSOLE_FORMAT)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    file_error: Optional[OSError] = None
    if log_file:
        try:
            handlers.append(logging.FileHandler(log_file, mode="a", encoding="utf-8"))
        except OSError as exc:
            file_error = exc

    for handler in handlers:
        handler.setLevel(resolved_level)
        handler.setFormatter(formatter)
        # handler filters also see records from the tidymd.* child loggers
        handler.addFilter(_document_filter)
        package_logger.addHandler(handler)

    if file_error is not None:
        logger.warning("Could not create log file %s: %s", log_file, file_error)
    elif log_file:
        logger.info("Logging to file: %s", log_file)

    return package_logger


@contextmanager
def log_document(name: str) -> Iterator[None]:
    """Tag log records emitted inside the block with the document ``name``.

    The time spent on the document is logged at DEBUG level when the block
    exits normally.
    """
    previous = _document_filter.document
    _document_filter.document = name
    start = time.perf_counter()
    try:
        yield
        logger.debug("Finished in %.3fs", time.perf_counter() - start)
    finally:
        _document_filter.document = previous
