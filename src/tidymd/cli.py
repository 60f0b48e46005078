#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Command-line interface for tidymd.

Examples
--------
Tidy standard input::

    $ cat README.md | tidymd > README.tidy.md

Rewrite files in place::

    $ tidymd --in-place docs/*.md

Check files in CI without touching them::

    $ tidymd --check docs/*.md

Keep the heading levels of a document fragment::

    $ tidymd --no-ensure-first-header-is-h1 chapter-2.md

Environment Variable Support
----------------------------
``TIDYMD_ENSURE_FIRST_HEADER_IS_H1`` and ``TIDYMD_ALIGN_HEADERS`` override
values from configuration files. Command-line flags override both.

"""

import argparse
import logging
import sys
from dataclasses import fields
from pathlib import Path
from typing import Optional, Sequence

from tidymd.config import load_options
from tidymd.constants import DEFAULT_LOG_LEVEL
from tidymd.engine import tidy_markdown
from tidymd.exceptions import InputError, TidyMdError
from tidymd.logging_utils import configure_logging, log_document
from tidymd.options import TidyOptions

logger = logging.getLogger(__name__)

STDIN_PATH = "-"
STDIN_NAME = "<stdin>"
EXIT_SUCCESS = 0
EXIT_ERROR = 1


def get_version() -> str:
    """Get the version of the tidymd package."""
    try:
        from importlib.metadata import PackageNotFoundError, version

        return version("tidymd")
    except PackageNotFoundError:
        from tidymd import __version__

        return __version__


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser.

    Option flags are generated from the ``TidyOptions`` field metadata, so
    each option appears as a ``--no-...`` switch that only turns it off.
    """
    parser = argparse.ArgumentParser(
        prog="tidymd",
        description="Fix ugly Markdown: rewrite it into a canonical, consistently styled form.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="With no FILE, or when FILE is -, read standard input and write standard output.",
    )
    parser.add_argument("files", nargs="*", metavar="FILE", help="Markdown files to tidy")

    options_group = parser.add_argument_group("conversion options")
    for f in fields(TidyOptions):
        options_group.add_argument(
            f"--{f.metadata['cli_name']}",
            dest=f.name,
            action="store_const",
            const=False,
            default=None,
            help=f"Do not {f.metadata['help'][0].lower()}{f.metadata['help'][1:]}",
        )

    mode_group = parser.add_mutually_exclusive_group()
    mode_group.add_argument("-i", "--in-place", action="store_true", help="Rewrite the files in place")
    mode_group.add_argument(
        "--check",
        action="store_true",
        help="Write nothing; exit with status 1 if any input would change",
    )

    parser.add_argument("--config", metavar="PATH", help="Configuration file (default: discovered from the CWD)")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=DEFAULT_LOG_LEVEL,
        help="Logging level (default: %(default)s)",
    )
    parser.add_argument("--log-file", metavar="PATH", help="Also write log messages to this file")
    parser.add_argument("--trace", action="store_true", help="Debug logging with timestamps and logger names")
    parser.add_argument("--version", "-V", action="version", version=f"tidymd {get_version()}")
    return parser


def _setup_logging_level(parsed_args: argparse.Namespace) -> None:
    log_level = logging.DEBUG if parsed_args.trace else getattr(logging, parsed_args.log_level.upper())
    configure_logging(log_level, log_file=parsed_args.log_file, trace_mode=parsed_args.trace)


def read_input(path: str) -> str:
    """Read a Markdown source, ``-`` meaning standard input.

    Raises
    ------
    InputError
        If the file cannot be read or is not valid UTF-8

    """
    if path == STDIN_PATH:
        return sys.stdin.read()
    try:
        return Path(path).read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise InputError("File is not valid UTF-8", input_type="file", original_error=e) from e
    except OSError as e:
        raise InputError(f"Cannot read file: {e.strerror or e}", input_type="file", original_error=e) from e


def write_output(path: str, content: str) -> None:
    """Write tidied Markdown back to ``path`` (``-`` meaning standard output)."""
    if path == STDIN_PATH:
        sys.stdout.write(content)
        return
    try:
        Path(path).write_text(content, encoding="utf-8")
    except OSError as e:
        raise InputError(f"Cannot write file: {e.strerror or e}", input_type="file", original_error=e) from e


def report_check(changed: Sequence[str], total: int) -> None:
    """Print the files that would be changed by tidying.

    A rich table is used when standard output is a terminal.
    """
    if not sys.stdout.isatty():
        for path in changed:
            print(f"would tidy {path}")
        return

    from rich.console import Console
    from rich.table import Table

    console = Console()
    if not changed:
        console.print(f"[green]{total} file(s) already tidy[/green]")
        return

    table = Table(title="Files that would be tidied", show_header=True, header_style="bold")
    table.add_column("File", style="cyan")
    for path in changed:
        table.add_row(path)
    console.print(table)
    console.print(f"[yellow]{len(changed)} of {total} file(s) would change[/yellow]")


def main(args: Optional[list[str]] = None) -> int:
    """Run the tidymd command line.

    Returns
    -------
    int
        0 on success, 1 on errors or when ``--check`` finds untidy input

    """
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    paths = parsed_args.files or [STDIN_PATH]
    if parsed_args.in_place and STDIN_PATH in paths:
        parser.error("--in-place requires FILE arguments")

    _setup_logging_level(parsed_args)

    cli_overrides = {f.name: False for f in fields(TidyOptions) if getattr(parsed_args, f.name) is False}
    try:
        options = load_options(parsed_args.config, cli_overrides)
    except (argparse.ArgumentTypeError, TidyMdError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR
    logger.debug("Using options %s", options)

    changed: list[str] = []
    for path in paths:
        name = STDIN_NAME if path == STDIN_PATH else path
        try:
            with log_document(name):
                source = read_input(path)
                result = tidy_markdown(source, options)
                if parsed_args.check:
                    if result != source:
                        changed.append(name)
                elif parsed_args.in_place:
                    if result != source:
                        write_output(path, result)
                        logger.info("Tidied")
                else:
                    write_output(STDIN_PATH, result)
        except TidyMdError as e:
            location = "" if path == STDIN_PATH else f"{path}: "
            print(f"Error: {location}{e}", file=sys.stderr)
            return EXIT_ERROR

    if parsed_args.check:
        report_check(changed, len(paths))
        return EXIT_ERROR if changed else EXIT_SUCCESS
    return EXIT_SUCCESS
