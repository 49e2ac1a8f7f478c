"""CLI application entry point for h2c.

This module is the **sole error boundary** for the entire application.
It catches :class:`~h2c.exceptions.H2cError`, ``KeyboardInterrupt``,
and any unexpected ``Exception``, rendering user-friendly messages via Rich
and returning well-defined exit codes.

Architecture notes
------------------
* No conversion logic lives here — all work is delegated to ``core``.
* The request is read from stdin in full before anything is written, so
  a failing conversion never leaves a partial command line behind.
"""

from __future__ import annotations

import argparse
import sys
from typing import TextIO

from h2c.cli import exit_codes
from h2c.cli.console import console, emit, escape
from h2c.core.models import BodyEncoding, CurlCommand, OutputOptions
from h2c.core.request_parser import parse_request, split_lines
from h2c.core.synthesizer import synthesize
from h2c.exceptions import H2cError
from h2c.utils.log import configure_logging
from h2c.version import __version__


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser."""
    parser = argparse.ArgumentParser(
        prog="h2c",
        description=(
            "Read a raw HTTP request on stdin and print the equivalent "
            "curl command line."
        ),
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-a",
        "--allow-default-headers",
        action="store_true",
        help="Keep curl's default Accept and User-Agent headers.",
    )
    parser.add_argument(
        "-d",
        "--docs",
        action="store_true",
        help="Print man page links for every flag after the command line.",
    )
    parser.add_argument(
        "-H",
        "--http",
        action="store_true",
        help="Generate http:// URLs instead of https://.",
    )
    parser.add_argument(
        "-i",
        "--ignore-http-version",
        action="store_true",
        help="Do not pin the HTTP version.",
    )
    parser.add_argument(
        "-s",
        "--short-options",
        action="store_true",
        help="Use short curl options.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Add a verbose option to the command line.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log parsing and conversion decisions to stderr.",
    )
    return parser


def options_from_args(args: argparse.Namespace) -> OutputOptions:
    """Translate parsed CLI arguments into :class:`OutputOptions`."""
    return OutputOptions(
        allow_default_headers=args.allow_default_headers,
        use_http_scheme=args.http,
        ignore_http_version=args.ignore_http_version,
        use_short_flags=args.short_options,
        verbose=args.verbose,
        emit_docs=args.docs,
    )


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def _render(command: CurlCommand, options: OutputOptions) -> None:
    if command.unsupported_body is BodyEncoding.MULTIPART_FORM_DATA:
        console.print(
            "[yellow]Warning:[/yellow] multipart/form-data bodies are not "
            "converted; the body is sent empty."
        )

    emit(command.command_line)
    if options.emit_docs:
        for doc in command.docs:
            emit(f"{doc.flag}: {doc.description} ({doc.manpage_url})")


def _read_request(stream: TextIO) -> str:
    """Read the whole request, keeping bytes that are not valid text.

    Binary streams are decoded with ``surrogateescape`` so every byte
    survives the round trip back to stdout in :func:`~h2c.cli.console.emit`.
    """
    buffer = getattr(stream, "buffer", None)
    if buffer is None:
        return stream.read()
    encoding = getattr(stream, "encoding", None) or "utf-8"
    return buffer.read().decode(encoding, "surrogateescape")


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None, stdin: TextIO | None = None) -> int:
    """Run the h2c CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.
    stdin:
        Stream holding the raw request.  Defaults to ``sys.stdin``.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.debug)
    options = options_from_args(args)

    stream = stdin if stdin is not None else sys.stdin
    request = parse_request(split_lines(_read_request(stream)))
    command = synthesize(request, options)

    _render(command, options)
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except H2cError as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {exc.hint}")
        sys.exit(exit_codes.GENERAL_ERROR)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {escape(str(exc))}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
