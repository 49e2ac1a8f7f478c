"""Raw HTTP request parser.

A three-state line machine — request-line, headers, body — visited in
strict order.  The parser makes exactly one pass over its input with no
lookahead beyond the current line, and every failure is terminal.
"""

from __future__ import annotations

import enum
import logging
import re
from collections.abc import Iterable

from h2c.core.models import ParsedRequest
from h2c.exceptions import (
    BadRequestLineError,
    MalformedHeaderError,
    MissingHostError,
    UnsupportedMethodError,
)

logger = logging.getLogger(__name__)

SUPPORTED_METHODS: frozenset[str] = frozenset({"GET", "POST", "HEAD", "PUT", "OPTIONS"})

_REQUEST_LINE_RE = re.compile(r"([^ ]*) +(.*) +(HTTP/.*)")
_HEADER_RE = re.compile(r"([^:]*): *(.*)")


class _State(enum.Enum):
    REQUEST_LINE = enum.auto()
    HEADER = enum.auto()
    BODY = enum.auto()


def is_supported_method(method: str) -> bool:
    return method.upper() in SUPPORTED_METHODS


def parse_request(lines: Iterable[str]) -> ParsedRequest:
    """Parse a line stream into a :class:`ParsedRequest`.

    Trailing line terminators (``\\n`` or ``\\r\\n``) are stripped from
    every line, so text streams and ``str.splitlines`` output are both
    accepted.

    Raises
    ------
    BadRequestLineError
        If the first line is not ``<method> <path> HTTP/<version>``.
    MalformedHeaderError
        If a non-blank header line has no ``name: value`` shape.
    MissingHostError
        If no ``Host`` header was seen.
    UnsupportedMethodError
        If the method is not GET, POST, HEAD, PUT or OPTIONS.
    """
    method = path = http_version = ""
    headers: dict[str, str] = {}
    original_case: dict[str, str] = {}
    as_written: dict[str, str] = {}
    body: list[str] = []

    state = _State.REQUEST_LINE
    for raw_line in lines:
        line = raw_line.rstrip("\r\n")

        if state is _State.REQUEST_LINE:
            match = _REQUEST_LINE_RE.search(line)
            if match is None:
                raise BadRequestLineError(line)
            method, path, http_version = match.groups()
            logger.debug("request-line: method=%s path=%s version=%s", method, path, http_version)
            state = _State.HEADER
            continue

        if state is _State.HEADER:
            match = _HEADER_RE.search(line)
            if match is not None:
                name, value = match.groups()
                key = name.lower()
                headers[key] = value.lower()
                original_case[key] = name
                as_written[key] = value
            elif len(line) < 2:
                state = _State.BODY
            else:
                raise MalformedHeaderError(line)
            continue

        body.append(line)

    if "host" not in headers:
        raise MissingHostError()

    if not is_supported_method(method):
        raise UnsupportedMethodError(method)

    if not any(body):
        body = []

    logger.debug("parsed %d header(s), %d body line(s)", len(headers), len(body))
    return ParsedRequest.build(
        method=method,
        path=path,
        http_version=http_version,
        headers=headers,
        header_original_case=original_case,
        body_lines=tuple(body),
        header_values_as_written=as_written,
    )


def split_lines(text: str) -> list[str]:
    """Split *text* on ``\\n`` only, dropping the empty tail after a final newline."""
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def parse_text(text: str) -> ParsedRequest:
    """Parse a whole request held in a string."""
    return parse_request(split_lines(text))
