"""Core layer — pure request parsing and command synthesis.

Rules
-----
* No ``print()`` calls.
* No filesystem or network I/O; input arrives as an iterable of lines.
* No imports from ``cli``.
"""

from h2c.core.models import (
    BodyEncoding,
    CurlCommand,
    DocEntry,
    FlagVocabulary,
    OutputOptions,
    ParsedRequest,
)
from h2c.core.request_parser import parse_request, parse_text
from h2c.core.synthesizer import synthesize

__all__: list[str] = [
    "BodyEncoding",
    "CurlCommand",
    "DocEntry",
    "FlagVocabulary",
    "OutputOptions",
    "ParsedRequest",
    "parse_request",
    "parse_text",
    "synthesize",
]
