"""Custom exception hierarchy for h2c.

Every failure the pipeline can report is a subclass of :class:`H2cError`
so that the CLI error boundary can render a clean message and pick the
exit code without leaking stack traces.  The class itself is the error
*kind*; message text is informational only.

Hierarchy
---------
H2cError
├── ParseError
│   ├── BadRequestLineError
│   ├── MalformedHeaderError
│   ├── MissingHostError
│   ├── UnsupportedMethodError
│   └── InconsistentRequestError
├── SynthesisError
│   ├── UnsupportedHTTPVersionError
│   └── BadAuthEncodingError
└── EnvironmentError
"""

from __future__ import annotations


class H2cError(Exception):
    """Base exception for all h2c errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Parsing ---------------------------------------------------------------

class ParseError(H2cError):
    """Raised when the input cannot be turned into a request."""


class BadRequestLineError(ParseError):
    """Raised when the first line is not ``<method> <path> HTTP/<x>``."""

    def __init__(self, line: str) -> None:
        super().__init__(
            "bad request-line",
            hint="The first line must look like 'GET /path HTTP/1.1'.",
        )
        self.line: str = line


class MalformedHeaderError(ParseError):
    """Raised for a non-blank header line without a ``name: value`` shape."""

    def __init__(self, line: str) -> None:
        super().__init__(f"illegal HTTP header on line: {line}")
        self.line: str = line


class MissingHostError(ParseError):
    """Raised when no ``Host:`` header was present."""

    def __init__(self) -> None:
        super().__init__(
            "no host: header makes it impossible to tell URL",
            hint="Add a 'Host: example.com' header to the request.",
        )


class UnsupportedMethodError(ParseError):
    """Raised for a request method outside the supported set."""

    def __init__(self, method: str) -> None:
        super().__init__(f"unsupported HTTP method: '{method}'")
        self.method: str = method


class InconsistentRequestError(ParseError):
    """Raised when a request's header mappings disagree on their names."""


# --- Synthesis -------------------------------------------------------------

class SynthesisError(H2cError):
    """Raised when a parsed request cannot be expressed as a command line."""


class UnsupportedHTTPVersionError(SynthesisError):
    """Raised when the request-line names an HTTP version curl cannot pin."""

    def __init__(self, version: str) -> None:
        super().__init__(
            f"unsupported HTTP version: {version}",
            hint="Use --ignore-http-version to leave the version unspecified.",
        )
        self.version: str = version


class BadAuthEncodingError(SynthesisError):
    """Raised when a Basic ``Authorization`` payload is not valid base64."""


# --- Environment / tooling -------------------------------------------------

class EnvironmentError(H2cError):
    """Raised when an optional runtime dependency is not available."""
