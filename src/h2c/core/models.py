"""Domain models for h2c.

All models are **frozen** dataclasses — immutable value objects with no
behaviour beyond data access.  They carry zero I/O and are created fresh
for every conversion.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from h2c.exceptions import InconsistentRequestError, MissingHostError

MANPAGE_URL: str = "https://curl.se/docs/manpage.html"


def _frozen_mapping(values: Mapping[str, str] | None = None) -> Mapping[str, str]:
    return MappingProxyType(dict(values or {}))


# ---------------------------------------------------------------------------
# Parsed request
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ParsedRequest:
    """A validated HTTP request as read from the raw input."""

    method: str
    """Request method, case as written (e.g. ``GET``)."""

    path: str
    """Request-target as written.  May contain spaces."""

    http_version: str
    """Protocol token, case as written (e.g. ``HTTP/1.1``)."""

    headers: Mapping[str, str]
    """Lower-cased header name → lower-cased value.  Last one wins."""

    header_original_case: Mapping[str, str]
    """Lower-cased header name → name as it appeared in the input."""

    body_lines: tuple[str, ...] = ()
    """Body lines in order.  Empty when the body had no content."""

    header_values_as_written: Mapping[str, str] = field(
        default_factory=_frozen_mapping,
    )
    """Lower-cased header name → value with its original casing."""

    def __post_init__(self) -> None:
        if "host" not in self.headers:
            raise MissingHostError()
        if set(self.headers) != set(self.header_original_case):
            raise InconsistentRequestError(
                "headers and header_original_case name different headers",
            )

    @classmethod
    def build(
        cls,
        *,
        method: str,
        path: str,
        http_version: str,
        headers: Mapping[str, str],
        header_original_case: Mapping[str, str],
        body_lines: tuple[str, ...] = (),
        header_values_as_written: Mapping[str, str] | None = None,
    ) -> ParsedRequest:
        """Construct a request whose mappings are read-only copies."""
        return cls(
            method=method,
            path=path,
            http_version=http_version,
            headers=_frozen_mapping(headers),
            header_original_case=_frozen_mapping(header_original_case),
            body_lines=tuple(body_lines),
            header_values_as_written=_frozen_mapping(header_values_as_written),
        )

    @property
    def host(self) -> str:
        return self.headers["host"]

    @property
    def has_body(self) -> bool:
        return bool(self.body_lines)


# ---------------------------------------------------------------------------
# Output conventions
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class OutputOptions:
    """User-chosen output conventions.  Defaults match the CLI defaults."""

    allow_default_headers: bool = False
    """Keep curl's own ``Accept`` / ``User-Agent`` when the request has none."""

    use_http_scheme: bool = False
    """Emit ``http://`` instead of ``https://``."""

    ignore_http_version: bool = False
    """Do not pin the HTTP version."""

    use_short_flags: bool = False
    """Prefer ``-H`` over ``--header`` and friends."""

    verbose: bool = False
    """Add curl's verbose flag."""

    emit_docs: bool = False
    """Render documentation annotations after the command line."""


# ---------------------------------------------------------------------------
# Flag vocabulary
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class FlagVocabulary:
    """Concrete curl spellings for every logical operation."""

    data: str
    request: str
    head: str
    header: str
    user_agent: str
    cookie: str
    verbose: str
    form: str
    user: str

    @staticmethod
    def select(use_short_flags: bool) -> FlagVocabulary:
        return SHORT_FLAGS if use_short_flags else LONG_FLAGS


LONG_FLAGS = FlagVocabulary(
    data="--data",
    request="--request",
    head="--head",
    header="--header",
    user_agent="--user-agent",
    cookie="--cookie",
    verbose="--verbose",
    form="--form",
    user="--user",
)

SHORT_FLAGS = FlagVocabulary(
    data="-d",
    request="-X",
    head="-I",
    header="-H",
    user_agent="-A",
    cookie="-b",
    verbose="-v",
    form="-F",
    user="-u",
)

# curl has no short spelling for these.
DATA_BINARY_FLAG: str = "--data-binary"
COMPRESSED_FLAG: str = "--compressed"
HTTP1_1_FLAG: str = "--http1.1"
HTTP2_FLAG: str = "--http2"
REQUEST_TARGET_FLAG: str = "--request-target"


# ---------------------------------------------------------------------------
# Synthesis result
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class DocEntry:
    """One documentation annotation explaining a flag that was used."""

    flag: str
    description: str

    @property
    def manpage_url(self) -> str:
        return f"{MANPAGE_URL}#{self.flag}"


class BodyEncoding(enum.Enum):
    """Body encodings that are recognized but not converted."""

    MULTIPART_FORM_DATA = "multipart/form-data"


@dataclass(frozen=True, slots=True)
class CurlCommand:
    """The synthesized command line and its annotations."""

    command_line: str
    docs: tuple[DocEntry, ...] = ()
    unsupported_body: BodyEncoding | None = None
    """Set when the request body could not be reproduced."""
