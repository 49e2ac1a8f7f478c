"""curl command synthesis.

Every piece of the command line is computed independently as a
*fragment* and then joined, in a fixed order, after ``curl``:

    verbose  method  http-version  disabled  added  body  request-target  url

A fragment that does not apply is an empty string and is left out, so
the result never carries stray separators.  The body fragment is
computed first because the method and header rules depend on it.

Guarantees
----------
* Pure — no I/O; the same request and options give the same command.
* Errors are raised before anything is returned, never mid-way.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from h2c.core.header_rules import (
    EffectTarget,
    HeaderContext,
    HeaderEffect,
    apply_header_rule,
    disable_header,
    quoted,
)
from h2c.core.models import (
    DATA_BINARY_FLAG,
    HTTP1_1_FLAG,
    HTTP2_FLAG,
    REQUEST_TARGET_FLAG,
    BodyEncoding,
    CurlCommand,
    DocEntry,
    FlagVocabulary,
    OutputOptions,
    ParsedRequest,
)
from h2c.exceptions import UnsupportedHTTPVersionError

logger = logging.getLogger(__name__)

CURL: str = "curl"
FORM_URLENCODED: str = "application/x-www-form-urlencoded"
MULTIPART_PREFIX: str = "multipart/form-data;"

_URL_QUOTE_CHARS: str = " &?"
_BODY_DOC: str = "send this string as a body with POST"


@dataclass(slots=True)
class _Fragments:
    """Mutable scratch space for a single synthesis run."""

    verbose: str = ""
    method: str = ""
    http_version: str = ""
    disabled: list[str] = field(default_factory=list)
    added: list[str] = field(default_factory=list)
    body: list[str] = field(default_factory=list)
    request_target: str = ""
    url: str = ""
    docs: list[DocEntry] = field(default_factory=list)

    def ordered(self) -> list[str]:
        return [
            self.verbose,
            self.method,
            self.http_version,
            " ".join(self.disabled),
            " ".join(self.added),
            " ".join(self.body),
            self.request_target,
            self.url,
        ]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def needs_quote(path: str) -> bool:
    return any(char in path for char in _URL_QUOTE_CHARS)


def build_url(host: str, path: str, *, use_http_scheme: bool) -> str:
    """Return ``scheme://host<path>``, quoted when the shell would split it."""
    scheme = "http" if use_http_scheme else "https"
    url = f"{scheme}://{host}{path}"
    return quoted(url) if needs_quote(path) else url


def encode_body(lines: tuple[str, ...]) -> str:
    """Collapse body lines into one shell-quoted argument."""
    body = "".join(lines).replace("\n", " ").replace('"', '\\"')
    return quoted(body)


def http_version_flag(version: str) -> str:
    """Map an HTTP version token onto curl's version flag.

    Raises
    ------
    UnsupportedHTTPVersionError
        For anything but ``HTTP/1.1`` and ``HTTP/2``.
    """
    normalized = version.upper()
    if normalized == "HTTP/1.1":
        return HTTP1_1_FLAG
    if normalized == "HTTP/2":
        return HTTP2_FLAG
    raise UnsupportedHTTPVersionError(version)


_VERSION_DOCS: dict[str, str] = {
    HTTP1_1_FLAG: "use HTTP protocol version 1.1",
    HTTP2_FLAG: "use HTTP protocol version 2",
}


# ---------------------------------------------------------------------------
# Stages
# ---------------------------------------------------------------------------

def _body_stage(
    request: ParsedRequest, frags: _Fragments,
) -> BodyEncoding | None:
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(MULTIPART_PREFIX):
        # TODO: convert multipart bodies into --form arguments.
        logger.debug("multipart body left unconverted")
        return BodyEncoding.MULTIPART_FORM_DATA

    if request.has_body:
        frags.body.append(f"{DATA_BINARY_FLAG} {encode_body(request.body_lines)}")
        frags.docs.append(DocEntry(DATA_BINARY_FLAG, _BODY_DOC))
    return None


def _force_empty_body(frags: _Fragments, flags: FlagVocabulary) -> None:
    frags.body.append(f'{flags.data} ""')
    frags.docs.append(DocEntry(flags.data, _BODY_DOC))


def _method_stage(
    request: ParsedRequest,
    frags: _Fragments,
    flags: FlagVocabulary,
    *,
    body_present: bool,
) -> str:
    """Fill the method fragments and return the path to put in the URL."""
    method = request.method.upper()
    path = request.path

    if method == "HEAD":
        frags.method = flags.head
        frags.docs.append(DocEntry(flags.head, "send a HEAD request"))
    elif method == "POST":
        if not body_present:
            _force_empty_body(frags, flags)
    elif method == "PUT":
        if not body_present:
            _force_empty_body(frags, flags)
        frags.body.append(f"{flags.request} PUT")
        frags.docs.append(
            DocEntry(flags.request, "replace the request method with this string"),
        )
    elif method == "OPTIONS":
        frags.method = f"{flags.request} OPTIONS"
        if not path.startswith("/"):
            frags.request_target = f"{REQUEST_TARGET_FLAG} {quoted(path)}"
            frags.docs.append(
                DocEntry(
                    REQUEST_TARGET_FLAG,
                    "specify request target to use instead of using the URL's",
                ),
            )
            path = ""
    return path


def _collect(effect: HeaderEffect, frags: _Fragments) -> None:
    if effect.target is EffectTarget.DISABLED:
        frags.disabled.append(effect.fragment)
    elif effect.target is EffectTarget.ADDED:
        frags.added.append(effect.fragment)
    if effect.doc is not None:
        frags.docs.append(effect.doc)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def synthesize(request: ParsedRequest, options: OutputOptions) -> CurlCommand:
    """Build the curl command line equivalent to *request*.

    Raises
    ------
    UnsupportedHTTPVersionError
        If the version must be pinned and is neither 1.1 nor 2.
    BadAuthEncodingError
        If Basic credentials are not valid base64.
    """
    flags = FlagVocabulary.select(options.use_short_flags)
    frags = _Fragments()
    headers = request.headers

    unsupported_body = _body_stage(request, frags)
    path = _method_stage(
        request,
        frags,
        flags,
        body_present=bool(frags.body),
    )

    restated_content_type = False
    if frags.body and unsupported_body is None:
        content_type = headers.get("content-type")
        if content_type is not None:
            if content_type.lower() == FORM_URLENCODED:
                name = request.header_original_case["content-type"]
                frags.added.append(
                    f"{flags.header} {quoted(f'{name}: {content_type}')}",
                )
                restated_content_type = True
        else:
            _collect(disable_header("Content-Type", flags), frags)

    if not options.ignore_http_version:
        frags.http_version = http_version_flag(request.http_version)
        frags.docs.append(
            DocEntry(frags.http_version, _VERSION_DOCS[frags.http_version]),
        )

    if not options.allow_default_headers:
        for name, key in (("Accept", "accept"), ("User-Agent", "user-agent")):
            if key not in headers:
                _collect(disable_header(name, flags), frags)

    for key, value in headers.items():
        if restated_content_type and key == "content-type":
            continue
        context = HeaderContext(
            name=request.header_original_case[key],
            value_as_written=request.header_values_as_written.get(key, value),
            flags=flags,
        )
        effect = apply_header_rule(key, value, context)
        logger.debug("header %s -> %s", key, effect.target.name.lower())
        _collect(effect, frags)

    if frags.disabled or frags.added:
        frags.docs.append(
            DocEntry(flags.header, "add, replace or remove HTTP headers from the request"),
        )

    frags.url = build_url(
        request.host, path, use_http_scheme=options.use_http_scheme,
    )

    if options.verbose:
        frags.verbose = flags.verbose
        frags.docs.append(DocEntry(flags.verbose, "show verbose output"))

    command_line = " ".join([CURL, *(part for part in frags.ordered() if part)])
    logger.debug("synthesized: %s", command_line)
    return CurlCommand(
        command_line=command_line,
        docs=tuple(frags.docs),
        unsupported_body=unsupported_body,
    )
