"""Per-header conversion rules.

Each request header is routed through :data:`HEADER_HANDLERS`, a
dispatch table keyed by lower-cased header name.  A handler is a pure
function returning a :class:`HeaderEffect` that tells the synthesizer
whether to drop the header or which fragment to add for it.  Headers
without an entry use :func:`custom_header`.
"""

from __future__ import annotations

import base64
import binascii
import enum
import re
from collections.abc import Callable
from dataclasses import dataclass

from h2c.core.models import COMPRESSED_FLAG, DocEntry, FlagVocabulary
from h2c.exceptions import BadAuthEncodingError

_BASIC_AUTH_RE = re.compile(r"^Basic (.*)")


class EffectTarget(enum.Enum):
    SKIP = enum.auto()
    DISABLED = enum.auto()
    ADDED = enum.auto()


@dataclass(frozen=True, slots=True)
class HeaderEffect:
    """What a single header contributes to the command line."""

    target: EffectTarget
    fragment: str = ""
    doc: DocEntry | None = None


SKIP = HeaderEffect(EffectTarget.SKIP)


@dataclass(frozen=True, slots=True)
class HeaderContext:
    """Everything a handler may need besides the canonical value."""

    name: str
    """Header name as written in the input."""

    value_as_written: str
    """Header value before lower-casing."""

    flags: FlagVocabulary


HeaderHandler = Callable[[str, HeaderContext], HeaderEffect]


def quoted(text: str) -> str:
    return f'"{text}"'


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

def skip(value: str, context: HeaderContext) -> HeaderEffect:
    """Drop the header; curl derives it on its own."""
    return SKIP


def custom_header(value: str, context: HeaderContext) -> HeaderEffect:
    """Reproduce the header verbatim with the generic header flag."""
    fragment = f"{context.flags.header} {quoted(f'{context.name}: {value}')}"
    return HeaderEffect(EffectTarget.ADDED, fragment)


def authorization(value: str, context: HeaderContext) -> HeaderEffect:
    """Turn ``Basic`` credentials into curl's user flag.

    The payload is base64 and therefore case-sensitive, so the value as
    written is used.  Any other scheme is dropped.

    Raises
    ------
    BadAuthEncodingError
        If the payload is not valid base64 or does not decode to text.
    """
    match = _BASIC_AUTH_RE.search(context.value_as_written)
    if match is None:
        return SKIP

    try:
        credentials = base64.b64decode(match.group(1), validate=True).decode("utf-8")
    except (binascii.Error, ValueError) as exc:
        raise BadAuthEncodingError(
            f"failed to decode authorization info: {exc}",
            hint="The Basic credentials must be base64 of 'user:password'.",
        ) from exc

    flag = context.flags.user
    return HeaderEffect(
        EffectTarget.ADDED,
        f"{flag} {quoted(credentials)}",
        DocEntry(flag, "use this user and password for basic auth"),
    )


def accept_encoding(value: str, context: HeaderContext) -> HeaderEffect:
    if "gzip" in value:
        return HeaderEffect(
            EffectTarget.ADDED,
            COMPRESSED_FLAG,
            DocEntry(COMPRESSED_FLAG, "request a compressed response"),
        )
    return custom_header(value, context)


def accept(value: str, context: HeaderContext) -> HeaderEffect:
    # */* is what curl sends anyway.
    if value == "*/*":
        return SKIP
    return custom_header(value, context)


def user_agent(value: str, context: HeaderContext) -> HeaderEffect:
    flag = context.flags.user_agent
    return HeaderEffect(
        EffectTarget.ADDED,
        f"{flag} {quoted(value)}",
        DocEntry(flag, "use this custom User-Agent request header"),
    )


def cookie(value: str, context: HeaderContext) -> HeaderEffect:
    flag = context.flags.cookie
    return HeaderEffect(
        EffectTarget.ADDED,
        f"{flag} {quoted(value)}",
        DocEntry(flag, "pass on this custom Cookie: request header"),
    )


HEADER_HANDLERS: dict[str, HeaderHandler] = {
    "host": skip,
    "authorization": authorization,
    "expect": skip,
    "accept-encoding": accept_encoding,
    "accept": accept,
    "content-length": skip,
    "user-agent": user_agent,
    "cookie": cookie,
}


def apply_header_rule(name: str, value: str, context: HeaderContext) -> HeaderEffect:
    """Run the handler registered for *name* (lower-cased) on *value*."""
    handler = HEADER_HANDLERS.get(name, custom_header)
    return handler(value, context)


def disable_header(name: str, flags: FlagVocabulary) -> HeaderEffect:
    """Effect that stops curl from sending its own *name* header."""
    return HeaderEffect(EffectTarget.DISABLED, f"{flags.header} {name}:")
