"""CLI tests — argument routing, output rendering, and the error boundary.

stdin is always supplied as an explicit stream; the error boundary is
exercised through :func:`cli` with ``sys.stdin`` monkeypatched.
"""

from __future__ import annotations

import io
import logging
import sys

import pytest

from h2c import __version__
from h2c.cli import exit_codes
from h2c.cli.app import _build_parser, cli, main, options_from_args
from h2c.core.models import OutputOptions
from h2c.exceptions import (
    BadAuthEncodingError,
    BadRequestLineError,
    H2cError,
    InconsistentRequestError,
    MalformedHeaderError,
    MissingHostError,
    ParseError,
    SynthesisError,
    UnsupportedHTTPVersionError,
    UnsupportedMethodError,
)

HEAD_REQUEST = "HEAD / HTTP/1.1\nHost: example.com\nUser-Agent: moo\n"


def _run(argv: list[str], text: str) -> int:
    return main(argv, stdin=io.StringIO(text))


# ---------------------------------------------------------------------------
# Version
# ---------------------------------------------------------------------------

class TestVersion:
    def test_version_is_semver_like(self) -> None:
        parts = __version__.split(".")
        assert len(parts) == 3
        assert all(part.isdigit() for part in parts)

    def test_version_flag(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0


# ---------------------------------------------------------------------------
# Exception hierarchy / exit codes
# ---------------------------------------------------------------------------

class TestExceptions:
    @pytest.mark.parametrize(
        ("exc_class", "stage"),
        [
            (BadRequestLineError, ParseError),
            (MalformedHeaderError, ParseError),
            (MissingHostError, ParseError),
            (UnsupportedMethodError, ParseError),
            (InconsistentRequestError, ParseError),
            (UnsupportedHTTPVersionError, SynthesisError),
            (BadAuthEncodingError, SynthesisError),
        ],
    )
    def test_hierarchy(self, exc_class: type[H2cError], stage: type[H2cError]) -> None:
        assert issubclass(exc_class, stage)
        assert issubclass(stage, H2cError)

    def test_hint_is_stored(self) -> None:
        err = H2cError("boom", hint="try this")
        assert str(err) == "boom"
        assert err.hint == "try this"

    def test_hint_defaults_to_none(self) -> None:
        assert H2cError("boom").hint is None


class TestExitCodes:
    def test_values(self) -> None:
        assert exit_codes.SUCCESS == 0
        assert exit_codes.GENERAL_ERROR == 1
        assert exit_codes.UNEXPECTED_ERROR == 2
        assert exit_codes.KEYBOARD_INTERRUPT == 130


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------

class TestOptions:
    def test_defaults(self) -> None:
        args = _build_parser().parse_args([])
        assert options_from_args(args) == OutputOptions()

    def test_short_switches(self) -> None:
        args = _build_parser().parse_args(["-a", "-d", "-H", "-i", "-s", "-v"])
        assert options_from_args(args) == OutputOptions(
            allow_default_headers=True,
            use_http_scheme=True,
            ignore_http_version=True,
            use_short_flags=True,
            verbose=True,
            emit_docs=True,
        )

    def test_long_switches(self) -> None:
        args = _build_parser().parse_args(
            ["--allow-default-headers", "--http", "--short-options"],
        )
        opts = options_from_args(args)
        assert opts.allow_default_headers
        assert opts.use_http_scheme
        assert opts.use_short_flags
        assert not opts.verbose


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------

class TestOutput:
    def test_command_on_stdout(self, capsys: pytest.CaptureFixture[str]) -> None:
        code = _run([], HEAD_REQUEST)
        assert code == exit_codes.SUCCESS
        out = capsys.readouterr().out
        assert out == (
            'curl --head --http1.1 --header Accept: --user-agent "moo" '
            "https://example.com/\n"
        )

    def test_options_applied(self, capsys: pytest.CaptureFixture[str]) -> None:
        _run(["-s", "-H", "-a", "-i"], HEAD_REQUEST)
        assert capsys.readouterr().out == 'curl -I -A "moo" http://example.com/\n'

    def test_docs_follow_command(self, capsys: pytest.CaptureFixture[str]) -> None:
        _run(["--docs"], HEAD_REQUEST)
        lines = capsys.readouterr().out.splitlines()
        assert lines[0].startswith("curl ")
        assert lines[1] == (
            "--head: send a HEAD request "
            "(https://curl.se/docs/manpage.html#--head)"
        )
        assert [line.split(":")[0] for line in lines[1:]] == [
            "--head",
            "--http1.1",
            "--user-agent",
            "--header",
        ]

    def test_no_docs_by_default(self, capsys: pytest.CaptureFixture[str]) -> None:
        _run([], HEAD_REQUEST)
        assert len(capsys.readouterr().out.splitlines()) == 1

    def test_multipart_warns_on_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        code = _run(
            [],
            "POST / HTTP/1.1\n"
            "Host: h\n"
            "Content-Type: multipart/form-data; boundary=x\n"
            "\n"
            "--x--\n",
        )
        assert code == exit_codes.SUCCESS
        captured = capsys.readouterr()
        assert captured.out.startswith("curl ")
        assert "multipart/form-data" in captured.err

    def test_form_feed_stays_inside_header(self, capsys: pytest.CaptureFixture[str]) -> None:
        code = _run(["-a"], "GET / HTTP/1.1\nHost: h\nX-A: a\x0cb\nX-B: c\n")
        assert code == exit_codes.SUCCESS
        assert capsys.readouterr().out == (
            'curl --http1.1 --header "X-A: a\x0cb" --header "X-B: c" https://h/\n'
        )

    def test_undecodable_bytes_pass_through(
        self, capsysbinary: pytest.CaptureFixture[bytes],
    ) -> None:
        stdin = io.TextIOWrapper(
            io.BytesIO(b"POST / HTTP/1.1\nHost: h\n\ncaf\xe9\n"), encoding="utf-8",
        )
        assert main(["-a"], stdin=stdin) == exit_codes.SUCCESS
        out = capsysbinary.readouterr().out
        assert b'--data-binary "caf\xe9"' in out
        assert out.endswith(b"https://h/\n")

    def test_errors_propagate_from_main(self) -> None:
        with pytest.raises(MissingHostError):
            _run([], "GET / HTTP/1.1\n")

    def test_debug_installs_handler(self, capsys: pytest.CaptureFixture[str]) -> None:
        _run(["--debug"], HEAD_REQUEST)
        logger = logging.getLogger("h2c")
        try:
            assert logger.level == logging.DEBUG
            assert logger.handlers
        finally:
            logger.handlers.clear()
            logger.setLevel(logging.NOTSET)
            logger.propagate = True


# ---------------------------------------------------------------------------
# Error boundary
# ---------------------------------------------------------------------------

class TestErrorBoundary:
    def _cli(
        self, monkeypatch: pytest.MonkeyPatch, text: str, argv: list[str] | None = None,
    ) -> int:
        monkeypatch.setattr(sys, "argv", ["h2c", *(argv or [])])
        monkeypatch.setattr(sys, "stdin", io.StringIO(text))
        with pytest.raises(SystemExit) as exc_info:
            cli()
        return int(exc_info.value.code or 0)

    def test_success(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
    ) -> None:
        assert self._cli(monkeypatch, HEAD_REQUEST) == exit_codes.SUCCESS
        assert capsys.readouterr().out.startswith("curl --head")

    @pytest.mark.parametrize(
        "text",
        [
            "nonsense\n",
            "GET / HTTP/1.1\nHost: h\nbroken header line\n",
            "GET / HTTP/1.1\n",
            "FOO / HTTP/1.1\nHost: h\n",
            "GET / HTTP/1.0\nHost: h\n",
            "GET / HTTP/1.1\nHost: h\nAuthorization: Basic ***\n",
        ],
    )
    def test_known_errors(
        self,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
        text: str,
    ) -> None:
        assert self._cli(monkeypatch, text) == exit_codes.GENERAL_ERROR
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Error" in captured.err

    def test_unexpected_error(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
    ) -> None:
        from h2c.cli import app as app_module

        def _boom(*_args: object) -> object:
            raise RuntimeError("kaput")

        monkeypatch.setattr(app_module, "synthesize", _boom)
        assert self._cli(monkeypatch, HEAD_REQUEST) == exit_codes.UNEXPECTED_ERROR
        assert "kaput" in capsys.readouterr().err

    def test_keyboard_interrupt(self, monkeypatch: pytest.MonkeyPatch) -> None:
        from h2c.cli import app as app_module

        def _interrupt(*_args: object) -> object:
            raise KeyboardInterrupt

        monkeypatch.setattr(app_module, "parse_request", _interrupt)
        assert self._cli(monkeypatch, HEAD_REQUEST) == exit_codes.KEYBOARD_INTERRUPT
