"""Regression tests for the optional Rich dependency.

Conversion must keep working when Rich is missing: diagnostics fall back
to plain stderr output.  Only ``--debug``, which needs the Rich log
handler, fails — and it fails cleanly.
"""

from __future__ import annotations

import io
import sys

import pytest

from h2c.cli import exit_codes
from h2c.cli.app import main
from h2c.cli.console import escape
from h2c.exceptions import EnvironmentError

REQUEST = "GET / HTTP/1.1\nHost: example.com\n"


def _hide_rich(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setitem(sys.modules, "rich", None)
    monkeypatch.setitem(sys.modules, "rich.console", None)
    monkeypatch.setitem(sys.modules, "rich.logging", None)
    monkeypatch.setitem(sys.modules, "rich.markup", None)


def test_help_works_without_rich(monkeypatch: pytest.MonkeyPatch) -> None:
    _hide_rich(monkeypatch)

    with pytest.raises(SystemExit) as exc_info:
        main(["--help"])
    assert exc_info.value.code == 0


def test_conversion_works_without_rich(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
) -> None:
    _hide_rich(monkeypatch)

    code = main([], stdin=io.StringIO(REQUEST))
    assert code == exit_codes.SUCCESS
    assert capsys.readouterr().out == (
        "curl --http1.1 --header Accept: --header User-Agent: https://example.com/\n"
    )


def test_warning_falls_back_to_plain_stderr(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str],
) -> None:
    _hide_rich(monkeypatch)

    main(
        [],
        stdin=io.StringIO(
            "POST / HTTP/1.1\nHost: h\nContent-Type: multipart/form-data; b=x\n\n--x\n",
        ),
    )
    assert "multipart/form-data" in capsys.readouterr().err


def test_escape_is_identity_without_rich(monkeypatch: pytest.MonkeyPatch) -> None:
    _hide_rich(monkeypatch)

    assert escape("[bold]") == "[bold]"


def test_debug_errors_cleanly_when_rich_missing(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    _hide_rich(monkeypatch)

    with pytest.raises(EnvironmentError, match="rich is not installed"):
        main(["--debug"], stdin=io.StringIO(REQUEST))
