"""Allow ``python -m h2c`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m h2c`` behaves identically to the ``h2c`` console
script.
"""

from __future__ import annotations

from h2c.cli.app import cli

if __name__ == "__main__":
    cli()
