"""Exit-code constants used by the CLI layer."""

from __future__ import annotations

SUCCESS: int = 0
"""Command line written to stdout."""

GENERAL_ERROR: int = 1
"""A known H2cError was caught (bad input, unsupported request)."""

UNEXPECTED_ERROR: int = 2
"""An unhandled exception escaped all known error boundaries."""

KEYBOARD_INTERRUPT: int = 130
"""User pressed Ctrl+C while input was being read."""
