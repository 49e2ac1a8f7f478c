"""Shared pytest configuration for the h2c test suite.

Guidelines
----------
* No network access in any test.
* Core tests must be pure — no side effects.
* CLI tests feed stdin through an explicit stream, never the terminal.
"""

from __future__ import annotations
