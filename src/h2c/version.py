"""Single source of truth for the h2c version string."""

from __future__ import annotations

__version__: str = "1.0.0"
