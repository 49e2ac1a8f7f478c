"""Logging configuration.

Library modules only ever call ``logging.getLogger(__name__)``; handlers
are installed here, by the CLI, and only when diagnostics are requested.
Rich is imported lazily so the default path does not need it.
"""

from __future__ import annotations

import logging

from h2c.exceptions import EnvironmentError

LOGGER_NAME: str = "h2c"


def configure_logging(debug: bool) -> None:
    """Send ``h2c`` debug records to stderr through Rich when *debug*."""
    logger = logging.getLogger(LOGGER_NAME)
    if not debug:
        logger.setLevel(logging.WARNING)
        return

    try:
        from rich.console import Console
        from rich.logging import RichHandler
    except ModuleNotFoundError as exc:
        raise EnvironmentError(
            "rich is not installed. Install with: pip install rich",
        ) from exc

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.handlers[:] = [handler]
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
