from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(message)s"


def configure_logging(level: str = "WARNING") -> None:
    """Route library logging to stderr through rich; stdout stays clean for documents."""
    numeric = logging.getLevelName(level.upper()) if isinstance(level, str) else level
    if not isinstance(numeric, int):
        numeric = logging.WARNING

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    pkg_logger = logging.getLogger("routedoc")
    pkg_logger.handlers[:] = [handler]
    pkg_logger.setLevel(numeric)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
