"""Rich logging for the sitepager CLI."""

from __future__ import annotations

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

__all__ = ["console", "configure_logging"]

LOG_LEVEL_ENV = "SITEPAGER_LOG_LEVEL"

console = Console()


class SitepagerHandler(RichHandler):
    """Root handler installed by :func:`configure_logging`."""


def configure_logging(level_name: str | None = None) -> None:
    """Install a single Rich handler on the root logger.

    The level comes from ``level_name`` or ``SITEPAGER_LOG_LEVEL`` (default INFO).
    Repeated calls only adjust the level.
    """
    name = (level_name or os.getenv(LOG_LEVEL_ENV) or "INFO").upper()
    root_logger = logging.getLogger()

    if not any(isinstance(handler, SitepagerHandler) for handler in root_logger.handlers):
        root_logger.handlers.clear()
        handler = SitepagerHandler(console=console, rich_tracebacks=True, show_path=False, markup=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(handler)

    root_logger.setLevel(getattr(logging, name, logging.INFO))
    logging.captureWarnings(True)
