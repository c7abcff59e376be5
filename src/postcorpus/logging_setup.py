"""Console logging for corpus builds.

Build hooks call :func:`configure_logging` once; library use leaves logging
alone. Records go to stderr so a hook's stdout stays free for the site build.
"""

from __future__ import annotations

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

LOG_LEVEL_ENV = "POSTCORPUS_LOG_LEVEL"
PACKAGE_LOGGER = "postcorpus"

console = Console(stderr=True)


def resolve_level(name: str | None = None) -> int:
    """Map a level name (or ``$POSTCORPUS_LOG_LEVEL``) to a number, defaulting to INFO."""
    name = name if name is not None else os.getenv(LOG_LEVEL_ENV, "INFO")
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: str | None = None) -> logging.Logger:
    """Attach a rich handler to the ``postcorpus`` logger and set its level.

    Repeated calls only adjust the level. Source paths and frontmatter text
    appear in messages, so rich markup is off.
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if not any(isinstance(handler, RichHandler) for handler in package_logger.handlers):
        handler = RichHandler(console=console, show_path=False, markup=False, rich_tracebacks=True)
        handler.setFormatter(logging.Formatter("%(message)s"))
        package_logger.addHandler(handler)
    package_logger.setLevel(resolve_level(level))
    return package_logger
