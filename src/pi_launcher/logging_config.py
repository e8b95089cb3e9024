"""Logging setup for the launcher.

Log records go to stderr through Rich so the delegated tool keeps exclusive
use of stdout.
"""

from __future__ import annotations

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

DEBUG_ENV = "PI_LAUNCHER_DEBUG"

_ROOT_LOGGER = "pi_launcher"


def debug_enabled() -> bool:
    return os.environ.get(DEBUG_ENV, "").strip().lower() in {"1", "true", "yes", "on"}


def setup_logging(verbose: bool | None = None) -> logging.Logger:
    """Attach a single Rich handler to the ``pi_launcher`` logger.

    Args:
        verbose: Force DEBUG output. When None, ``PI_LAUNCHER_DEBUG`` decides.

    Returns:
        The configured package logger.
    """
    if verbose is None:
        verbose = debug_enabled()
    level = logging.DEBUG if verbose else logging.WARNING

    logger = logging.getLogger(_ROOT_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=verbose,
        show_path=verbose,
        markup=False,
        rich_tracebacks=verbose,
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
