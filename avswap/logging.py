"""
avswap.logging - Centralized logging configuration.

Everything goes through the "avswap" logger. At DEBUG (--verbose) it records
the resolved configuration and every FFmpeg command line; per-file FFmpeg
failures are logged at WARNING. Progress and summaries for the user are
printed on the Rich console instead.
"""

from __future__ import annotations

import logging

logger = logging.getLogger("avswap")


def configure_logging(verbose: bool = False) -> None:
    """Configure logging for the avswap package.

    Args:
        verbose: If True, enable DEBUG level logging; otherwise WARNING level
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )
    logger.setLevel(level)
