"""Logging helpers for the fasta_io library and CLI."""

from __future__ import annotations

import logging
import sys

LOGGER_NAME = "fasta_io"


def configure_logging(verbose: bool = False) -> logging.Logger:
    """Send log records to stderr and return the package logger.

    Standard output is reserved for FASTA data written by the CLI.
    """

    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    return logger


def get_logger() -> logging.Logger:
    """Return the package logger."""

    return logging.getLogger(LOGGER_NAME)
