"""
Logging configuration for the jwt-tool CLI.

Console handler on stderr (WARNING by default, DEBUG when verbose) and an
optional file handler that always records DEBUG.
"""

from __future__ import annotations

import logging
import os
import sys

_FULL_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"


def setup_logging(verbose: bool = False, log_file: str | None = None) -> str | None:
    """Configure the root logger for a CLI run.

    - Console handler: WARNING+ by default.  When *verbose* is True the
      level drops to DEBUG so every check is reported.
    - File handler: only when *log_file* is given; always DEBUG.

    Returns the path to the log file, if any.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Remove any pre-existing handlers (e.g. from basicConfig)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console_fmt = logging.Formatter(
        "%(levelname)-8s  %(message)s" if not verbose else _FULL_FORMAT,
        datefmt="%H:%M:%S",
    )
    console_handler.setFormatter(console_fmt)
    root_logger.addHandler(console_handler)

    if log_file:
        log_dir = os.path.dirname(os.path.abspath(log_file))
        os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter(_FULL_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
        )
        root_logger.addHandler(file_handler)

    return log_file
