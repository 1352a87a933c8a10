"""Logging setup shared by the extraction engine and the pipeline."""

from __future__ import annotations

import logging
import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from isosurface_pipeline.utils.config import LoggingConfig

ROOT_LOGGER = "isosurface_pipeline"


def setup_logging(config: LoggingConfig) -> logging.Logger:
    """Configure console and file handlers for the package logger.

    Args:
        config: Logging configuration.

    Returns:
        The package root logger.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, config.level.upper(), logging.INFO))
    logger.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s | %(name)s | %(levelname)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if config.console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if config.file:
        log_path = Path(config.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(str(log_path))
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a child logger, e.g. ``get_logger("extraction.marching_cubes")``."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


@contextmanager
def log_duration(logger: logging.Logger, label: str, level: int = logging.INFO) -> Iterator[None]:
    """Log the wall-clock time spent inside the ``with`` block."""
    start = time.perf_counter()
    try:
        yield
    finally:
        logger.log(level, "%s took %.3f s", label, time.perf_counter() - start)
