"""Centralized logging configuration using loguru."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

# Remove default handler
logger.remove()

logger.add(
    sys.stderr,
    level="INFO",
    format="<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
    colorize=True,
)


def add_file_logging(logs_dir: Path | str = "logs", level: str = "DEBUG") -> int:
    """Add a rotating file handler under logs_dir.

    Args:
        logs_dir: Directory for log files (created if missing)
        level: Minimum level written to the file

    Returns:
        Handler id, usable with logger.remove()
    """
    logs_dir = Path(logs_dir)
    logs_dir.mkdir(parents=True, exist_ok=True)
    return logger.add(
        logs_dir / "vio_stereo_{time}.log",
        rotation="50 MB",
        retention="10 days",
        level=level,
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}",
        enqueue=True,
    )


def get_logger(name: Optional[str] = None):
    """Get a logger instance with the given name.

    Args:
        name: Module name for the logger (usually __name__)

    Returns:
        Configured logger instance
    """
    if name:
        return logger.bind(name=name)
    return logger


class LogEveryN:
    """Rate limiter for repeated log messages.

    Fires on the first call and then on every n-th call after it.
    """

    def __init__(self, n: int):
        if n < 1:
            raise ValueError(f"n must be >= 1, got {n}")
        self.n = n
        self._count = 0

    def __call__(self) -> bool:
        fire = self._count % self.n == 0
        self._count += 1
        return fire

    @property
    def count(self) -> int:
        return self._count

    def reset(self) -> None:
        self._count = 0


__all__ = ["logger", "get_logger", "add_file_logging", "LogEveryN"]
