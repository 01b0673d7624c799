"""Rich consoles and logging setup.

Reports go to ``console`` (stdout). Log records go to stderr through a
RichHandler so ``check --format json`` output stays parseable.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "ianitorlint"

console = Console()
stderr_console = Console(stderr=True)


def _level_number(level: str | int) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    return resolved if isinstance(resolved, int) else logging.WARNING


def setup_logging(level: str | int = logging.WARNING, verbose: bool = False) -> logging.Logger:
    """Attach a single RichHandler to the package logger and return it.

    Safe to call once per CLI invocation; earlier handlers are replaced.
    """
    threshold = logging.DEBUG if verbose else _level_number(level)

    handler = RichHandler(
        console=stderr_console,
        markup=False,
        show_path=verbose,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.handlers.clear()
    package_logger.addHandler(handler)
    package_logger.setLevel(threshold)
    package_logger.propagate = False
    return package_logger


def get_logger(name: str | None = None) -> logging.Logger:
    return logging.getLogger(name or PACKAGE_LOGGER)


__all__ = ["console", "get_logger", "setup_logging", "stderr_console"]
