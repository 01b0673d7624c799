"""Core shared infrastructure for ianitorlint.

This package contains foundational utilities:
    - config: Rule policy and application configuration
    - console: Rich console output and logging
    - result: Error handling patterns
"""

from __future__ import annotations

from . import config, console

__all__ = ["config", "console"]
