"""
Result values and exceptions for ianitorlint.

Scoring never fails. Loading input can: a dump may be unreadable, not
JSON, or not a Program. Loaders return ``Ok``/``Err`` so callers decide
whether a failure becomes a diagnostic, an exit code, or an exception.

Usage:
    match load_program(path):
        case Ok((program, source_path)):
            ...
        case Err(error):
            logger.warning("Skipping %s: %s", path, error)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

T = TypeVar("T")
E = TypeVar("E", bound=Exception)


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """A loaded value."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """A load failure carrying the exception that describes it."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> Any:
        """Raise the carried error."""
        raise self.error


Result = Ok[T] | Err[E]


class IanitorLintError(Exception):
    """Base exception. ``context`` holds location details such as the path."""

    def __init__(self, message: str, *, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{key}={value}" for key, value in self.context.items())
        return f"{self.message} [{details}]"


class ConfigurationError(IanitorLintError):
    """A config file exists but cannot be parsed into a mapping."""


class AstLoadError(IanitorLintError):
    """An ESTree dump is unreadable, is not JSON, or has no Program root."""


__all__ = [
    "AstLoadError",
    "ConfigurationError",
    "Err",
    "IanitorLintError",
    "Ok",
    "Result",
]
