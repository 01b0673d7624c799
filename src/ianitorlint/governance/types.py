"""Types and data structures for check-type diagnostics."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any


class DiagnosticType(Enum):
    """Kinds of findings, valued by the rule's message ids."""

    COMPLEX_INTERFACE_NEEDS_CHECK = "complexInterfaceNeedsCheck"
    MISSING_EXPLICIT_CHECK = "missingIanitorCheckType"
    PARSE_ERROR = "parseError"  # AST dump could not be loaded


@dataclass(frozen=True)
class Diagnostic:
    """A single finding handed to the reporter."""

    type: DiagnosticType
    file: Path
    line: int
    column: int
    message: str
    severity: str  # "error" | "warning" | "info"
    score: float | None = None
    name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "file": str(self.file),
            "line": self.line,
            "column": self.column,
            "message": self.message,
            "severity": self.severity,
            "score": self.score,
            "name": self.name,
        }


__all__ = [
    "Diagnostic",
    "DiagnosticType",
]
