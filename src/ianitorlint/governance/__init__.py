"""Check-type rule for TypeScript declarations.

This package applies the complexity engine in ``ianitorlint.analysis`` to
ESTree dumps and reports declarations that need an explicit
``Ianitor.Check<T>`` annotation.

Diagnostics produced:
- complexInterfaceNeedsCheck: interface scoring at or above interface_penalty
- missingIanitorCheckType: type alias or unannotated validator scoring at or
  above base_threshold (validators re-exposed via Static<typeof v> excepted)
- parseError: the dump itself could not be loaded
"""

from ianitorlint.governance.checker import CheckTypeChecker, ScoredDeclaration
from ianitorlint.governance.compliance import (
    check_file,
    check_program,
    count_diagnostics_by_severity,
    format_diagnostics,
    has_error_diagnostics,
    load_program,
    scan_paths,
    score_file,
)
from ianitorlint.governance.types import Diagnostic, DiagnosticType

__all__ = [
    "CheckTypeChecker",
    "Diagnostic",
    "DiagnosticType",
    "ScoredDeclaration",
    "check_file",
    "check_program",
    "count_diagnostics_by_severity",
    "format_diagnostics",
    "has_error_diagnostics",
    "load_program",
    "scan_paths",
    "score_file",
]
