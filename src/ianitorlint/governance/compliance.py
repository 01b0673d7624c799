"""High-level check-type entry points.

Provides:
- load_program: read an ESTree JSON dump
- check_program / check_file: analyze one file
- score_file: list every scored declaration (debugging aid)
- scan_paths: analyze files and directories one after another
- count_diagnostics_by_severity / has_error_diagnostics / format_diagnostics
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import Any

from ianitorlint.analysis.tree import Estree
from ianitorlint.core.config import AppConfig
from ianitorlint.core.console import get_logger
from ianitorlint.core.result import AstLoadError, Err, Ok, Result
from ianitorlint.governance.checker import CheckTypeChecker, ScoredDeclaration
from ianitorlint.governance.types import Diagnostic, DiagnosticType

logger = get_logger(__name__)

# Top-level keys some dump scripts use to record the source .ts path.
_SOURCE_PATH_KEYS = ("filePath", "sourceFile")


def load_program(path: Path) -> Result[tuple[Estree, Path], AstLoadError]:
    """Load an ESTree dump.

    The JSON root is either a ``Program`` node or an object whose ``ast``
    key holds one. Returns the program and the path diagnostics should
    name: the recorded source path when the dump has one, else ``path``.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        return Err(AstLoadError(f"Cannot read AST dump: {exc}", context={"path": str(path)}))

    try:
        data: Any = json.loads(raw)
    except json.JSONDecodeError as exc:
        return Err(
            AstLoadError(
                f"Invalid JSON: {exc.msg}",
                context={"path": str(path), "line": exc.lineno, "column": exc.colno},
            )
        )
    except RecursionError:
        return Err(AstLoadError("AST nesting too deep to load", context={"path": str(path)}))

    if not isinstance(data, Mapping):
        return Err(AstLoadError("AST root must be an object", context={"path": str(path)}))

    source_path = path
    for key in _SOURCE_PATH_KEYS:
        if isinstance(data.get(key), str):
            source_path = Path(data[key])
            break

    program = data.get("ast", data)
    if not isinstance(program, Mapping) or program.get("type") != "Program":
        return Err(AstLoadError("AST root is not a Program node", context={"path": str(path)}))

    return Ok((program, source_path))


def check_program(
    program: Estree, file_path: Path, config: AppConfig | None = None
) -> list[Diagnostic]:
    """Analyze an already-loaded program."""
    return CheckTypeChecker(file_path, program, config).run()


def check_file(path: Path, config: AppConfig | None = None) -> list[Diagnostic]:
    """Analyze one dump; an unloadable dump becomes a PARSE_ERROR diagnostic."""
    match _analyze(path, config):
        case Err(error):
            logger.warning("Skipping %s: %s", path, error)
            return [
                Diagnostic(
                    type=DiagnosticType.PARSE_ERROR,
                    file=path,
                    line=int(error.context.get("line", 1)),
                    column=int(error.context.get("column", 0)),
                    message=f"AST dump could not be analyzed: {error.message}",
                    severity="warning",
                )
            ]
        case Ok(diagnostics):
            return diagnostics


def _analyze(path: Path, config: AppConfig | None) -> Result[list[Diagnostic], AstLoadError]:
    match load_program(path):
        case Err(error):
            return Err(error)
        case Ok((program, source_path)):
            try:
                return Ok(check_program(program, source_path, config))
            except RecursionError:
                # Nesting deeper than the interpreter stack allows.
                return Err(
                    AstLoadError("AST nesting too deep to analyze", context={"path": str(path)})
                )


def score_file(
    path: Path, config: AppConfig | None = None
) -> Result[list[ScoredDeclaration], AstLoadError]:
    """Score every type alias, interface and validator declaration in a dump."""
    match load_program(path):
        case Err(error):
            return Err(error)
        case Ok((program, source_path)):
            checker = CheckTypeChecker(source_path, program, config)
            try:
                checker.run()
            except RecursionError:
                return Err(
                    AstLoadError("AST nesting too deep to analyze", context={"path": str(path)})
                )
            return Ok(list(checker.scored))


def iter_dump_files(paths: Iterable[Path]) -> list[Path]:
    """Expand directories to the ``*.json`` files beneath them, sorted."""
    files: list[Path] = []
    for path in paths:
        if path.is_dir():
            files.extend(sorted(p for p in path.rglob("*.json") if p.is_file()))
        else:
            files.append(path)
    return files


def scan_paths(
    paths: Iterable[Path], config: AppConfig | None = None
) -> tuple[list[Diagnostic], int]:
    """Analyze every dump under ``paths``.

    Each file gets its own checker, so nothing carries over between files.

    Returns:
        Tuple of (diagnostics, files_scanned_count)
    """
    config = config or AppConfig()
    diagnostics: list[Diagnostic] = []
    files = iter_dump_files(paths)
    for dump in files:
        diagnostics.extend(check_file(dump, config))
    return diagnostics, len(files)


def count_diagnostics_by_severity(diagnostics: Sequence[Diagnostic]) -> tuple[int, int, int]:
    """Count diagnostics by severity.

    Returns:
        Tuple of (error_count, warning_count, info_count)
    """
    errors = sum(1 for d in diagnostics if d.severity == "error")
    warnings = sum(1 for d in diagnostics if d.severity == "warning")
    infos = sum(1 for d in diagnostics if d.severity == "info")
    return errors, warnings, infos


def has_error_diagnostics(diagnostics: Sequence[Diagnostic]) -> bool:
    return any(d.severity == "error" for d in diagnostics)


def format_diagnostics(diagnostics: Sequence[Diagnostic]) -> str:
    """Render diagnostics as ``file:line:column: severity message [id]`` lines."""
    return "\n".join(
        f"{d.file}:{d.line}:{d.column}: {d.severity} {d.message} [{d.type.value}]"
        for d in diagnostics
    )


__all__ = [
    "check_file",
    "check_program",
    "count_diagnostics_by_severity",
    "format_diagnostics",
    "has_error_diagnostics",
    "iter_dump_files",
    "load_program",
    "scan_paths",
    "score_file",
]
