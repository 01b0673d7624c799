"""ESTree-based check-type rule.

Walks a ``Program`` once, scoring and reporting type aliases and
interfaces as they are met, registering Static-of exemptions and queueing
validator declarations. When the walk completes, the exemption set is
sealed and the queued validator reports are flushed, so an exempting
alias is honored wherever it sits in the file.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final

from ianitorlint.analysis.cache import ScoreCache
from ianitorlint.analysis.exemptions import DeferredQueue, DeferredReport, ExemptionTracker
from ianitorlint.analysis.scorer import ComplexityScorer
from ianitorlint.analysis.thresholds import (
    ComplexInterfaceNeedsCheck,
    Decision,
    MissingExplicitCheck,
    NoReport,
    classify_severity,
    evaluate_interface,
    evaluate_type_alias,
    evaluate_validator,
    format_score,
)
from ianitorlint.analysis.tree import Estree, SourceRef, build_type_node, source_ref
from ianitorlint.analysis.validators import (
    declared_name,
    extract_static_of,
    has_explicit_check,
    is_validator_call,
    score_validator_call,
)
from ianitorlint.core.config import AppConfig
from ianitorlint.core.console import get_logger
from ianitorlint.governance.types import Diagnostic, DiagnosticType

logger = get_logger(__name__)

# Keys that hold positions, tokens or back-references rather than child nodes.
_SKIPPED_KEYS: Final[frozenset[str]] = frozenset(
    {"parent", "loc", "range", "tokens", "comments"}
)


class EstreeVisitor:
    """Visitor for ESTree dictionaries using ``ast.NodeVisitor``'s dispatch convention.

    ``visit`` dispatches on the node's ``type`` to ``visit_<type>`` and
    falls back to ``generic_visit``, which visits every child node.
    """

    def visit(self, node: Estree) -> None:
        method = getattr(self, f"visit_{node.get('type')}", self.generic_visit)
        method(node)

    def generic_visit(self, node: Estree) -> None:
        for key, value in node.items():
            if key in _SKIPPED_KEYS:
                continue
            if isinstance(value, Mapping):
                if "type" in value:
                    self.visit(value)
            elif isinstance(value, list):
                for item in value:
                    if isinstance(item, Mapping) and "type" in item:
                        self.visit(item)


@dataclass(frozen=True)
class ScoredDeclaration:
    """A declaration and the score it received."""

    kind: str  # "interface" | "type" | "validator"
    name: str | None
    score: float
    source: SourceRef | None


class CheckTypeChecker(EstreeVisitor):
    """Visitor that reports declarations needing an explicit ``Check<T>``.

    One instance analyzes one file. Score cache, exemptions and the
    deferred queue all live on the instance and die with it.
    """

    def __init__(
        self, file_path: Path, program: Estree, config: AppConfig | None = None
    ) -> None:
        self.file_path = file_path
        self.program = program
        self.config = config or AppConfig()
        self.policy = self.config.policy
        self.scorer = ComplexityScorer(self.policy, ScoreCache())
        self.exemptions = ExemptionTracker()
        self.deferred = DeferredQueue()
        self.diagnostics: list[Diagnostic] = []
        self.scored: list[ScoredDeclaration] = []
        self._completed = False

    def run(self) -> list[Diagnostic]:
        """Walk the program, flush deferred reports, return sorted diagnostics."""
        if self._completed:
            return self.diagnostics

        self.visit(self.program)
        self.exemptions.seal()

        for report in self.deferred.flush(self.exemptions):
            self._report(MissingExplicitCheck(report.score), report.source)

        self.diagnostics.sort(key=lambda d: (d.line, d.column))
        self._completed = True
        logger.debug(
            "%s: %d declarations scored, %d exemptions, %d diagnostics",
            self.file_path,
            len(self.scored),
            len(self.exemptions),
            len(self.diagnostics),
        )
        return self.diagnostics

    def visit_TSTypeAliasDeclaration(self, node: Estree) -> None:
        """Register Static-of exemptions and score the aliased type."""
        annotation = node.get("typeAnnotation")
        exempted = extract_static_of(annotation, self.config.static_marker)
        if exempted is not None:
            self.exemptions.register(exempted)

        if isinstance(annotation, Mapping):
            score = self.scorer.score(build_type_node(annotation), self.policy.entry_depth)
            self.scored.append(
                ScoredDeclaration("type", _identifier_name(node), score, source_ref(node))
            )
            decision = evaluate_type_alias(score, self.policy, is_static_of=exempted is not None)
            self._report(decision, source_ref(node))

        self.generic_visit(node)

    def visit_TSInterfaceDeclaration(self, node: Estree) -> None:
        """Score an interface against the interface floor."""
        name = _identifier_name(node)
        score = self.scorer.score(build_type_node(node), self.policy.entry_depth)
        self.scored.append(ScoredDeclaration("interface", name, score, source_ref(node)))
        self._report(evaluate_interface(name, score, self.policy), source_ref(node))
        self.generic_visit(node)

    def visit_VariableDeclarator(self, node: Estree) -> None:
        """Queue unannotated validator declarations for the end-of-file flush."""
        init = node.get("init")
        if is_validator_call(init, self.config.validator_namespace) and not has_explicit_check(
            node
        ):
            name = declared_name(node)
            score = score_validator_call(init)
            self.scored.append(ScoredDeclaration("validator", name, score, source_ref(node)))
            if isinstance(evaluate_validator(score, self.policy), MissingExplicitCheck):
                self.deferred.defer(DeferredReport(name, score, source_ref(node)))

        self.generic_visit(node)

    def _report(self, decision: Decision, source: SourceRef | None) -> None:
        check_type = f"{self.config.validator_namespace}.Check<T>"
        match decision:
            case NoReport():
                return
            case MissingExplicitCheck(score=score):
                diagnostic_type = DiagnosticType.MISSING_EXPLICIT_CHECK
                name = None
                message = (
                    f"Complex type (score: {format_score(score)}) requires "
                    f"{check_type} annotation for type safety"
                )
            case ComplexInterfaceNeedsCheck(name=name, score=score):
                diagnostic_type = DiagnosticType.COMPLEX_INTERFACE_NEEDS_CHECK
                message = (
                    f"Interface '{name}' requires {check_type} annotation "
                    "(interfaces always need explicit checking)"
                )

        self.diagnostics.append(
            Diagnostic(
                type=diagnostic_type,
                file=self.file_path,
                line=source.line if source else 1,
                column=source.column if source else 0,
                message=message,
                severity=classify_severity(score, self.policy),
                score=score,
                name=name,
            )
        )


def _identifier_name(node: Estree) -> str | None:
    identifier: Any = node.get("id")
    if isinstance(identifier, Mapping):
        return identifier.get("name")
    return None


__all__ = [
    "CheckTypeChecker",
    "EstreeVisitor",
    "ScoredDeclaration",
]
