"""Type-expression complexity analysis: trees, scoring, exemptions, thresholds."""

from ianitorlint.analysis.cache import ScoreCache
from ianitorlint.analysis.exemptions import DeferredQueue, DeferredReport, ExemptionTracker
from ianitorlint.analysis.scorer import CYCLE_SENTINEL, ComplexityScorer
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
from ianitorlint.analysis.tree import NodeKind, SourceRef, TypeNode, build_type_node, kind_for
from ianitorlint.analysis.validators import (
    extract_static_of,
    has_explicit_check,
    is_validator_call,
    score_validator_call,
)

__all__ = [
    "CYCLE_SENTINEL",
    "ComplexInterfaceNeedsCheck",
    "ComplexityScorer",
    "Decision",
    "DeferredQueue",
    "DeferredReport",
    "ExemptionTracker",
    "MissingExplicitCheck",
    "NoReport",
    "NodeKind",
    "ScoreCache",
    "SourceRef",
    "TypeNode",
    "build_type_node",
    "classify_severity",
    "evaluate_interface",
    "evaluate_type_alias",
    "evaluate_validator",
    "extract_static_of",
    "format_score",
    "has_explicit_check",
    "is_validator_call",
    "kind_for",
    "score_validator_call",
]
