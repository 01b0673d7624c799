"""Turn scores into reporting decisions.

Type aliases and validator declarations report once their score reaches
``base_threshold``. Interfaces are judged against ``interface_penalty``
instead, whatever ``base_threshold`` says. The warn and error thresholds
only pick a severity for the reporter.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from ianitorlint.core.config import ComplexityPolicy

UNKNOWN_NAME = "unknown"


@dataclass(frozen=True)
class NoReport:
    pass


@dataclass(frozen=True)
class MissingExplicitCheck:
    score: float


@dataclass(frozen=True)
class ComplexInterfaceNeedsCheck:
    name: str
    score: float


Decision = NoReport | MissingExplicitCheck | ComplexInterfaceNeedsCheck

NO_REPORT = NoReport()


def evaluate_type_alias(
    score: float, policy: ComplexityPolicy, *, is_static_of: bool = False
) -> Decision:
    """Static-of aliases never report; other aliases report at ``base_threshold``."""
    if is_static_of or score < policy.base_threshold:
        return NO_REPORT
    return MissingExplicitCheck(score)


def evaluate_validator(score: float, policy: ComplexityPolicy) -> Decision:
    if score < policy.base_threshold:
        return NO_REPORT
    return MissingExplicitCheck(score)


def evaluate_interface(name: str | None, score: float, policy: ComplexityPolicy) -> Decision:
    if score < policy.interface_penalty:
        return NO_REPORT
    return ComplexInterfaceNeedsCheck(name or UNKNOWN_NAME, score)


def classify_severity(score: float, policy: ComplexityPolicy) -> str:
    """Severity tier for the reporter: "error", "warning" or "info"."""
    if score >= policy.error_threshold:
        return "error"
    if score >= policy.warn_threshold:
        return "warning"
    return "info"


def format_score(score: float) -> str:
    """One decimal place, halves rounded away from zero."""
    return str(Decimal(score).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


__all__ = [
    "NO_REPORT",
    "ComplexInterfaceNeedsCheck",
    "Decision",
    "MissingExplicitCheck",
    "NoReport",
    "UNKNOWN_NAME",
    "classify_severity",
    "evaluate_interface",
    "evaluate_type_alias",
    "evaluate_validator",
    "format_score",
]
