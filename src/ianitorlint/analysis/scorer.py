"""Structural complexity scoring for type expressions.

Each node gets a kind-specific base score plus the scores of its
children (scored one level deeper), and the total is multiplied by a
logarithmic depth decay:

    score(node, depth) = raw(node) * log2(depth + 1)

Scores are memoized per node identity for the lifetime of the scorer, and
a node reached again while it is still being scored (a cycle) contributes
the fixed CYCLE_SENTINEL instead of recursing.

Kind rules:
- Primitive: 1
- never / unknown / any: 0
- Interface: interface_penalty + 5 per extends + 2 per member, plus typed members
- Type literal: 2 + 0.5 per member, plus typed members
- Union: branches + 2 * (branches - 1)
- Intersection: branches + 3 * branches
- Array: element + 1
- Tuple: 1 + non-rest non-optional elements + 1.5 per element
- Type reference: 2 + (argument + 2) per type argument
- Conditional: 3 + check + extends + true + false
- Mapped: 5 + constraint + value type
- Function / method signature: 2 + typed parameters + return type
- Anything else: 1

With performance_mode on, every addition is clamped at
``error_threshold * 2``.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable
from typing import Final

from ianitorlint.analysis.cache import ScoreCache
from ianitorlint.analysis.tree import NodeKind, TypeNode
from ianitorlint.core.config import ComplexityPolicy
from ianitorlint.core.console import get_logger

logger = get_logger(__name__)

CYCLE_SENTINEL: Final[float] = 50.0

_SKIPPED_TUPLE_ELEMENTS: Final[frozenset[NodeKind]] = frozenset(
    {NodeKind.REST, NodeKind.OPTIONAL}
)


class ComplexityScorer:
    """Memoized, cycle-safe recursive scorer bound to one analysis pass."""

    def __init__(self, policy: ComplexityPolicy, cache: ScoreCache | None = None) -> None:
        self.policy = policy
        self.cache = cache if cache is not None else ScoreCache()
        self._multipliers: dict[int, float] = {}
        self._rules: dict[NodeKind, Callable[[TypeNode, int], float]] = {
            NodeKind.PRIMITIVE: self._score_primitive,
            NodeKind.SHORT_CIRCUIT: self._score_short_circuit,
            NodeKind.INTERFACE: self._score_interface,
            NodeKind.TYPE_LITERAL: self._score_type_literal,
            NodeKind.UNION: self._score_union,
            NodeKind.INTERSECTION: self._score_intersection,
            NodeKind.ARRAY: self._score_array,
            NodeKind.TUPLE: self._score_tuple,
            NodeKind.TYPE_REFERENCE: self._score_type_reference,
            NodeKind.CONDITIONAL: self._score_conditional,
            NodeKind.MAPPED: self._score_mapped,
            NodeKind.FUNCTION: self._score_function,
        }

    @property
    def ceiling(self) -> float:
        return self.policy.ceiling

    def add_score(self, current: float, addition: float) -> float:
        """Add to a running total, clamped at the ceiling in performance mode."""
        total = current + addition
        if self.policy.performance_mode:
            return min(total, self.ceiling)
        return total

    def depth_multiplier(self, depth: int) -> float:
        """Return ``log2(depth + 1)``, computed once per depth."""
        multiplier = self._multipliers.get(depth)
        if multiplier is None:
            multiplier = math.log2(depth + 1)
            self._multipliers[depth] = multiplier
        return multiplier

    def score(self, node: TypeNode, depth: int = 0) -> float:
        """Score ``node`` as if it sat ``depth`` levels below a declaration."""
        identity = node.identity
        if self.cache.has(identity):
            return self.cache.get(identity)

        if self.cache.is_active(identity):
            logger.debug(
                "Cycle detected at %s node %d (depth %d)", node.kind.name, identity, depth
            )
            return CYCLE_SENTINEL

        self.cache.mark(identity)
        rule = self._rules.get(node.kind, self._score_leaf)
        raw = rule(node, depth)
        final = raw * self.depth_multiplier(depth)
        self.cache.unmark(identity)
        self.cache.put(identity, final)
        return final

    # ------------------------------------------------------------------
    # Kind rules. Each returns the raw (undecayed) score.
    # ------------------------------------------------------------------

    def _accumulate(self, current: float, children: Iterable[TypeNode], depth: int) -> float:
        for child in children:
            current = self.add_score(current, self.score(child, depth + 1))
        return current

    def _score_leaf(self, node: TypeNode, depth: int) -> float:
        return self.add_score(0.0, 1)

    def _score_primitive(self, node: TypeNode, depth: int) -> float:
        return self.add_score(0.0, 1)

    def _score_short_circuit(self, node: TypeNode, depth: int) -> float:
        return 0.0

    def _score_interface(self, node: TypeNode, depth: int) -> float:
        total = self.add_score(0.0, self.policy.interface_penalty)
        total = self.add_score(total, 5 * node.extends_count)
        total = self.add_score(total, 2 * node.member_count)
        return self._accumulate(total, node.children, depth)

    def _score_type_literal(self, node: TypeNode, depth: int) -> float:
        total = self.add_score(0.0, 2)
        total = self.add_score(total, 0.5 * node.member_count)
        return self._accumulate(total, node.children, depth)

    def _score_union(self, node: TypeNode, depth: int) -> float:
        total = self._accumulate(0.0, node.children, depth)
        # A parsed union always has at least two branches.
        return self.add_score(total, 2 * max(len(node.children) - 1, 0))

    def _score_intersection(self, node: TypeNode, depth: int) -> float:
        total = self._accumulate(0.0, node.children, depth)
        return self.add_score(total, 3 * len(node.children))

    def _score_array(self, node: TypeNode, depth: int) -> float:
        total = self._accumulate(0.0, node.children, depth)
        return self.add_score(total, 1)

    def _score_tuple(self, node: TypeNode, depth: int) -> float:
        total = self.add_score(0.0, 1)
        scored = (child for child in node.children if child.kind not in _SKIPPED_TUPLE_ELEMENTS)
        total = self._accumulate(total, scored, depth)
        return self.add_score(total, 1.5 * len(node.children))

    def _score_type_reference(self, node: TypeNode, depth: int) -> float:
        total = self.add_score(0.0, 2)
        for argument in node.children:
            total = self.add_score(total, self.score(argument, depth + 1) + 2)
        return total

    def _score_conditional(self, node: TypeNode, depth: int) -> float:
        return self._accumulate(self.add_score(0.0, 3), node.children, depth)

    def _score_mapped(self, node: TypeNode, depth: int) -> float:
        return self._accumulate(self.add_score(0.0, 5), node.children, depth)

    def _score_function(self, node: TypeNode, depth: int) -> float:
        return self._accumulate(self.add_score(0.0, 2), node.children, depth)


__all__ = [
    "CYCLE_SENTINEL",
    "ComplexityScorer",
]
