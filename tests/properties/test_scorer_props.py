"""Property-based tests for the complexity scorer and the check-type pass.

These tests verify:
- Adding structure never lowers a score
- Accumulation never passes the ceiling in performance mode
- Scoring is deterministic and cached results are stable
- Declaration order does not change which validators are reported
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from hypothesis import given, settings
from hypothesis import strategies as st

from ianitorlint.analysis.cache import ScoreCache
from ianitorlint.analysis.scorer import ComplexityScorer
from ianitorlint.analysis.tree import build_type_node
from ianitorlint.core.config import AppConfig, ComplexityPolicy
from ianitorlint.governance import check_program
from tests.mocks import estree as es

Node = dict[str, Any]

# === Strategies ===

_KEYWORDS = ["string", "number", "boolean", "null", "undefined", "never", "unknown", "any"]

leaf_strategy: st.SearchStrategy[Node] = st.one_of(
    st.sampled_from(_KEYWORDS).map(es.keyword),
    st.sampled_from(["User", "Post", "Map"]).map(es.reference),
)


def _extend(children: st.SearchStrategy[Node]) -> st.SearchStrategy[Node]:
    some = st.lists(children, min_size=1, max_size=4)
    return st.one_of(
        some.map(lambda items: es.union(*items)),
        some.map(lambda items: es.intersection(*items)),
        children.map(es.array),
        some.map(lambda items: es.tuple_type(*items)),
        some.map(lambda items: es.reference("Wrapper", *items)),
        some.map(
            lambda items: es.type_literal(
                *(es.property_signature(f"p{i}", item) for i, item in enumerate(items))
            )
        ),
        st.tuples(children, children).map(lambda pair: es.mapped(*pair)),
        st.tuples(some, children).map(lambda pair: es.function_type(*pair)),
    )


type_strategy = st.recursive(leaf_strategy, _extend, max_leaves=12)
depth_strategy = st.integers(min_value=0, max_value=4)
policy_strategy = st.builds(
    ComplexityPolicy,
    error_threshold=st.sampled_from([5, 25, 60]),
    performance_mode=st.booleans(),
)


def _score(type_node: Node, policy: ComplexityPolicy, depth: int) -> float:
    return ComplexityScorer(policy, ScoreCache()).score(build_type_node(type_node), depth)


class RecordingScorer(ComplexityScorer):
    def __init__(self, policy: ComplexityPolicy) -> None:
        super().__init__(policy, ScoreCache())
        self.accumulated: list[float] = []

    def add_score(self, current: float, addition: float) -> float:
        total = super().add_score(current, addition)
        self.accumulated.append(total)
        return total


# === Property Tests ===


@given(
    members=st.lists(type_strategy, min_size=0, max_size=5),
    extra=type_strategy,
    policy=policy_strategy,
    depth=depth_strategy,
)
@settings(max_examples=150)
def test_adding_a_member_never_lowers_the_score(
    members: list[Node], extra: Node, policy: ComplexityPolicy, depth: int
) -> None:
    signatures = [es.property_signature(f"p{i}", m) for i, m in enumerate(members)]
    before = es.type_literal(*signatures)
    after = es.type_literal(*signatures, es.property_signature("extra", extra))
    assert _score(after, policy, depth) >= _score(before, policy, depth)


@given(
    branches=st.lists(type_strategy, min_size=1, max_size=5),
    extra=type_strategy,
    combinator=st.sampled_from([es.union, es.intersection]),
    policy=policy_strategy,
    depth=depth_strategy,
)
@settings(max_examples=150)
def test_adding_a_branch_never_lowers_the_score(
    branches: list[Node],
    extra: Node,
    combinator: Any,
    policy: ComplexityPolicy,
    depth: int,
) -> None:
    before = _score(combinator(*branches), policy, depth)
    after = _score(combinator(*branches, extra), policy, depth)
    assert after >= before


@given(type_node=type_strategy, error_threshold=st.sampled_from([2, 5, 25]), depth=depth_strategy)
@settings(max_examples=200)
def test_accumulation_respects_ceiling(type_node: Node, error_threshold: int, depth: int) -> None:
    scorer = RecordingScorer(ComplexityPolicy(error_threshold=error_threshold))
    scorer.score(build_type_node(type_node), depth)
    assert all(total <= scorer.ceiling for total in scorer.accumulated)


@given(type_node=type_strategy, policy=policy_strategy, depth=depth_strategy)
@settings(max_examples=200)
def test_scores_are_deterministic_and_non_negative(
    type_node: Node, policy: ComplexityPolicy, depth: int
) -> None:
    scorer = ComplexityScorer(policy, ScoreCache())
    node = build_type_node(type_node)
    first = scorer.score(node, depth)
    assert first >= 0
    assert scorer.score(node, depth) == first
    assert _score(type_node, policy, depth) == first


@given(
    validators=st.lists(
        st.tuples(st.sampled_from(["isA", "isB", "isC", "isD"]), st.integers(1, 6)),
        min_size=1,
        max_size=6,
        unique_by=lambda item: item[0],
    ),
    exempted=st.sets(st.sampled_from(["isA", "isB", "isC", "isD", "isZ"])),
    data=st.data(),
)
@settings(max_examples=100)
def test_declaration_order_does_not_change_reports(
    validators: list[tuple[str, int]], exempted: set[str], data: st.DataObject
) -> None:
    declarations: list[Node] = []
    line = 1
    for name, width in validators:
        keys = [f"k{i}" for i in range(width)]
        call = es.validator_call("interface", es.object_expression(*keys))
        declarations.append(es.const(name, call, line=line))
        line += 1
    for name in sorted(exempted):
        declarations.append(es.type_alias(f"T{name}", es.static_of(name), line=line))
        line += 1

    shuffled = data.draw(st.permutations(declarations))
    config = AppConfig()
    file_path = Path("order.ts")

    def reported(body: list[Node]) -> set[tuple[int, float | None]]:
        return {(d.line, d.score) for d in check_program(es.program(*body), file_path, config)}

    expected = {
        (index + 1, 10.0 + 3 * width)
        for index, (name, width) in enumerate(validators)
        if name not in exempted
    }
    assert reported(declarations) == expected
    assert reported(list(shuffled)) == expected
