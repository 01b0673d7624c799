"""Tests for validator recognition and Static-of extraction."""

from __future__ import annotations

import pytest

from ianitorlint.analysis.validators import (
    declared_name,
    extract_static_of,
    has_explicit_check,
    is_validator_call,
    score_validator_call,
    validator_method,
)
from tests.mocks import estree as es


class TestValidatorDetection:
    def test_member_call_on_namespace(self) -> None:
        assert is_validator_call(es.validator_call("interface", es.object_expression()))

    def test_other_objects_are_ignored(self) -> None:
        call = es.validator_call("interface", namespace="t")
        assert not is_validator_call(call)
        assert is_validator_call(call, namespace="t")

    def test_plain_calls_and_non_calls_are_ignored(self) -> None:
        plain = {"type": "CallExpression", "callee": es.identifier("interface"), "arguments": []}
        assert not is_validator_call(plain)
        assert not is_validator_call(es.identifier("Ianitor"))
        assert not is_validator_call(None)

    def test_computed_member_has_no_method(self) -> None:
        call = es.validator_call("interface")
        call["callee"]["property"] = {"type": "Literal", "value": "interface"}
        assert validator_method(call) is None
        assert score_validator_call(call) == 0.0


class TestFlatScores:
    def test_strict_interface_with_three_properties(self) -> None:
        call = es.validator_call("strictInterface", es.object_expression("a", "b", "c"))
        assert score_validator_call(call) == 19.0

    def test_interface_without_object_literal_scores_zero(self) -> None:
        assert score_validator_call(es.validator_call("interface", es.identifier("shape"))) == 0.0
        assert score_validator_call(es.validator_call("interface")) == 0.0

    @pytest.mark.parametrize(
        ("method", "expected"),
        [
            ("optional", 2.0),
            ("array", 2.0),
            ("instanceIsA", 2.0),
            ("instanceOf", 2.0),
            ("record", 3.0),
            ("map", 3.0),
            ("string", 1.0),
            ("number", 1.0),
            ("boolean", 1.0),
            ("literal", 1.0),
        ],
    )
    def test_fixed_scores(self, method: str, expected: float) -> None:
        assert score_validator_call(es.validator_call(method, es.identifier("x"))) == expected

    @pytest.mark.parametrize("method", ["union", "intersection"])
    def test_argument_count_scores(self, method: str) -> None:
        args = [es.validator_call("string") for _ in range(4)]
        assert score_validator_call(es.validator_call(method, *args)) == 8.0

    def test_nested_validators_are_not_visited(self) -> None:
        inner = es.validator_call("strictInterface", es.object_expression("a", "b", "c", "d"))
        assert score_validator_call(es.validator_call("optional", inner)) == 2.0


class TestStaticOf:
    def test_direct_static(self) -> None:
        assert extract_static_of(es.static_of("isUser")) == "isUser"

    def test_readonly_wrapper(self) -> None:
        assert extract_static_of(es.reference("Readonly", es.static_of("isUser"))) == "isUser"

    def test_only_one_readonly_layer(self) -> None:
        twice = es.reference("Readonly", es.reference("Readonly", es.static_of("isUser")))
        assert extract_static_of(twice) is None

    def test_marker_must_match(self) -> None:
        assert extract_static_of(es.static_of("isUser", marker="Static")) is None
        assert extract_static_of(es.static_of("isUser", marker="Static"), "Static") == "isUser"

    def test_argument_must_be_typeof_identifier(self) -> None:
        assert extract_static_of(es.reference("Ianitor.Static", es.keyword("string"))) is None
        query = es.type_query("ns")
        query["exprName"] = {
            "type": "TSQualifiedName",
            "left": es.identifier("ns"),
            "right": es.identifier("isUser"),
        }
        assert extract_static_of(es.reference("Ianitor.Static", query)) is None

    def test_other_shapes(self) -> None:
        assert extract_static_of(es.keyword("string")) is None
        assert extract_static_of(es.reference("Readonly", es.keyword("string"))) is None
        assert extract_static_of(None) is None


class TestDeclarators:
    def test_explicit_check_annotation(self) -> None:
        check = es.reference("Ianitor.Check", es.reference("User"))
        annotated = es.const("isUser", es.validator_call("string"), annotated=check)
        plain = es.const("isUser", es.validator_call("string"))
        assert has_explicit_check(annotated["declarations"][0])
        assert not has_explicit_check(plain["declarations"][0])

    def test_declared_name(self) -> None:
        declarator = es.const("isUser", es.validator_call("string"))["declarations"][0]
        assert declared_name(declarator) == "isUser"
        declarator["id"] = {"type": "ObjectPattern", "properties": []}
        assert declared_name(declarator) is None
