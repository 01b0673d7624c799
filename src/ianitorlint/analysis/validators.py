"""Structural recognition of Ianitor validators and Static-of aliases.

Nothing here type-checks. A validator is any call of the form
``Ianitor.<method>(...)`` and its score comes from the method name and
argument shape of that outermost call alone; nested validator calls are
not visited.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Final

from ianitorlint.analysis.tree import Estree, qualified_name, type_arguments

_FLAT_SCORES: Final[dict[str, float]] = {
    "optional": 2,
    "array": 2,
    "instanceIsA": 2,
    "instanceOf": 2,
    "record": 3,
    "map": 3,
    "string": 1,
    "number": 1,
    "boolean": 1,
}

_INTERFACE_METHODS: Final[frozenset[str]] = frozenset({"interface", "strictInterface"})
_ARGUMENT_COUNT_METHODS: Final[frozenset[str]] = frozenset({"union", "intersection"})

READONLY_WRAPPER: Final[str] = "Readonly"


def is_validator_call(node: Estree | None, namespace: str = "Ianitor") -> bool:
    """True for ``<namespace>.<anything>(...)`` call expressions."""
    if not isinstance(node, Mapping) or node.get("type") != "CallExpression":
        return False
    callee = node.get("callee")
    if not isinstance(callee, Mapping) or callee.get("type") != "MemberExpression":
        return False
    obj = callee.get("object")
    return (
        isinstance(obj, Mapping)
        and obj.get("type") == "Identifier"
        and obj.get("name") == namespace
    )


def validator_method(node: Estree) -> str | None:
    """Return the called method name, or None for computed members."""
    callee = node.get("callee")
    if not isinstance(callee, Mapping):
        return None
    prop = callee.get("property")
    if isinstance(prop, Mapping) and prop.get("type") == "Identifier":
        return prop.get("name")
    return None


def score_validator_call(node: Estree) -> float:
    """Flat score of a validator-construction call.

    ``interface``/``strictInterface`` score 10 + 3 per property of the
    object literal they receive (0 when the argument is not a literal);
    ``union``/``intersection`` score 2 per argument; the remaining known
    methods have fixed scores and unknown methods score 1.
    """
    method = validator_method(node)
    if method is None:
        return 0.0

    arguments = node.get("arguments") or []

    if method in _INTERFACE_METHODS:
        shape = arguments[0] if arguments else None
        if isinstance(shape, Mapping) and shape.get("type") == "ObjectExpression":
            return 10.0 + len(shape.get("properties") or []) * 3
        return 0.0

    if method in _ARGUMENT_COUNT_METHODS:
        return float(len(arguments) * 2)

    return float(_FLAT_SCORES.get(method, 1))


def has_explicit_check(declarator: Estree) -> bool:
    """True when the declared binding carries its own type annotation."""
    identifier = declarator.get("id")
    return isinstance(identifier, Mapping) and bool(identifier.get("typeAnnotation"))


def declared_name(declarator: Estree) -> str | None:
    """Identifier bound by a declarator; None for destructuring patterns."""
    identifier = declarator.get("id")
    if isinstance(identifier, Mapping) and identifier.get("type") == "Identifier":
        return identifier.get("name")
    return None


def _static_of_target(node: Estree | None, marker: str) -> str | None:
    if not isinstance(node, Mapping) or node.get("type") != "TSTypeReference":
        return None
    if qualified_name(node.get("typeName")) != marker:
        return None
    arguments = type_arguments(node)
    if len(arguments) != 1:
        return None
    query = arguments[0]
    if query.get("type") != "TSTypeQuery":
        return None
    expr = query.get("exprName")
    if isinstance(expr, Mapping) and expr.get("type") == "Identifier":
        return expr.get("name")
    return None


def extract_static_of(annotation: Estree | None, marker: str = "Ianitor.Static") -> str | None:
    """Return ``v`` for ``Static<typeof v>`` or ``Readonly<Static<typeof v>>``.

    ``marker`` is the dotted name of the static-type extractor. Any other
    shape, including a second ``Readonly`` layer, returns None.
    """
    direct = _static_of_target(annotation, marker)
    if direct is not None:
        return direct

    if not isinstance(annotation, Mapping) or annotation.get("type") != "TSTypeReference":
        return None
    if qualified_name(annotation.get("typeName")) != READONLY_WRAPPER:
        return None
    arguments = type_arguments(annotation)
    if len(arguments) != 1:
        return None
    return _static_of_target(arguments[0], marker)


__all__ = [
    "READONLY_WRAPPER",
    "declared_name",
    "extract_static_of",
    "has_explicit_check",
    "is_validator_call",
    "score_validator_call",
    "validator_method",
]
