"""Type-expression trees built from ESTree JSON.

The scorer never looks at raw ESTree dictionaries. This module folds the
``@typescript-eslint`` node shapes it cares about into ``TypeNode``:
a kind tag, an ordered list of child type expressions and a couple of
counts that the scoring rules need (members, extends clauses).

Children per kind:
    - INTERFACE / TYPE_LITERAL: type annotation of each typed member
    - UNION / INTERSECTION: the branches
    - ARRAY: the element type
    - TUPLE: every element (rest and optional elements keep their own kinds)
    - TYPE_REFERENCE: the type arguments
    - CONDITIONAL: check, extends, true branch, false branch
    - MAPPED: constraint and value type, each when present
    - FUNCTION: typed parameters, then the return type when present
"""

from __future__ import annotations

import itertools
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any

Estree = Mapping[str, Any]

# Process-wide so identities are never reused, even across passes.
_identities: Iterator[int] = itertools.count(1)


class NodeKind(Enum):
    """Scoring categories for type expressions."""

    PRIMITIVE = auto()
    SHORT_CIRCUIT = auto()  # never / unknown / any
    INTERFACE = auto()
    TYPE_LITERAL = auto()
    UNION = auto()
    INTERSECTION = auto()
    ARRAY = auto()
    TUPLE = auto()
    TYPE_REFERENCE = auto()
    CONDITIONAL = auto()
    MAPPED = auto()
    FUNCTION = auto()
    REST = auto()
    OPTIONAL = auto()
    UNKNOWN = auto()


_KIND_BY_ESTREE_TYPE: dict[str, NodeKind] = {
    "TSStringKeyword": NodeKind.PRIMITIVE,
    "TSNumberKeyword": NodeKind.PRIMITIVE,
    "TSBooleanKeyword": NodeKind.PRIMITIVE,
    "TSNullKeyword": NodeKind.PRIMITIVE,
    "TSUndefinedKeyword": NodeKind.PRIMITIVE,
    "TSVoidKeyword": NodeKind.PRIMITIVE,
    "TSSymbolKeyword": NodeKind.PRIMITIVE,
    "TSBigIntKeyword": NodeKind.PRIMITIVE,
    "TSNeverKeyword": NodeKind.SHORT_CIRCUIT,
    "TSUnknownKeyword": NodeKind.SHORT_CIRCUIT,
    "TSAnyKeyword": NodeKind.SHORT_CIRCUIT,
    "TSInterfaceDeclaration": NodeKind.INTERFACE,
    "TSTypeLiteral": NodeKind.TYPE_LITERAL,
    "TSUnionType": NodeKind.UNION,
    "TSIntersectionType": NodeKind.INTERSECTION,
    "TSArrayType": NodeKind.ARRAY,
    "TSTupleType": NodeKind.TUPLE,
    "TSTypeReference": NodeKind.TYPE_REFERENCE,
    "TSConditionalType": NodeKind.CONDITIONAL,
    "TSMappedType": NodeKind.MAPPED,
    "TSFunctionType": NodeKind.FUNCTION,
    "TSMethodSignature": NodeKind.FUNCTION,
    "TSRestType": NodeKind.REST,
    "TSOptionalType": NodeKind.OPTIONAL,
}


@dataclass(frozen=True)
class SourceRef:
    """1-based line, 0-based column, as ESTree ``loc`` reports them."""

    line: int
    column: int


@dataclass(eq=False)
class TypeNode:
    """A type expression with a stable identity.

    Equality and hashing are by object, never by structure: two identical
    ``string[]`` annotations are two different nodes.
    """

    kind: NodeKind
    children: list[TypeNode] = field(default_factory=list, repr=False)
    name: str | None = None
    member_count: int = 0
    extends_count: int = 0
    source: SourceRef | None = None
    estree_type: str | None = None
    identity: int = field(default_factory=lambda: next(_identities), init=False)


def kind_for(estree_type: str | None) -> NodeKind:
    """Map an ESTree ``type`` string to its scoring kind."""
    if estree_type is None:
        return NodeKind.UNKNOWN
    return _KIND_BY_ESTREE_TYPE.get(estree_type, NodeKind.UNKNOWN)


def source_ref(node: Estree) -> SourceRef | None:
    loc = node.get("loc")
    if not isinstance(loc, Mapping):
        return None
    start = loc.get("start")
    if not isinstance(start, Mapping):
        return None
    return SourceRef(line=int(start.get("line", 1)), column=int(start.get("column", 0)))


def qualified_name(node: Estree | None) -> str | None:
    """Render an entity name (``Identifier`` or ``TSQualifiedName``) as dotted text."""
    if not isinstance(node, Mapping):
        return None
    node_type = node.get("type")
    if node_type == "Identifier":
        return node.get("name")
    if node_type == "TSQualifiedName":
        left = qualified_name(node.get("left"))
        right = qualified_name(node.get("right"))
        if left is None or right is None:
            return None
        return f"{left}.{right}"
    return None


def unwrap_annotation(holder: Estree | None) -> Estree | None:
    """Return the type inside a ``TSTypeAnnotation`` wrapper, if any."""
    if not isinstance(holder, Mapping):
        return None
    wrapper = holder.get("typeAnnotation")
    if not isinstance(wrapper, Mapping):
        return None
    inner = wrapper.get("typeAnnotation")
    return inner if isinstance(inner, Mapping) else None


def type_arguments(node: Estree) -> list[Estree]:
    """Type arguments of a reference; older parsers call them ``typeParameters``."""
    args = node.get("typeArguments") or node.get("typeParameters")
    if not isinstance(args, Mapping):
        return []
    return [param for param in args.get("params", []) if isinstance(param, Mapping)]


def _members(node: Estree) -> list[Estree]:
    if node.get("type") == "TSInterfaceDeclaration":
        body = node.get("body")
        members = body.get("body", []) if isinstance(body, Mapping) else []
    else:
        members = node.get("members", [])
    return [member for member in members if isinstance(member, Mapping)]


def _build_members(node: Estree, target: TypeNode) -> None:
    members = _members(node)
    target.member_count = len(members)
    for member in members:
        annotation = unwrap_annotation(member)
        if annotation is not None:
            target.children.append(build_type_node(annotation))


def _build_interface(node: Estree, target: TypeNode) -> None:
    identifier = node.get("id")
    target.name = identifier.get("name") if isinstance(identifier, Mapping) else None
    target.extends_count = len(node.get("extends") or [])
    _build_members(node, target)


def _build_branches(node: Estree, target: TypeNode) -> None:
    for branch in node.get("types", []):
        if isinstance(branch, Mapping):
            target.children.append(build_type_node(branch))


def _build_array(node: Estree, target: TypeNode) -> None:
    _append_optional(node.get("elementType"), target)


def _build_tuple(node: Estree, target: TypeNode) -> None:
    for element in node.get("elementTypes", []):
        if isinstance(element, Mapping):
            target.children.append(build_type_node(element))


def _build_reference(node: Estree, target: TypeNode) -> None:
    target.name = qualified_name(node.get("typeName"))
    for argument in type_arguments(node):
        target.children.append(build_type_node(argument))


def _build_conditional(node: Estree, target: TypeNode) -> None:
    for key in ("checkType", "extendsType", "trueType", "falseType"):
        _append_optional(node.get(key), target)


def _build_mapped(node: Estree, target: TypeNode) -> None:
    type_parameter = node.get("typeParameter")
    constraint = (
        type_parameter.get("constraint") if isinstance(type_parameter, Mapping) else None
    ) or node.get("constraint")
    _append_optional(constraint, target)
    _append_optional(node.get("typeAnnotation"), target)


def _build_function(node: Estree, target: TypeNode) -> None:
    params = node.get("params")
    if params is None:
        params = node.get("parameters", [])
    for param in params:
        annotation = unwrap_annotation(param)
        if annotation is not None:
            target.children.append(build_type_node(annotation))
    return_type = node.get("returnType")
    if isinstance(return_type, Mapping):
        _append_optional(return_type.get("typeAnnotation"), target)


def _build_wrapped(node: Estree, target: TypeNode) -> None:
    _append_optional(node.get("typeAnnotation"), target)


def _append_optional(child: Any, target: TypeNode) -> None:
    if isinstance(child, Mapping):
        target.children.append(build_type_node(child))


_BUILDERS: dict[NodeKind, Callable[[Estree, TypeNode], None]] = {
    NodeKind.INTERFACE: _build_interface,
    NodeKind.TYPE_LITERAL: _build_members,
    NodeKind.UNION: _build_branches,
    NodeKind.INTERSECTION: _build_branches,
    NodeKind.ARRAY: _build_array,
    NodeKind.TUPLE: _build_tuple,
    NodeKind.TYPE_REFERENCE: _build_reference,
    NodeKind.CONDITIONAL: _build_conditional,
    NodeKind.MAPPED: _build_mapped,
    NodeKind.FUNCTION: _build_function,
    NodeKind.REST: _build_wrapped,
    NodeKind.OPTIONAL: _build_wrapped,
}


def build_type_node(node: Estree) -> TypeNode:
    """Build a ``TypeNode`` tree from an ESTree type node (or interface declaration).

    Unknown node types become ``UNKNOWN`` leaves; nothing here raises on
    unexpected shapes.
    """
    estree_type = node.get("type")
    kind = kind_for(estree_type)
    target = TypeNode(kind=kind, source=source_ref(node), estree_type=estree_type)
    builder = _BUILDERS.get(kind)
    if builder is not None:
        builder(node, target)
    return target


__all__ = [
    "Estree",
    "NodeKind",
    "SourceRef",
    "TypeNode",
    "build_type_node",
    "kind_for",
    "qualified_name",
    "source_ref",
    "type_arguments",
    "unwrap_annotation",
]
