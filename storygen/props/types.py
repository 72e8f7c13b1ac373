"""Classification of TypeScript type expressions into mock-relevant kinds."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Mapping, Optional

from tree_sitter import Node

from ..models import TypeKind
from .grammar import TYPESCRIPT, new_parser, node_text, unwrap_parentheses, unwrap_type_annotation

PRIMITIVE_KINDS: Mapping[str, TypeKind] = {
    "string": TypeKind.TEXT,
    "number": TypeKind.NUMBER,
    "boolean": TypeKind.BOOLEAN,
}

RENDERABLE_TYPE_NAME = "ReactNode"
REACT_MODULE = "react"
REACT_GLOBAL_NAMESPACE = "React"

_PROBE_ALIAS = "__StorygenProbe"


@dataclass(frozen=True)
class TypeScope:
    """Names visible at the place a type expression is written."""

    react_namespaces: FrozenSet[str] = frozenset({REACT_GLOBAL_NAMESPACE})
    react_node_names: FrozenSet[str] = frozenset()
    primitive_aliases: Mapping[str, TypeKind] = field(default_factory=dict)


DEFAULT_SCOPE = TypeScope()


def classify(node: Optional[Node], source: bytes, scope: TypeScope = DEFAULT_SCOPE) -> TypeKind:
    """Classify a type node; primitives must match exactly, ReactNode anywhere."""
    node = unwrap_parentheses(unwrap_type_annotation(node))
    if node is None:
        return TypeKind.UNKNOWN

    text = node_text(node, source)
    if node.type == "predefined_type":
        kind = PRIMITIVE_KINDS.get(text)
        if kind is not None:
            return kind
    elif node.type == "type_identifier" and text in scope.primitive_aliases:
        return scope.primitive_aliases[text]

    if mentions_renderable(node, source, scope):
        return TypeKind.RENDERABLE
    return TypeKind.UNKNOWN


def mentions_renderable(node: Node, source: bytes, scope: TypeScope = DEFAULT_SCOPE) -> bool:
    """True when a ``ReactNode`` reference occurs anywhere inside the type.

    This mirrors the loose "type text contains React.ReactNode" rule (unions,
    arrays and generic arguments all count) but only matches real references,
    so names such as ``MyReactNodeList`` do not qualify.
    """
    if node.type == "nested_type_identifier":
        module = node.child_by_field_name("module")
        name = node.child_by_field_name("name")
        return (
            node_text(name, source) == RENDERABLE_TYPE_NAME
            and node_text(module, source) in scope.react_namespaces
        )
    if node.type == "type_identifier":
        return node_text(node, source) in scope.react_node_names
    return any(mentions_renderable(child, source, scope) for child in node.named_children)


def classify_type_text(type_text: str, scope: TypeScope = DEFAULT_SCOPE) -> TypeKind:
    """Classify a type given only as text; unparsable text is ``UNKNOWN``."""
    if not type_text or not type_text.strip():
        return TypeKind.UNKNOWN
    source = f"type {_PROBE_ALIAS} = {type_text};".encode("utf-8")
    tree = new_parser(TYPESCRIPT).parse(source)
    if tree.root_node.has_error:
        return TypeKind.UNKNOWN
    for statement in tree.root_node.named_children:
        if statement.type == "type_alias_declaration":
            return classify(statement.child_by_field_name("value"), source, scope)
    return TypeKind.UNKNOWN


__all__ = [
    "DEFAULT_SCOPE",
    "PRIMITIVE_KINDS",
    "REACT_MODULE",
    "RENDERABLE_TYPE_NAME",
    "TypeScope",
    "classify",
    "classify_type_text",
    "mentions_renderable",
]
