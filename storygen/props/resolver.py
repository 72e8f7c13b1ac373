"""Locate the props declaration of a component and enumerate its properties."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Set, Tuple, Union

from tree_sitter import Node

from ..logging import get_logger
from ..models import PropertyDescriptor, TypeKind
from .errors import (
    DeclarationNotFoundError,
    NoDefaultExportError,
    UnresolvableParameterTypeError,
)
from .grammar import iter_named, normalized_text, unwrap_parentheses, unwrap_type_annotation
from .loader import ResolutionContext
from .source import InterfaceDeclaration, SourceUnit, TypeAliasDeclaration
from .types import classify

logger = get_logger("props.resolver")

Declaration = Union[InterfaceDeclaration, TypeAliasDeclaration]

_TRANSPARENT_WRAPPERS = {"Readonly", "Partial", "Required"}
_CHILDREN_WRAPPERS = {"PropsWithChildren", "React.PropsWithChildren"}
_KEY_FILTERS = {"Pick", "Omit"}
_BASE_TYPE_NODES = ("type_identifier", "nested_type_identifier", "generic_type")


@dataclass(frozen=True)
class _Located:
    unit: SourceUnit
    declaration: Declaration


class PropsDeclarationResolver:
    """Finds the interface or alias describing a component's props.

    With a ``context`` the resolver can follow ``extends`` clauses and alias
    references into imported project files; without one it stays inside the
    given unit.
    """

    def __init__(self, context: Optional[ResolutionContext] = None) -> None:
        self.context = context

    def resolve(self, unit: SourceUnit, explicit_name: Optional[str] = None) -> List[PropertyDescriptor]:
        """Return the props of the named (or auto-detected) declaration, in order.

        Missing declarations and undetectable defaults are logged and produce an
        empty list so callers can continue without mock hints.
        """
        try:
            if explicit_name:
                declaration = self._lookup_or_raise(unit, explicit_name, auto_detected=False)
            else:
                name = self.detect_props_type_name(unit)
                logger.debug("Auto-detected props type %r in %s", name, unit.path)
                declaration = self._lookup_or_raise(unit, name, auto_detected=True)
        except (DeclarationNotFoundError, NoDefaultExportError, UnresolvableParameterTypeError) as exc:
            logger.warning("%s", exc)
            return []

        properties = self._members_of_declaration(unit, declaration, seen=set())
        logger.debug("Resolved %d properties from %s", len(properties), declaration.name)
        return properties

    @staticmethod
    def detect_props_type_name(unit: SourceUnit) -> str:
        """Name of the first parameter type of the default-exported callable."""
        exported = unit.default_export
        if exported is None:
            raise NoDefaultExportError(
                "Could not auto-detect props type from the component: no default export."
            )
        if not exported.callable:
            raise UnresolvableParameterTypeError(
                "Could not auto-detect props type from the component: "
                f"default export is a {exported.kind}, not a function."
            )
        if not exported.parameters:
            raise UnresolvableParameterTypeError(
                "Could not auto-detect props type from the component: "
                "default export takes no parameters."
            )
        type_node = unwrap_type_annotation(exported.parameters[0].type_node)
        type_name = normalized_text(type_node, unit.source)
        if not type_name:
            raise UnresolvableParameterTypeError(
                "Could not auto-detect props type from the component: "
                f"parameter {exported.parameters[0].pattern!r} has no type annotation."
            )
        return type_name

    @staticmethod
    def lookup(unit: SourceUnit, name: str) -> Optional[Declaration]:
        """Interface first, then type alias, in the given unit only."""
        return unit.get_interface(name) or unit.get_type_alias(name)

    def _lookup_or_raise(self, unit: SourceUnit, name: str, *, auto_detected: bool) -> Declaration:
        declaration = self.lookup(unit, name)
        if declaration is None:
            raise DeclarationNotFoundError(name, auto_detected=auto_detected)
        return declaration

    # ------------------------------------------------------------------
    # Member enumeration
    # ------------------------------------------------------------------

    def _members_of_declaration(
        self, unit: SourceUnit, declaration: Declaration, *, seen: Set[Tuple[str, str]]
    ) -> List[PropertyDescriptor]:
        key = (str(unit.path), declaration.name)
        if key in seen:
            logger.debug("Circular reference to %s in %s ignored", declaration.name, unit.path)
            return []
        seen = seen | {key}

        if isinstance(declaration, TypeAliasDeclaration):
            return self._members_of_type(unit, declaration.value, seen=seen)

        members: Dict[str, PropertyDescriptor] = {}
        for node in declaration.nodes:
            _merge(members, self._members_of_body(unit, node.child_by_field_name("body")))
        for node in declaration.nodes:
            for clause in (child for child in node.children if child.type == "extends_type_clause"):
                for base in iter_named(clause, *_BASE_TYPE_NODES):
                    _merge(members, self._members_of_reference(unit, base, seen=seen))
        return list(members.values())

    def _members_of_type(
        self, unit: SourceUnit, node: Optional[Node], *, seen: Set[Tuple[str, str]]
    ) -> List[PropertyDescriptor]:
        node = unwrap_parentheses(node)
        if node is None:
            return []
        if node.type == "object_type":
            return self._members_of_body(unit, node)
        if node.type == "intersection_type":
            members: Dict[str, PropertyDescriptor] = {}
            for part in node.named_children:
                _merge(members, self._members_of_type(unit, part, seen=seen))
            return list(members.values())
        if node.type in _BASE_TYPE_NODES:
            return self._members_of_reference(unit, node, seen=seen)
        logger.debug(
            "Type %r in %s is not an object shape; no properties collected",
            normalized_text(node, unit.source),
            unit.path,
        )
        return []

    def _members_of_reference(
        self, unit: SourceUnit, node: Node, *, seen: Set[Tuple[str, str]]
    ) -> List[PropertyDescriptor]:
        if node.type == "generic_type":
            name = unit.text(node.child_by_field_name("name"))
            arguments = list(iter_named(node.child_by_field_name("type_arguments")))
            if name in _TRANSPARENT_WRAPPERS and arguments:
                return self._members_of_type(unit, arguments[0], seen=seen)
            if name in _KEY_FILTERS and len(arguments) >= 2:
                return _filter_keys(
                    self._members_of_type(unit, arguments[0], seen=seen),
                    _literal_keys(unit, arguments[1]),
                    keep=name == "Pick",
                )
            if name in _CHILDREN_WRAPPERS and arguments:
                members = {prop.name: prop for prop in self._members_of_type(unit, arguments[0], seen=seen)}
                members.setdefault(
                    "children",
                    PropertyDescriptor(name="children", type_text="React.ReactNode", kind=TypeKind.RENDERABLE),
                )
                return list(members.values())
            node = node.child_by_field_name("name") or node

        if node.type != "type_identifier":
            logger.debug("Cannot follow %r from %s", unit.text(node), unit.path)
            return []

        located = self._locate(unit, unit.text(node))
        if located is None:
            logger.debug("Base type %r is not declared in the project; skipping", unit.text(node))
            return []
        return self._members_of_declaration(located.unit, located.declaration, seen=seen)

    def _locate(self, unit: SourceUnit, name: str) -> Optional[_Located]:
        declaration = self.lookup(unit, name)
        if declaration is not None:
            return _Located(unit=unit, declaration=declaration)
        binding = unit.imports.get(name)
        if binding is None or self.context is None or binding.imported in {"default", "*"}:
            return None
        imported_unit = self.context.load_import(unit, binding.source)
        if imported_unit is None:
            return None
        declaration = self.lookup(imported_unit, binding.imported)
        if declaration is None:
            return None
        return _Located(unit=imported_unit, declaration=declaration)

    def _members_of_body(self, unit: SourceUnit, body: Optional[Node]) -> List[PropertyDescriptor]:
        properties: List[PropertyDescriptor] = []
        for member in iter_named(body, "property_signature", "method_signature"):
            name = unit.text(member.child_by_field_name("name")).strip("'\"")
            if not name:
                continue
            if member.type == "method_signature":
                properties.append(
                    PropertyDescriptor(name=name, type_text=_method_type_text(unit, member), kind=TypeKind.UNKNOWN)
                )
                continue
            type_node = unwrap_type_annotation(member.child_by_field_name("type"))
            if type_node is None:
                properties.append(PropertyDescriptor(name=name, type_text="any", kind=TypeKind.UNKNOWN))
                continue
            properties.append(
                PropertyDescriptor(
                    name=name,
                    type_text=normalized_text(type_node, unit.source),
                    kind=classify(type_node, unit.source, unit.scope),
                )
            )
        return properties


def _method_type_text(unit: SourceUnit, member: Node) -> str:
    parameters = normalized_text(member.child_by_field_name("parameters"), unit.source) or "()"
    returns = normalized_text(unwrap_type_annotation(member.child_by_field_name("return_type")), unit.source)
    return f"{parameters} => {returns or 'any'}"


def _literal_keys(unit: SourceUnit, node: Optional[Node]) -> Set[str]:
    """String-literal keys of a ``Pick``/``Omit`` key argument, unions included."""
    node = unwrap_parentheses(node)
    if node is None:
        return set()
    if node.type == "union_type":
        keys: Set[str] = set()
        for part in node.named_children:
            keys |= _literal_keys(unit, part)
        return keys
    if node.type == "literal_type":
        return {unit.text(node).strip("'\"`")}
    logger.debug("Key type %r in %s is not a string literal; ignored", unit.text(node), unit.path)
    return set()


def _filter_keys(
    properties: List[PropertyDescriptor], keys: Set[str], *, keep: bool
) -> List[PropertyDescriptor]:
    return [prop for prop in properties if (prop.name in keys) == keep]


def _merge(target: Dict[str, PropertyDescriptor], properties: List[PropertyDescriptor]) -> None:
    for prop in properties:
        target.setdefault(prop.name, prop)


__all__ = ["PropsDeclarationResolver"]
