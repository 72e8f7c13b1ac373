"""Structural model of one parsed TypeScript source file."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from tree_sitter import Node, Tree

from ..models import TypeKind
from .grammar import iter_named, node_text, unwrap_parentheses
from .types import PRIMITIVE_KINDS, REACT_MODULE, RENDERABLE_TYPE_NAME, TypeScope

_FUNCTION_NODES = {
    "function_declaration",
    "generator_function_declaration",
    "function_expression",
    "function",
    "generator_function",
    "arrow_function",
}
_COMPONENT_TYPE_NAMES = {
    "FC",
    "React.FC",
    "VFC",
    "React.VFC",
    "FunctionComponent",
    "React.FunctionComponent",
}
_MEMO_CALLEES = {"memo", "React.memo"}
_MAX_ALIAS_DEPTH = 16


@dataclass(frozen=True)
class ImportBinding:
    """A name brought into scope by an ``import`` statement."""

    local: str
    imported: str
    source: str


@dataclass
class InterfaceDeclaration:
    """All ``interface`` blocks sharing one name (declaration merging)."""

    name: str
    nodes: List[Node] = field(default_factory=list)


@dataclass(frozen=True)
class TypeAliasDeclaration:
    name: str
    node: Node

    @property
    def value(self) -> Optional[Node]:
        return self.node.child_by_field_name("value")


@dataclass(frozen=True)
class Parameter:
    """A parameter of the default export with its declared type, if any."""

    pattern: str
    type_node: Optional[Node]


@dataclass(frozen=True)
class DefaultExport:
    """The file's default-exported value as far as props detection cares."""

    kind: str
    name: Optional[str]
    callable: bool
    parameters: List[Parameter] = field(default_factory=list)
    node: Optional[Node] = field(default=None, compare=False, repr=False)


@dataclass
class SourceUnit:
    """Top-level declarations of one file, built fresh for every resolution."""

    path: Path
    source: bytes
    tree: Tree
    interfaces: Dict[str, InterfaceDeclaration] = field(default_factory=dict)
    type_aliases: Dict[str, TypeAliasDeclaration] = field(default_factory=dict)
    imports: Dict[str, ImportBinding] = field(default_factory=dict)
    default_export: Optional[DefaultExport] = None
    _scope: Optional[TypeScope] = field(default=None, init=False, repr=False)

    def get_interface(self, name: str) -> Optional[InterfaceDeclaration]:
        return self.interfaces.get(name)

    def get_type_alias(self, name: str) -> Optional[TypeAliasDeclaration]:
        return self.type_aliases.get(name)

    def text(self, node: Optional[Node]) -> str:
        return node_text(node, self.source)

    def declaration_nodes(self) -> Iterator[Node]:
        """Nodes a props lookup may read: interfaces, aliases and the default export."""
        for interface in self.interfaces.values():
            yield from interface.nodes
        for alias in self.type_aliases.values():
            yield alias.node
        if self.default_export is not None and self.default_export.node is not None:
            yield self.default_export.node

    @property
    def scope(self) -> TypeScope:
        if self._scope is None:
            self._scope = self._build_scope()
        return self._scope

    def _build_scope(self) -> TypeScope:
        namespaces = {"React"}
        node_names = set()
        for binding in self.imports.values():
            if binding.source != REACT_MODULE:
                continue
            if binding.imported in {"default", "*"}:
                namespaces.add(binding.local)
            elif binding.imported == RENDERABLE_TYPE_NAME:
                node_names.add(binding.local)
        return TypeScope(
            react_namespaces=frozenset(namespaces),
            react_node_names=frozenset(node_names),
            primitive_aliases=self._primitive_aliases(),
        )

    def _primitive_aliases(self) -> Dict[str, TypeKind]:
        resolved: Dict[str, TypeKind] = {}
        for name in self.type_aliases:
            kind = self._follow_primitive_alias(name)
            if kind is not None:
                resolved[name] = kind
        return resolved

    def _follow_primitive_alias(self, name: str) -> Optional[TypeKind]:
        current = name
        for _ in range(_MAX_ALIAS_DEPTH):
            alias = self.type_aliases.get(current)
            if alias is None:
                return None
            value = unwrap_parentheses(alias.value)
            if value is None:
                return None
            if value.type == "predefined_type":
                return PRIMITIVE_KINDS.get(self.text(value))
            if value.type != "type_identifier":
                return None
            current = self.text(value)
        return None


def build_source_unit(path: Path, source: bytes, tree: Tree) -> SourceUnit:
    """Collect the declarations a props lookup needs from a parsed tree."""
    unit = SourceUnit(path=path, source=source, tree=tree)
    collector = _Collector(unit)
    for statement in tree.root_node.named_children:
        collector.visit(statement)
    unit.default_export = collector.describe_default_export()
    return unit


class _Collector:
    def __init__(self, unit: SourceUnit) -> None:
        self.unit = unit
        self.functions: Dict[str, Node] = {}
        self.variables: Dict[str, Node] = {}
        self.default_target: Optional[Node] = None
        self.default_name: Optional[str] = None

    def visit(self, node: Node) -> None:
        kind = node.type
        if kind == "interface_declaration":
            self._add_interface(node)
        elif kind == "type_alias_declaration":
            name = self.unit.text(node.child_by_field_name("name"))
            if name and name not in self.unit.type_aliases:
                self.unit.type_aliases[name] = TypeAliasDeclaration(name=name, node=node)
        elif kind == "import_statement":
            self._add_imports(node)
        elif kind == "export_statement":
            self._visit_export(node)
        elif kind == "ambient_declaration":
            for child in node.named_children:
                self.visit(child)
        elif kind in {"function_declaration", "generator_function_declaration"}:
            name = self.unit.text(node.child_by_field_name("name"))
            if name:
                self.functions[name] = node
        elif kind in {"lexical_declaration", "variable_declaration"}:
            for declarator in iter_named(node, "variable_declarator"):
                name_node = declarator.child_by_field_name("name")
                if name_node is not None and name_node.type == "identifier":
                    self.variables[self.unit.text(name_node)] = declarator

    def _add_interface(self, node: Node) -> None:
        name = self.unit.text(node.child_by_field_name("name"))
        if not name:
            return
        declaration = self.unit.interfaces.setdefault(name, InterfaceDeclaration(name=name))
        declaration.nodes.append(node)

    def _add_imports(self, node: Node) -> None:
        source_node = node.child_by_field_name("source")
        if source_node is None:
            return
        module = self.unit.text(source_node).strip("'\"")
        for clause in iter_named(node, "import_clause"):
            for child in clause.named_children:
                if child.type == "identifier":
                    self._bind(child, "default", module)
                elif child.type == "namespace_import":
                    for identifier in iter_named(child, "identifier"):
                        self._bind(identifier, "*", module)
                elif child.type == "named_imports":
                    for specifier in iter_named(child, "import_specifier"):
                        imported = self.unit.text(specifier.child_by_field_name("name"))
                        alias = specifier.child_by_field_name("alias")
                        local = self.unit.text(alias) if alias is not None else imported
                        self.unit.imports[local] = ImportBinding(
                            local=local, imported=imported.strip("'\""), source=module
                        )

    def _bind(self, node: Node, imported: str, module: str) -> None:
        local = self.unit.text(node)
        self.unit.imports[local] = ImportBinding(local=local, imported=imported, source=module)

    def _visit_export(self, node: Node) -> None:
        is_default = any(child.type == "default" for child in node.children)
        declaration = node.child_by_field_name("declaration")
        if declaration is not None:
            self.visit(declaration)
            if is_default:
                self.default_target = declaration
            return
        value = node.child_by_field_name("value")
        if is_default and value is not None:
            self.default_target = value
            return
        if node.child_by_field_name("source") is not None:
            # Re-exports point at other modules and never define the local default.
            return
        for clause in iter_named(node, "export_clause"):
            for specifier in iter_named(clause, "export_specifier"):
                alias = specifier.child_by_field_name("alias")
                if alias is not None and self.unit.text(alias) == "default":
                    self.default_target = None
                    self.default_name = self.unit.text(specifier.child_by_field_name("name"))

    def describe_default_export(self) -> Optional[DefaultExport]:
        if self.default_target is not None:
            return self._describe(self.default_target, annotation=None, depth=0)
        if self.default_name:
            return self._describe_identifier(self.default_name, depth=0)
        return None

    def _describe(self, node: Node, *, annotation: Optional[Node], depth: int) -> DefaultExport:
        node = unwrap_parentheses(node) or node
        if depth > _MAX_ALIAS_DEPTH:
            return DefaultExport(kind=node.type, name=None, callable=False)
        if node.type in _FUNCTION_NODES:
            name_node = node.child_by_field_name("name")
            return DefaultExport(
                kind=node.type,
                name=self.unit.text(name_node) or None,
                callable=True,
                parameters=self._parameters(node, annotation),
                node=node,
            )
        if node.type == "identifier":
            return self._describe_identifier(self.unit.text(node), depth=depth + 1)
        if node.type == "call_expression":
            callee = self.unit.text(node.child_by_field_name("function"))
            arguments = list(iter_named(node.child_by_field_name("arguments")))
            if callee in _MEMO_CALLEES and arguments:
                return self._describe(arguments[0], annotation=annotation, depth=depth + 1)
        return DefaultExport(kind=node.type, name=None, callable=False, node=node)

    def _describe_identifier(self, name: str, *, depth: int) -> DefaultExport:
        function = self.functions.get(name)
        if function is not None:
            return self._describe(function, annotation=None, depth=depth)
        declarator = self.variables.get(name)
        if declarator is not None:
            value = declarator.child_by_field_name("value")
            if value is not None:
                annotation = _component_props_type(declarator, self.unit)
                described = self._describe(value, annotation=annotation, depth=depth)
                if described.name is None:
                    return DefaultExport(
                        kind=described.kind,
                        name=name,
                        callable=described.callable,
                        parameters=described.parameters,
                        node=declarator,
                    )
                return described
        return DefaultExport(kind="identifier", name=name, callable=False)

    def _parameters(self, function: Node, annotation: Optional[Node]) -> List[Parameter]:
        parameters: List[Parameter] = []
        single = function.child_by_field_name("parameter")
        if single is not None:
            parameters.append(Parameter(pattern=self.unit.text(single), type_node=None))
        for param in iter_named(
            function.child_by_field_name("parameters"), "required_parameter", "optional_parameter"
        ):
            pattern = param.child_by_field_name("pattern")
            parameters.append(
                Parameter(
                    pattern=self.unit.text(pattern),
                    type_node=param.child_by_field_name("type"),
                )
            )
        if annotation is not None and parameters and parameters[0].type_node is None:
            parameters[0] = Parameter(pattern=parameters[0].pattern, type_node=annotation)
        return parameters


def _component_props_type(declarator: Node, unit: SourceUnit) -> Optional[Node]:
    """``const X: React.FC<Props> = (...) =>`` declares ``Props`` for the first parameter."""
    annotation = declarator.child_by_field_name("type")
    if annotation is None:
        return None
    for generic in iter_named(annotation, "generic_type"):
        if unit.text(generic.child_by_field_name("name")) not in _COMPONENT_TYPE_NAMES:
            continue
        arguments = list(iter_named(generic.child_by_field_name("type_arguments")))
        if arguments:
            return arguments[0]
    return None


__all__ = [
    "DefaultExport",
    "ImportBinding",
    "InterfaceDeclaration",
    "Parameter",
    "SourceUnit",
    "TypeAliasDeclaration",
    "build_source_unit",
]
