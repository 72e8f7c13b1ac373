"""tree-sitter grammar handles and node helpers for TypeScript sources."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator, Optional

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser

TYPESCRIPT = "typescript"
TSX = "tsx"

_LANGUAGES = {
    TYPESCRIPT: Language(tree_sitter_typescript.language_typescript()),
    TSX: Language(tree_sitter_typescript.language_tsx()),
}

_TSX_SUFFIXES = {".tsx", ".jsx", ".js", ".mjs", ".cjs"}


def language_key_for(path: Path) -> str:
    """Pick the grammar for a file; JSX-capable files need the TSX dialect."""
    return TSX if path.suffix.lower() in _TSX_SUFFIXES else TYPESCRIPT


def new_parser(language_key: str) -> Parser:
    return Parser(_LANGUAGES[language_key])


def node_text(node: Optional[Node], source: bytes) -> str:
    if node is None:
        return ""
    return source[node.start_byte : node.end_byte].decode("utf-8", errors="ignore")


def normalized_text(node: Optional[Node], source: bytes) -> str:
    """Node text with runs of whitespace collapsed, as a type checker prints it."""
    return " ".join(node_text(node, source).split())


def unwrap_type_annotation(node: Optional[Node]) -> Optional[Node]:
    """Return the type inside a ``: T`` annotation (or the node itself)."""
    if node is None:
        return None
    if node.type == "type_annotation":
        named = node.named_children
        return named[-1] if named else None
    return node


def unwrap_parentheses(node: Optional[Node]) -> Optional[Node]:
    while node is not None and node.type in {"parenthesized_type", "parenthesized_expression"}:
        named = node.named_children
        node = named[0] if named else None
    return node


def iter_errors(node: Node) -> Iterator[Node]:
    """Yield the outermost ERROR and MISSING nodes of a tree, in source order."""
    if node.type == "ERROR" or node.is_missing:
        yield node
        return
    for child in node.children:
        if child.has_error or child.is_missing:
            yield from iter_errors(child)


def contains_type(node: Node, types: Iterable[str]) -> bool:
    wanted = set(types)
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type in wanted:
            return True
        stack.extend(current.children)
    return False


def iter_named(node: Optional[Node], *types: str) -> Iterator[Node]:
    if node is None:
        return
    for child in node.named_children:
        if not types or child.type in types:
            yield child


__all__ = [
    "TSX",
    "TYPESCRIPT",
    "contains_type",
    "iter_errors",
    "iter_named",
    "language_key_for",
    "new_parser",
    "node_text",
    "normalized_text",
    "unwrap_parentheses",
    "unwrap_type_annotation",
]
