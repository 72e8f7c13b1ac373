"""Load TypeScript sources into ``SourceUnit`` models inside a scoped context."""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, Optional

from tree_sitter import Node, Parser

from ..logging import get_logger
from .errors import PropsExtractionError, SourceNotFoundError, SourceParseError
from .grammar import contains_type, iter_errors, language_key_for, new_parser
from .source import SourceUnit, build_source_unit
from .tsconfig import ProjectConfig, load_project_config

logger = get_logger("props.loader")

_DECLARATION_MARKERS = ("interface", "interface_declaration", "type_alias_declaration", "default")


class ResolutionContext:
    """Per-call parsing state: project settings, parsers and loaded units.

    A context is built for one extraction and closed right after it; nothing it
    holds survives into the next call.
    """

    def __init__(self, project: ProjectConfig) -> None:
        self.project = project
        self._parsers: Dict[str, Parser] = {}
        self._units: Dict[Path, SourceUnit] = {}
        self._closed = False

    def __enter__(self) -> "ResolutionContext":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # type: ignore[no-untyped-def]
        self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def load(self, path: Path | str) -> SourceUnit:
        """Parse ``path`` (relative paths resolve against the working directory)."""
        if self._closed:
            raise RuntimeError("ResolutionContext is closed")
        resolved = _absolute(Path(path))
        cached = self._units.get(resolved)
        if cached is not None:
            return cached
        if not resolved.is_file():
            raise SourceNotFoundError(resolved)

        try:
            raw = resolved.read_bytes()
        except OSError as exc:
            raise SourceParseError(resolved, str(exc)) from exc
        try:
            source = raw.decode("utf-8-sig").encode("utf-8")
        except UnicodeDecodeError as exc:
            raise SourceParseError(resolved, "file is not valid UTF-8") from exc

        tree = self._get_parser(language_key_for(resolved)).parse(source)
        unit = build_source_unit(resolved, source, tree)
        if tree.root_node.has_error:
            _check_syntax(unit)

        logger.debug(
            "Loaded %s (%d interfaces, %d type aliases, default export: %s)",
            resolved,
            len(unit.interfaces),
            len(unit.type_aliases),
            unit.default_export.kind if unit.default_export else "none",
        )
        self._units[resolved] = unit
        return unit

    def load_import(self, unit: SourceUnit, specifier: str) -> Optional[SourceUnit]:
        """Load the local module an import in ``unit`` points at, if it can be found."""
        target = self.project.resolve_module(specifier, unit.path)
        if target is None:
            logger.debug("Import %r from %s does not resolve to a project file", specifier, unit.path)
            return None
        try:
            return self.load(target)
        except PropsExtractionError as exc:
            logger.warning("Skipping %s while resolving %r: %s", target, specifier, exc)
            return None

    def close(self) -> None:
        self._units.clear()
        self._parsers.clear()
        self._closed = True

    def _get_parser(self, language_key: str) -> Parser:
        parser = self._parsers.get(language_key)
        if parser is None:
            parser = new_parser(language_key)
            self._parsers[language_key] = parser
        return parser


class SourceLoader:
    """Builds resolution contexts bound to a project's ``tsconfig.json``."""

    def __init__(
        self,
        project_root: Path | str | None = None,
        *,
        tsconfig_path: Path | str | None = None,
    ) -> None:
        self.project_root = Path(project_root) if project_root is not None else None
        self.tsconfig_path = Path(tsconfig_path) if tsconfig_path is not None else None

    @contextmanager
    def open(self) -> Iterator[ResolutionContext]:
        project = load_project_config(self.project_root or Path.cwd(), self.tsconfig_path)
        context = ResolutionContext(project)
        try:
            yield context
        finally:
            context.close()

    def load(self, path: Path | str) -> SourceUnit:
        """Parse a single file in a throwaway context."""
        with self.open() as context:
            return context.load(path)


def _check_syntax(unit: SourceUnit) -> None:
    """Fail on syntax errors that touch a declaration; warn about the rest.

    Unrecovered statements count as touching a declaration when they still
    contain an ``interface``, type alias or ``default`` token.
    """
    declared = list(unit.declaration_nodes())
    for error in iter_errors(unit.tree.root_node):
        line, column = error.start_point
        location = f"line {line + 1}, column {column + 1}"
        if any(_overlaps(error, node) for node in declared) or contains_type(error, _DECLARATION_MARKERS):
            raise SourceParseError(unit.path, f"syntax error at {location}")
        logger.warning("Ignoring unsupported syntax in %s at %s", unit.path, location)


def _overlaps(error: Node, node: Node) -> bool:
    if error.start_byte == error.end_byte:
        return node.start_byte <= error.start_byte <= node.end_byte
    return error.start_byte < node.end_byte and node.start_byte < error.end_byte


def _absolute(path: Path) -> Path:
    path = path.expanduser()
    if not path.is_absolute():
        path = Path.cwd() / path
    return path.resolve()


__all__ = ["ResolutionContext", "SourceLoader"]
