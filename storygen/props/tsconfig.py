"""Project-level type-resolution settings read from ``tsconfig.json``."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence

import json5

from ..logging import get_logger
from .errors import SourceParseError

TSCONFIG_FILENAME = "tsconfig.json"

_SOURCE_EXTENSIONS: tuple[str, ...] = (".ts", ".tsx", ".d.ts", ".mts", ".cts")
_JS_EXTENSIONS: tuple[str, ...] = (".js", ".jsx", ".mjs", ".cjs")

logger = get_logger("props.tsconfig")


@dataclass(frozen=True)
class ProjectConfig:
    """Compiler options that influence how import specifiers map to files."""

    root: Path
    config_path: Optional[Path] = None
    base_url: Optional[Path] = None
    paths: Dict[str, List[str]] = field(default_factory=dict)
    paths_base: Optional[Path] = None

    def resolve_module(self, specifier: str, importer: Path) -> Optional[Path]:
        """Return the source file an import specifier refers to, if it is local."""
        if specifier.startswith("."):
            return _find_module_file(importer.parent / specifier)

        for target in self._expand_paths(specifier):
            found = _find_module_file(target)
            if found is not None:
                return found

        if self.base_url is not None:
            return _find_module_file(self.base_url / specifier)
        return None

    def _expand_paths(self, specifier: str) -> Iterable[Path]:
        if not self.paths:
            return
        base = self.paths_base or self.base_url or self.root
        for pattern, targets in self.paths.items():
            captured = _match_pattern(pattern, specifier)
            if captured is None:
                continue
            for target in targets:
                yield base / target.replace("*", captured)


def load_project_config(
    project_root: Path, tsconfig_path: Optional[Path] = None
) -> ProjectConfig:
    """Load ``tsconfig.json`` from the project root, following ``extends`` chains."""
    root = project_root.expanduser().resolve()
    config_file = (tsconfig_path or root / TSCONFIG_FILENAME).expanduser()
    if not config_file.is_absolute():
        config_file = root / config_file
    config_file = config_file.resolve()

    if not config_file.exists():
        logger.debug("No %s found at %s; using default compiler options", TSCONFIG_FILENAME, config_file)
        return ProjectConfig(root=root)

    options = _collect_compiler_options(config_file, seen=set())
    base_url = options.get("baseUrl")
    paths = options.get("paths")
    return ProjectConfig(
        root=root,
        config_path=config_file,
        base_url=base_url if isinstance(base_url, Path) else None,
        paths=paths if isinstance(paths, dict) else {},
        paths_base=options.get("pathsBase"),
    )


def _collect_compiler_options(config_file: Path, *, seen: set[Path]) -> Dict[str, Any]:
    if config_file in seen:
        raise SourceParseError(config_file, "circular 'extends' chain")
    seen.add(config_file)

    data = read_jsonc(config_file)
    if not isinstance(data, dict):
        raise SourceParseError(config_file, "expected an object at the root")

    merged: Dict[str, Any] = {}
    for parent in _extends_targets(config_file, data.get("extends")):
        merged.update(_collect_compiler_options(parent, seen=seen))

    options = data.get("compilerOptions")
    if options is None:
        return merged
    if not isinstance(options, dict):
        raise SourceParseError(config_file, "'compilerOptions' must be an object")

    # baseUrl and paths are relative to the file that declares them.
    if isinstance(options.get("baseUrl"), str):
        merged["baseUrl"] = (config_file.parent / options["baseUrl"]).resolve()
    if isinstance(options.get("paths"), dict):
        merged["paths"] = {
            str(pattern): [str(target) for target in targets]
            for pattern, targets in options["paths"].items()
            if isinstance(targets, list)
        }
        merged["pathsBase"] = merged.get("baseUrl") or config_file.parent
    return merged


def _extends_targets(config_file: Path, value: Any) -> List[Path]:
    if value is None:
        return []
    entries: Sequence[Any] = value if isinstance(value, list) else [value]
    targets: List[Path] = []
    for entry in entries:
        if not isinstance(entry, str):
            raise SourceParseError(config_file, "'extends' entries must be strings")
        if not entry.startswith("."):
            logger.debug("Skipping package-based tsconfig extends %r", entry)
            continue
        target = (config_file.parent / entry).resolve()
        if target.suffix != ".json":
            target = target.with_name(target.name + ".json")
        if not target.exists():
            raise SourceParseError(config_file, f"extended config {entry!r} does not exist")
        targets.append(target)
    return targets


def read_jsonc(path: Path) -> Any:
    """Parse a JSON file that may contain comments and trailing commas."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceParseError(path, str(exc)) from exc
    if not text.strip():
        return {}
    try:
        return json5.loads(text)
    except ValueError as exc:
        raise SourceParseError(path, f"invalid JSON ({exc})") from exc


def _match_pattern(pattern: str, specifier: str) -> Optional[str]:
    if "*" not in pattern:
        return "" if pattern == specifier else None
    prefix, _, suffix = pattern.partition("*")
    if (
        specifier.startswith(prefix)
        and specifier.endswith(suffix)
        and len(specifier) >= len(prefix) + len(suffix)
    ):
        return specifier[len(prefix) : len(specifier) - len(suffix)]
    return None


def _find_module_file(candidate: Path) -> Optional[Path]:
    """Apply TypeScript's extension and index-file lookup to a module path."""
    stems = [candidate]
    if candidate.suffix in _JS_EXTENSIONS:
        stems.insert(0, candidate.with_suffix(""))
    for stem in stems:
        if stem.suffix in _SOURCE_EXTENSIONS and stem.is_file():
            return stem.resolve()
        for extension in _SOURCE_EXTENSIONS:
            file_candidate = stem.with_name(stem.name + extension)
            if file_candidate.is_file():
                return file_candidate.resolve()
        if stem.is_dir():
            for extension in _SOURCE_EXTENSIONS:
                index_file = stem / f"index{extension}"
                if index_file.is_file():
                    return index_file.resolve()
    return None


__all__ = ["ProjectConfig", "TSCONFIG_FILENAME", "load_project_config", "read_jsonc"]
