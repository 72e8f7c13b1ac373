"""Builds the Storybook generation prompt from a component and its mock props."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

from jinja2 import Environment, FileSystemLoader

from ..logging import get_logger
from ..models import MockMapping
from ..props.errors import SourceNotFoundError, SourceParseError

logger = get_logger("prompting")

STORY_TEMPLATE = "story.j2"
_COMPONENT_SUFFIXES = (".stories.tsx", ".tsx", ".jsx", ".ts", ".js")


@dataclass
class StoryPrompt:
    """A rendered prompt plus the facts it was built from."""

    component_name: str
    text: str
    mocks: MockMapping = field(default_factory=dict)
    metadata: Dict[str, object] = field(default_factory=dict)


class StoryPromptBuilder:
    """Renders ``story.j2`` from a custom templates directory or the packaged one."""

    def __init__(
        self,
        templates_dir: Path | None = None,
        *,
        title_prefix: str = "Components",
    ) -> None:
        self.templates_dir = templates_dir
        self.title_prefix = title_prefix.strip("/") or "Components"
        self._env = self._create_env(templates_dir)

    def build(self, component_path: Path | str, mocks: MockMapping) -> StoryPrompt:
        path = Path(component_path)
        component_code = _read_component(path)
        name = component_name(path)
        mocks_json = json.dumps(mocks, indent=2)
        text = self._env.get_template(STORY_TEMPLATE).render(
            component_name=name,
            title=f"{self.title_prefix}/{name}",
            component_code=component_code,
            mocks=mocks,
            mocks_json=mocks_json,
        )
        logger.debug("Rendered story prompt for %s (%d chars)", name, len(text))
        return StoryPrompt(
            component_name=name,
            text=text.strip() + "\n",
            mocks=dict(mocks),
            metadata={"component_path": str(path), "mock_count": len(mocks)},
        )

    @staticmethod
    def _create_env(templates_dir: Path | None) -> Environment:
        directories: List[str] = []
        if templates_dir:
            directories.append(str(templates_dir))
        default_dir = str(Path(__file__).with_name("templates"))
        if default_dir not in directories:
            directories.append(default_dir)
        loader = FileSystemLoader(directories)
        return Environment(loader=loader, autoescape=False, trim_blocks=True, lstrip_blocks=True)


def component_name(path: Path) -> str:
    """``src/Button.tsx`` -> ``Button``."""
    name = path.name
    for suffix in _COMPONENT_SUFFIXES:
        if name.endswith(suffix):
            return name[: -len(suffix)]
    return path.stem


def _read_component(path: Path) -> str:
    if not path.is_file():
        raise SourceNotFoundError(path)
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise SourceParseError(path, "file is not valid UTF-8") from exc


__all__ = ["STORY_TEMPLATE", "StoryPrompt", "StoryPromptBuilder", "component_name"]
