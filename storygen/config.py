"""Configuration loading for storygen (.storygen.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

CONFIG_FILENAME = ".storygen.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ProjectSettings:
    """Where the TypeScript project lives and which tsconfig resolves it."""

    root: Path
    tsconfig: Optional[Path] = None


@dataclass
class PromptSettings:
    """Story prompt rendering options."""

    templates_dir: Optional[Path] = None
    title_prefix: str = "Components"


@dataclass
class ServiceSettings:
    host: str = "127.0.0.1"
    port: int = 8000


@dataclass
class StoryGenConfig:
    """Represents the settings defined in .storygen.yml."""

    root: Path
    project: ProjectSettings
    prompt: PromptSettings = field(default_factory=PromptSettings)
    service: ServiceSettings = field(default_factory=ServiceSettings)


def load_config(config_path: Path) -> StoryGenConfig:
    """Load configuration from a file or from the directory that contains it."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return StoryGenConfig(root=root, project=ProjectSettings(root=root))

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    project_data = _as_dict(data.get("project"))
    project_root_str = _as_str(project_data.get("root"))
    project_root = (root / project_root_str).resolve() if project_root_str else root
    tsconfig_str = _as_str(project_data.get("tsconfig"))
    project = ProjectSettings(
        root=project_root,
        tsconfig=project_root / tsconfig_str if tsconfig_str else None,
    )

    prompt_data = _as_dict(data.get("prompt"))
    prompt = PromptSettings()
    templates_dir_str = _as_str(prompt_data.get("templates_dir"))
    if templates_dir_str:
        prompt.templates_dir = root / templates_dir_str
    title_prefix = _as_str(prompt_data.get("title_prefix"))
    if title_prefix:
        prompt.title_prefix = title_prefix

    service_data = _as_dict(data.get("service"))
    service = ServiceSettings()
    host = _as_str(service_data.get("host"))
    if host:
        service.host = host
    if "port" in service_data:
        port = _as_int(service_data.get("port"))
        if port is None or not 0 < port < 65536:
            raise ConfigError(f"service.port must be an integer between 1 and 65535, got {service_data.get('port')!r}")
        service.port = port

    return StoryGenConfig(root=root, project=project, prompt=prompt, service=service)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "ProjectSettings",
    "PromptSettings",
    "ServiceSettings",
    "StoryGenConfig",
    "load_config",
]
