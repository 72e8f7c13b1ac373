"""Core data models shared across storygen components."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Union

MockValue = Union[str, int, bool, None]
MockMapping = Dict[str, MockValue]


class TypeKind(str, Enum):
    """Closed classification of a property's type used to choose a mock."""

    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"
    RENDERABLE = "renderable"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class PropertyDescriptor:
    """A single component prop: its name and type as written in the source."""

    name: str
    type_text: str
    kind: Optional[TypeKind] = None


@dataclass(frozen=True)
class PropsInfo:
    """Answers gathered from the user about where the props declaration lives."""

    file_path: Optional[str]
    declaration_name: Optional[str]
