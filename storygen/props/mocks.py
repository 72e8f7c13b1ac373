"""Placeholder values for component props, chosen by type classification."""

from __future__ import annotations

from typing import Dict, Iterable, Mapping

from ..models import MockMapping, MockValue, PropertyDescriptor, TypeKind
from .types import classify_type_text

SAMPLE_TEXT = "Sample text"
SAMPLE_NUMBER = 0
SAMPLE_BOOLEAN = False
SAMPLE_NODE = "Sample node"

MOCK_VALUES: Mapping[TypeKind, MockValue] = {
    TypeKind.TEXT: SAMPLE_TEXT,
    TypeKind.NUMBER: SAMPLE_NUMBER,
    TypeKind.BOOLEAN: SAMPLE_BOOLEAN,
    TypeKind.RENDERABLE: SAMPLE_NODE,
    TypeKind.UNKNOWN: None,
}


class MockSynthesizer:
    """Maps property descriptors to mock literals; never raises on odd types."""

    def synthesize(self, descriptors: Iterable[PropertyDescriptor]) -> MockMapping:
        mocks: Dict[str, MockValue] = {}
        for descriptor in descriptors:
            mocks[descriptor.name] = self.mock_for(descriptor)
        return mocks

    @staticmethod
    def mock_for(descriptor: PropertyDescriptor) -> MockValue:
        kind = descriptor.kind
        if kind is None:
            kind = classify_type_text(descriptor.type_text)
        return MOCK_VALUES[kind]


__all__ = [
    "MOCK_VALUES",
    "MockSynthesizer",
    "SAMPLE_BOOLEAN",
    "SAMPLE_NODE",
    "SAMPLE_NUMBER",
    "SAMPLE_TEXT",
]
