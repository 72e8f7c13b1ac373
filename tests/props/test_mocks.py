"""Tests for mock value synthesis."""

from __future__ import annotations

from storygen.models import PropertyDescriptor, TypeKind
from storygen.props.mocks import MockSynthesizer


def test_synthesize_maps_each_kind_to_its_placeholder() -> None:
    descriptors = [
        PropertyDescriptor("a", "string"),
        PropertyDescriptor("b", "number"),
        PropertyDescriptor("c", "boolean"),
        PropertyDescriptor("d", "React.ReactNode"),
        PropertyDescriptor("e", "CustomShape"),
    ]

    mocks = MockSynthesizer().synthesize(descriptors)

    assert mocks == {
        "a": "Sample text",
        "b": 0,
        "c": False,
        "d": "Sample node",
        "e": None,
    }
    assert mocks["c"] is False


def test_synthesize_prefers_precomputed_kind() -> None:
    descriptors = [
        PropertyDescriptor("label", "Label", kind=TypeKind.TEXT),
        PropertyDescriptor("icon", "string", kind=TypeKind.RENDERABLE),
    ]

    assert MockSynthesizer().synthesize(descriptors) == {
        "label": "Sample text",
        "icon": "Sample node",
    }


def test_composite_and_unparsable_types_become_null() -> None:
    descriptors = [
        PropertyDescriptor("items", "string[]"),
        PropertyDescriptor("variant", "'primary' | 'secondary'"),
        PropertyDescriptor("maybe", "string | undefined"),
        PropertyDescriptor("onClick", "() => void"),
        PropertyDescriptor("broken", "{{{"),
        PropertyDescriptor("empty", ""),
    ]

    mocks = MockSynthesizer().synthesize(descriptors)

    assert mocks == {name: None for name in mocks}
    assert list(mocks) == ["items", "variant", "maybe", "onClick", "broken", "empty"]


def test_synthesize_empty_input_returns_empty_mapping() -> None:
    assert MockSynthesizer().synthesize([]) == {}


def test_synthesize_preserves_input_order() -> None:
    descriptors = [PropertyDescriptor(name, "number") for name in ("z", "a", "m")]

    assert list(MockSynthesizer().synthesize(descriptors)) == ["z", "a", "m"]
