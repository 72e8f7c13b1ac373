"""Tests for props declaration resolution."""

from __future__ import annotations

import logging

import pytest

from storygen.models import PropertyDescriptor, TypeKind
from storygen.props.loader import SourceLoader
from storygen.props.resolver import PropsDeclarationResolver
from tests._fixtures.project_builder import ProjectBuilder


def _resolve(project: ProjectBuilder, filename: str, name: str | None = None) -> list[PropertyDescriptor]:
    with SourceLoader(project.path()).open() as context:
        unit = context.load(filename)
        return PropsDeclarationResolver(context).resolve(unit, name)


def _kinds(properties: list[PropertyDescriptor]) -> dict[str, TypeKind | None]:
    return {prop.name: prop.kind for prop in properties}


def test_explicit_interface_lists_properties_in_order(project: ProjectBuilder) -> None:
    project.write(
        {
            "Button.tsx": """
            import React from 'react';
            interface CustomShape { id: number }
            export interface ButtonProps {
              label: string;
              count?: number;
              disabled: boolean;
              children: React.ReactNode;
              shape: CustomShape;
              onClick(event: MouseEvent): void;
            }
            """
        }
    )

    properties = _resolve(project, "Button.tsx", "ButtonProps")

    assert [prop.name for prop in properties] == [
        "label",
        "count",
        "disabled",
        "children",
        "shape",
        "onClick",
    ]
    assert _kinds(properties) == {
        "label": TypeKind.TEXT,
        "count": TypeKind.NUMBER,
        "disabled": TypeKind.BOOLEAN,
        "children": TypeKind.RENDERABLE,
        "shape": TypeKind.UNKNOWN,
        "onClick": TypeKind.UNKNOWN,
    }
    assert properties[1].type_text == "number"
    assert properties[5].type_text == "(event: MouseEvent) => void"


def test_type_alias_object_shape_matches_interface(project: ProjectBuilder) -> None:
    project.write(
        {
            "shapes.ts": """
            export interface AsInterface { a: string; b: number }
            export type AsAlias = { a: string; b: number };
            """
        }
    )

    assert _resolve(project, "shapes.ts", "AsInterface") == _resolve(project, "shapes.ts", "AsAlias")


def test_explicit_mode_never_consults_default_export(project: ProjectBuilder, caplog) -> None:
    project.write(
        {
            "Card.tsx": """
            interface CardProps { title: string }
            interface OtherProps { flag: boolean }
            export default function Card(props: CardProps) { return null; }
            """
        }
    )

    assert _kinds(_resolve(project, "Card.tsx", "OtherProps")) == {"flag": TypeKind.BOOLEAN}

    with caplog.at_level(logging.WARNING, logger="storygen"):
        assert _resolve(project, "Card.tsx", "Missing") == []
    assert 'Interface or type "Missing" not found.' in caplog.text


def test_auto_detect_uses_first_parameter_type(project: ProjectBuilder) -> None:
    project.write(
        {
            "Card.tsx": """
            type Props = { title: string; count: number };
            const Card = ({ title }: Props, ref: unknown) => <h2>{title}</h2>;
            export default Card;
            """
        }
    )

    assert [prop.name for prop in _resolve(project, "Card.tsx")] == ["title", "count"]


@pytest.mark.parametrize(
    ("source", "message"),
    [
        ("export interface Props { a: string }\n", "no default export"),
        ("export default function Card() { return null; }\n", "takes no parameters"),
        ("const x = 1;\nexport default x;\n", "not a function"),
        ("export default function Card(props) { return null; }\n", "no type annotation"),
    ],
)
def test_auto_detect_failures_are_not_fatal(
    project: ProjectBuilder, caplog, source: str, message: str
) -> None:
    project.write({"Card.tsx": source})

    with caplog.at_level(logging.WARNING, logger="storygen"):
        assert _resolve(project, "Card.tsx") == []

    assert message in caplog.text


def test_auto_detected_type_missing_from_unit_is_not_fatal(project: ProjectBuilder, caplog) -> None:
    project.write(
        {
            "types.ts": "export interface CardProps { title: string }\n",
            "Card.tsx": """
            import { CardProps } from './types';
            export default function Card(props: CardProps) { return null; }
            """,
        }
    )

    with caplog.at_level(logging.WARNING, logger="storygen"):
        assert _resolve(project, "Card.tsx") == []

    assert 'Auto-detected props type "CardProps" not found' in caplog.text


def test_empty_declaration_yields_empty_list(project: ProjectBuilder) -> None:
    project.write({"Empty.ts": "export interface EmptyProps {}\nexport type Nothing = {};\n"})

    assert _resolve(project, "Empty.ts", "EmptyProps") == []
    assert _resolve(project, "Empty.ts", "Nothing") == []


def test_interface_inherits_members_from_local_and_imported_bases(project: ProjectBuilder) -> None:
    project.write(
        {
            "tsconfig.json": '{ "compilerOptions": { "baseUrl": ".", "paths": { "@/*": ["src/*"] } } }',
            "src/base.ts": """
            export interface Identified { id: string; label: number }
            """,
            "src/Button.tsx": """
            import { Identified } from '@/base';
            interface Toggle { on: boolean }
            export interface ButtonProps extends Identified, Toggle {
              label: string;
            }
            """,
        }
    )

    properties = _resolve(project, "src/Button.tsx", "ButtonProps")

    assert _kinds(properties) == {
        "label": TypeKind.TEXT,
        "id": TypeKind.TEXT,
        "on": TypeKind.BOOLEAN,
    }


def test_merged_interfaces_and_intersections(project: ProjectBuilder) -> None:
    project.write(
        {
            "props.ts": """
            interface Base { a: string }
            interface Base { b: number }
            type Extra = { c: boolean };
            export type Props = Base & Extra & { d: string };
            """
        }
    )

    assert [prop.name for prop in _resolve(project, "props.ts", "Props")] == ["a", "b", "c", "d"]


def test_alias_wrappers_and_children(project: ProjectBuilder) -> None:
    project.write(
        {
            "props.tsx": """
            import React from 'react';
            interface Base { title: string }
            export type Frozen = Readonly<Base>;
            export type WithChildren = React.PropsWithChildren<Base>;
            """
        }
    )

    assert _kinds(_resolve(project, "props.tsx", "Frozen")) == {"title": TypeKind.TEXT}
    assert _kinds(_resolve(project, "props.tsx", "WithChildren")) == {
        "title": TypeKind.TEXT,
        "children": TypeKind.RENDERABLE,
    }


def test_pick_and_omit_filter_base_members(project: ProjectBuilder) -> None:
    project.write(
        {
            "props.ts": """
            interface Base { id: string; title: string; count: number }
            export type WithoutId = Omit<Base, 'id'>;
            export type Summary = Pick<Base, "title" | "count">;
            export interface Card extends Pick<Base, 'title'> { visible: boolean }
            export type Mixed = Omit<Base, 'id' | 'count'> & { extra: number };
            """
        }
    )

    assert _kinds(_resolve(project, "props.ts", "WithoutId")) == {
        "title": TypeKind.TEXT,
        "count": TypeKind.NUMBER,
    }
    assert [prop.name for prop in _resolve(project, "props.ts", "Summary")] == ["title", "count"]
    assert _kinds(_resolve(project, "props.ts", "Card")) == {
        "visible": TypeKind.BOOLEAN,
        "title": TypeKind.TEXT,
    }
    assert _kinds(_resolve(project, "props.ts", "Mixed")) == {
        "title": TypeKind.TEXT,
        "extra": TypeKind.NUMBER,
    }


def test_primitive_aliases_and_react_imports_drive_kinds(project: ProjectBuilder) -> None:
    project.write(
        {
            "props.tsx": """
            import type { ReactNode as Node } from 'react';
            type Label = string;
            type Caption = Label;
            export interface Props {
              caption: Caption;
              icon: Node | null;
              maybe: string | undefined;
            }
            """
        }
    )

    assert _kinds(_resolve(project, "props.tsx", "Props")) == {
        "caption": TypeKind.TEXT,
        "icon": TypeKind.RENDERABLE,
        "maybe": TypeKind.UNKNOWN,
    }


def test_circular_bases_terminate(project: ProjectBuilder) -> None:
    project.write(
        {
            "loop.ts": """
            interface A extends B { a: string }
            interface B extends A { b: number }
            """
        }
    )

    assert [prop.name for prop in _resolve(project, "loop.ts", "A")] == ["a", "b"]


def test_resolver_without_context_skips_imported_bases(project: ProjectBuilder) -> None:
    project.write(
        {
            "base.ts": "export interface Base { id: string }\n",
            "Props.ts": """
            import { Base } from './base';
            export interface Props extends Base { own: number }
            """,
        }
    )

    unit = SourceLoader(project.path()).load("Props.ts")

    assert [prop.name for prop in PropsDeclarationResolver().resolve(unit, "Props")] == ["own"]
