"""Tests for the FastAPI service mode."""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from storygen.config import ProjectSettings, PromptSettings, StoryGenConfig
from storygen.props import SourceNotFoundError, SourceParseError
from storygen.service import create_app


class _StubExtractor:
    def __init__(self) -> None:
        self.calls: list[dict[str, object]] = []

    def __call__(  # type: ignore[no-untyped-def]
        self, component_path, declaration_file_path=None, declaration_name=None, *, project_root=None, tsconfig_path=None
    ):
        self.calls.append(
            {
                "component_path": component_path,
                "declaration_file_path": declaration_file_path,
                "declaration_name": declaration_name,
                "project_root": project_root,
                "tsconfig_path": tsconfig_path,
            }
        )
        if component_path.endswith("Missing.tsx"):
            raise SourceNotFoundError(Path(component_path))
        if component_path.endswith("Broken.tsx"):
            raise SourceParseError(Path(component_path), "syntax error at line 1, column 1")
        return {"label": "Sample text", "count": 0, "on": False, "extra": None}


@pytest.fixture
def extractor() -> _StubExtractor:
    return _StubExtractor()


@pytest.fixture
def client(extractor: _StubExtractor) -> TestClient:
    return TestClient(create_app(extractor))


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_mocks_endpoint(client: TestClient, extractor: _StubExtractor) -> None:
    response = client.post(
        "/mocks",
        json={"component_path": "src/Button.tsx", "declaration_name": "ButtonProps"},
    )

    assert response.status_code == 200
    assert response.json() == {"mocks": {"label": "Sample text", "count": 0, "on": False, "extra": None}}
    assert extractor.calls == [
        {
            "component_path": "src/Button.tsx",
            "declaration_file_path": None,
            "declaration_name": "ButtonProps",
            "project_root": None,
            "tsconfig_path": None,
        }
    ]


def test_prompt_endpoint(client: TestClient, tmp_path: Path) -> None:
    component = tmp_path / "Button.tsx"
    component.write_text("export default function Button() { return null; }\n", encoding="utf-8")

    response = client.post("/prompt", json={"component_path": str(component)})

    assert response.status_code == 200
    data = response.json()
    assert data["component_name"] == "Button"
    assert '"label": "Sample text"' in data["prompt"]
    assert data["mocks"]["on"] is False


def test_missing_component_maps_to_404(client: TestClient) -> None:
    response = client.post("/mocks", json={"component_path": "src/Missing.tsx"})

    assert response.status_code == 404
    assert "Missing.tsx" in response.json()["detail"]


def test_parse_error_maps_to_422(client: TestClient) -> None:
    response = client.post("/mocks", json={"component_path": "src/Broken.tsx"})

    assert response.status_code == 422
    assert "syntax error" in response.json()["detail"]


def test_service_uses_loaded_config(extractor: _StubExtractor, tmp_path: Path) -> None:
    component = tmp_path / "Card.tsx"
    component.write_text("export default function Card() { return null; }\n", encoding="utf-8")
    config = StoryGenConfig(
        root=tmp_path,
        project=ProjectSettings(root=tmp_path / "web", tsconfig=tmp_path / "web" / "tsconfig.app.json"),
        prompt=PromptSettings(title_prefix="Library"),
    )
    client = TestClient(create_app(extractor, config=config))

    response = client.post("/prompt", json={"component_path": str(component)})
    client.post("/mocks", json={"component_path": str(component), "project_root": "other"})

    assert response.status_code == 200
    assert "Library/Card" in response.json()["prompt"]
    assert extractor.calls[0]["project_root"] == tmp_path / "web"
    assert extractor.calls[0]["tsconfig_path"] == tmp_path / "web" / "tsconfig.app.json"
    assert extractor.calls[1]["project_root"] == "other"
    assert extractor.calls[1]["tsconfig_path"] is None
