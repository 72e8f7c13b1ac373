"""FastAPI application entrypoint for storygen service mode."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import uvicorn
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import PromptSettings, StoryGenConfig
from ..models import MockMapping
from ..prompting import StoryPromptBuilder
from ..props import SourceNotFoundError, SourceParseError, extract_default_mocks

MocksExtractor = Callable[..., MockMapping]


class MocksRequest(BaseModel):
    component_path: str
    declaration_file_path: Optional[str] = None
    declaration_name: Optional[str] = None
    project_root: Optional[str] = None


class MocksResponse(BaseModel):
    mocks: Dict[str, Any]


class PromptResponse(BaseModel):
    component_name: str
    prompt: str
    mocks: Dict[str, Any]


class HealthResponse(BaseModel):
    status: str


def create_app(
    extractor: MocksExtractor = extract_default_mocks,
    prompt_builder_factory: Optional[Callable[[], StoryPromptBuilder]] = None,
    config: Optional[StoryGenConfig] = None,
) -> FastAPI:
    """Create the FastAPI application exposing storygen operations.

    ``config`` supplies the default project root, tsconfig and prompt settings;
    a request's own ``project_root`` overrides the project defaults.
    """

    app = FastAPI(title="StoryGen Service", version="1.0.0")
    prompt_settings = config.prompt if config is not None else PromptSettings()

    def _default_builder() -> StoryPromptBuilder:
        return StoryPromptBuilder(prompt_settings.templates_dir, title_prefix=prompt_settings.title_prefix)

    builder_factory = prompt_builder_factory or _default_builder

    async def _offload(func: Callable[[], Any]) -> Any:
        # Parsing is blocking; keep it off the event loop.
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, func)

    def _extract(payload: MocksRequest) -> MockMapping:
        project_root: Optional[Path | str] = payload.project_root
        tsconfig_path: Optional[Path] = None
        if project_root is None and config is not None:
            project_root = config.project.root
            tsconfig_path = config.project.tsconfig
        return extractor(
            payload.component_path,
            payload.declaration_file_path,
            payload.declaration_name,
            project_root=project_root,
            tsconfig_path=tsconfig_path,
        )

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/mocks", response_model=MocksResponse)
    async def mocks(payload: MocksRequest) -> MocksResponse:
        result = await _offload(lambda: _extract(payload))
        return MocksResponse(mocks=result)

    @app.post("/prompt", response_model=PromptResponse)
    async def prompt(payload: MocksRequest) -> PromptResponse:
        def _run() -> PromptResponse:
            mocks = _extract(payload)
            story_prompt = builder_factory().build(Path(payload.component_path), mocks)
            return PromptResponse(
                component_name=story_prompt.component_name,
                prompt=story_prompt.text,
                mocks=mocks,
            )

        return await _offload(_run)

    @app.exception_handler(SourceNotFoundError)
    async def source_not_found_handler(_: Any, exc: SourceNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(SourceParseError)
    async def source_parse_error_handler(_: Any, exc: SourceParseError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "127.0.0.1",
    port: int = 8000,
    config: Optional[StoryGenConfig] = None,
) -> None:  # pragma: no cover - integration path
    app = create_app(config=config)
    uvicorn.run(app, host=host, port=port)


__all__ = ["create_app", "run_service"]
