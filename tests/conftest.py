from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from tests._fixtures.project_builder import ProjectBuilder


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> ProjectBuilder:
    """Provide a project builder and make its root the working directory."""
    builder = ProjectBuilder(tmp_path)
    monkeypatch.chdir(builder.path())
    return builder


@pytest.fixture(autouse=True)
def _reset_storygen_logger() -> Iterator[None]:
    """Undo configure_logging so caplog keeps seeing storygen records."""
    yield
    logger = logging.getLogger("storygen")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
