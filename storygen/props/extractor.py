"""Entry point composing loading, declaration resolution and mock synthesis."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..logging import get_logger
from ..models import MockMapping
from .loader import SourceLoader
from .mocks import MockSynthesizer
from .resolver import PropsDeclarationResolver

logger = get_logger("props")


def extract_default_mocks(
    component_path: Path | str,
    declaration_file_path: Path | str | None = None,
    declaration_name: Optional[str] = None,
    *,
    project_root: Path | str | None = None,
    tsconfig_path: Path | str | None = None,
) -> MockMapping:
    """Return ``{prop name: mock value}`` for a component's props declaration.

    The declaration is read from ``declaration_file_path`` when given, otherwise
    from the component file. Without ``declaration_name`` the props type is
    inferred from the default-exported component's first parameter.

    Missing or unparsable files raise; a declaration that cannot be found only
    logs a warning and yields an empty mapping.
    """
    target = Path(declaration_file_path) if declaration_file_path else Path(component_path)
    loader = SourceLoader(project_root, tsconfig_path=tsconfig_path)
    with loader.open() as context:
        unit = context.load(target)
        descriptors = PropsDeclarationResolver(context).resolve(unit, declaration_name or None)
    mocks = MockSynthesizer().synthesize(descriptors)
    logger.debug("Synthesized %d mock values from %s", len(mocks), target)
    return mocks


__all__ = ["extract_default_mocks"]
