"""Error taxonomy for props extraction."""

from __future__ import annotations

from pathlib import Path


class PropsExtractionError(RuntimeError):
    """Base class for every failure raised while extracting component props."""


class SourceNotFoundError(PropsExtractionError, FileNotFoundError):
    """Raised when a source file (or the requested declaration file) is missing."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Source file not found: {path}")
        self.path = path


class SourceParseError(PropsExtractionError):
    """Raised when a source file or the project configuration cannot be parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Unable to parse {path}: {reason}")
        self.path = path
        self.reason = reason


class DeclarationNotFoundError(PropsExtractionError):
    """The named interface or type alias does not exist in the unit."""

    def __init__(self, name: str, *, auto_detected: bool = False) -> None:
        if auto_detected:
            message = (
                f'Auto-detected props type "{name}" not found as an interface or type alias.'
            )
        else:
            message = f'Interface or type "{name}" not found.'
        super().__init__(message)
        self.name = name
        self.auto_detected = auto_detected


class NoDefaultExportError(PropsExtractionError):
    """Auto-detection found no default export in the unit."""


class UnresolvableParameterTypeError(PropsExtractionError):
    """The default export is not a callable whose first parameter names a type."""


__all__ = [
    "DeclarationNotFoundError",
    "NoDefaultExportError",
    "PropsExtractionError",
    "SourceNotFoundError",
    "SourceParseError",
    "UnresolvableParameterTypeError",
]
