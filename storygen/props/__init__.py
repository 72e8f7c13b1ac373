"""Props extraction: find a component's props declaration and mock its values."""

from .errors import (
    DeclarationNotFoundError,
    NoDefaultExportError,
    PropsExtractionError,
    SourceNotFoundError,
    SourceParseError,
    UnresolvableParameterTypeError,
)
from .extractor import extract_default_mocks
from .loader import ResolutionContext, SourceLoader
from .mocks import MockSynthesizer
from .resolver import PropsDeclarationResolver
from .source import SourceUnit

__all__ = [
    "DeclarationNotFoundError",
    "MockSynthesizer",
    "NoDefaultExportError",
    "PropsDeclarationResolver",
    "PropsExtractionError",
    "ResolutionContext",
    "SourceLoader",
    "SourceNotFoundError",
    "SourceParseError",
    "SourceUnit",
    "UnresolvableParameterTypeError",
    "extract_default_mocks",
]
