"""Ruby engine/version declaration parsing and catalog matching."""

from .catalog import VersionCatalog
from .errors import (
    ConfigurationError,
    DeclarationFileNotFoundError,
    MalformedDeclarationError,
    ResolutionError,
    UnknownEngineError,
    UnknownVersionError,
)
from .matcher import VersionMatcher
from .models import DeclarationInputs, DeclarationSource, ResolutionResult, VersionSpec
from .parser import classify_version, parse_declaration

__all__ = [
    "VersionCatalog",
    "VersionMatcher",
    "DeclarationInputs",
    "DeclarationSource",
    "ResolutionResult",
    "VersionSpec",
    "classify_version",
    "parse_declaration",
    "ResolutionError",
    "ConfigurationError",
    "MalformedDeclarationError",
    "DeclarationFileNotFoundError",
    "UnknownEngineError",
    "UnknownVersionError",
]
