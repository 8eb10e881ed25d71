"""Data models for version declarations and resolution."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from constants import Constants


class DeclarationSource(Enum):
    """Where a version declaration was read from."""
    EXPLICIT = "explicit"
    LOCKFILE = "lockfile"
    RUBY_VERSION_FILE = "ruby-version-file"
    TOOL_VERSIONS_FILE = "tool-versions-file"


@dataclass(frozen=True)
class VersionSpec:
    """Parsed (engine, version prefix) pair; an empty prefix means latest stable."""
    engine: str
    version_prefix: str


@dataclass
class DeclarationInputs:
    """Everything the declaration parser needs, passed explicitly."""
    ruby_version: str = Constants.DEFAULT_VERSION_INPUT
    version_file: Optional[str] = Constants.DEFAULT_VERSION_FILE
    version_file_explicit: bool = False
    working_directory: str = Constants.DEFAULT_WORKING_DIRECTORY
    legacy_lockfile_pattern: bool = False


@dataclass
class ResolutionResult:
    """Resolution outcome handed to the installer collaborator and outputs."""
    platform: str
    engine: str
    version: str
    requested: str
    source: DeclarationSource

    def to_dict(self) -> dict:
        """Return a JSON-serializable mapping."""
        return {
            "platform": self.platform,
            "engine": self.engine,
            "version": self.version,
            "requested": self.requested,
            "source": self.source.value,
        }
