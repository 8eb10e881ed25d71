"""Errors raised while resolving a Ruby engine and version."""

from typing import List, Optional


class ResolutionError(Exception):
    """Base class for every resolution failure."""


class ConfigurationError(ResolutionError):
    """No declaration source could be determined, or configuration is invalid."""


class MalformedDeclarationError(ResolutionError):
    """A declaration file exists but holds no recognizable version."""


class DeclarationFileNotFoundError(ResolutionError, FileNotFoundError):
    """An explicitly selected declaration file does not exist."""


class UnknownEngineError(ResolutionError):
    """The catalog lookup for (platform, engine) returned nothing."""

    def __init__(self, engine: str, platform: str):
        self.engine = engine
        self.platform = platform
        super().__init__(f"Unknown engine {engine} on {platform}")


class UnknownVersionError(ResolutionError):
    """No catalog entry satisfies the requested version."""

    def __init__(self, engine: str, requested: str, available: List[str], platform: Optional[str] = None):
        self.engine = engine
        self.requested = requested
        self.available = list(available)
        self.platform = platform
        where = f"{engine} on {platform}" if platform else engine
        super().__init__(
            f"Unknown version {requested} for {where}\n"
            f"available versions for {where}: {', '.join(self.available)}"
        )
