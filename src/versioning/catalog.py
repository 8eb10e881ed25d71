"""Catalogs of available engine versions, keyed by platform and engine.

A catalog file is YAML or JSON (chosen by extension)::

    ruby: ["2.7.8", "3.0.6", "3.1.4", "head"]
    jruby: ["9.4.2.0"]
    platforms:
      windows-2022:
        ruby: ["3.1.4", "3.2.2", "mingw", "ucrt"]

Entries under ``platforms.<name>`` override top-level engines for that
platform. Lists are kept in file order, oldest first.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Mapping, Optional

import semantic_version
import yaml

from .classifiers import is_stable_version
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

PLATFORMS_KEY = "platforms"


def _validate_engines(data: Mapping[str, Any], where: str) -> Dict[str, List[str]]:
    """Return a copy of an engine -> versions mapping, rejecting bad shapes."""
    engines: Dict[str, List[str]] = {}
    for engine, versions in data.items():
        if not isinstance(versions, list):
            raise ConfigurationError(f"Catalog entry {where}{engine} must be a list of versions")
        for version in versions:
            # Unquoted YAML numbers lose digits (3.10 -> 3.1), so only strings are accepted.
            if not isinstance(version, str):
                raise ConfigurationError(
                    f"Catalog entry {where}{engine} has non-string version {version!r}; quote it"
                )
        engines[str(engine)] = list(versions)
    return engines


def _warn_if_unordered(engine: str, versions: List[str], where: str) -> None:
    """Log a warning when stable versions are not listed oldest first."""
    previous = None
    for version in versions:
        if not is_stable_version(version):
            continue
        try:
            current = semantic_version.Version.coerce(version)
        except ValueError:
            continue
        if previous is not None and current < previous:
            logger.warning(
                "Catalog for %s%s is not ordered oldest first near %s; using file order",
                where,
                engine,
                version,
            )
            return
        previous = current


class VersionCatalog:
    """Lookup of available versions per (platform, engine)."""

    def __init__(
        self,
        engines: Optional[Mapping[str, List[str]]] = None,
        platforms: Optional[Mapping[str, Mapping[str, List[str]]]] = None,
    ):
        self.engines = _validate_engines(engines or {}, "")
        self.platforms = {
            str(name): _validate_engines(section, f"{PLATFORMS_KEY}.{name}.")
            for name, section in (platforms or {}).items()
        }
        for engine, versions in self.engines.items():
            _warn_if_unordered(engine, versions, "")
        for name, section in self.platforms.items():
            for engine, versions in section.items():
                _warn_if_unordered(engine, versions, f"{name}/")

    @classmethod
    def from_mapping(cls, data: Any) -> "VersionCatalog":
        """Build a catalog from parsed file content.

        Raises:
            ConfigurationError: if ``data`` does not have the catalog shape.
        """
        if not isinstance(data, dict):
            raise ConfigurationError("Catalog must be a mapping of engine names to version lists")
        engines = {k: v for k, v in data.items() if k != PLATFORMS_KEY}
        platforms = data.get(PLATFORMS_KEY) or {}
        if not isinstance(platforms, dict) or not all(isinstance(s, dict) for s in platforms.values()):
            raise ConfigurationError(f"Catalog '{PLATFORMS_KEY}' must map platform names to engine mappings")
        return cls(engines, platforms)

    @classmethod
    def from_file(cls, path: str) -> "VersionCatalog":
        """Load a catalog from a YAML or JSON file.

        Raises:
            ConfigurationError: if the file is missing or cannot be parsed.
        """
        try:
            with open(path, "r", encoding="utf-8") as fh:
                if path.lower().endswith(".json"):
                    data = json.load(fh)
                else:
                    data = yaml.safe_load(fh)
        except FileNotFoundError as e:
            raise ConfigurationError(f"Catalog file not found: {path}") from e
        except (json.JSONDecodeError, yaml.YAMLError, UnicodeDecodeError) as e:
            raise ConfigurationError(f"Failed to parse catalog {path}: {e}") from e
        logger.debug("Loaded catalog from %s", path)
        return cls.from_mapping(data)

    def get_available_versions(self, platform: str, engine: str) -> Optional[List[str]]:
        """Return the versions of ``engine`` on ``platform``, or None if unsupported."""
        section = self.platforms.get(platform, {})
        if engine in section:
            return list(section[engine])
        if engine in self.engines:
            return list(self.engines[engine])
        return None
