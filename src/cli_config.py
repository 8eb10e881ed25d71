"""CLI configuration: merge CLI arguments, the config file and defaults.

Precedence, highest first:
1. CLI arguments
2. Config file (explicit --config, or .rubyresolve.yml in the working directory)
3. Built-in defaults from Constants
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Optional

import yaml

from constants import Constants
from versioning.errors import ConfigurationError
from versioning.models import DeclarationInputs

logger = logging.getLogger(__name__)

# Config file keys mirror the long CLI option names.
CONFIG_KEYS = {
    "ruby-version": "RUBY_VERSION",
    "ruby-version-file": "RUBY_VERSION_FILE",
    "working-directory": "WORKING_DIRECTORY",
    "catalog": "CATALOG",
    "platform": "PLATFORM",
    "legacy-lockfile-pattern": "LEGACY_LOCKFILE_PATTERN",
}
BOOL_KEYS = {"legacy-lockfile-pattern"}


def _read_config_file(path: str) -> Any:
    with open(path, "r", encoding="utf-8") as fh:
        if path.lower().endswith(".json"):
            return json.load(fh)
        return yaml.safe_load(fh)


def load_config(path: Optional[str], working_directory: str = Constants.DEFAULT_WORKING_DIRECTORY) -> Dict[str, Any]:
    """Load the config mapping.

    An explicit ``path`` must exist; the default location is skipped when absent.

    Raises:
        ConfigurationError: explicit file missing, unparsable, or not a mapping.
    """
    explicit = bool(path)
    if not explicit:
        path = os.path.join(working_directory, Constants.CONFIG_FILE)
        if not os.path.isfile(path):
            return {}

    try:
        data = _read_config_file(path)
    except FileNotFoundError as e:
        raise ConfigurationError(f"Config file not found: {path}") from e
    except (json.JSONDecodeError, yaml.YAMLError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Failed to load config {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")

    unknown = sorted(set(data) - set(CONFIG_KEYS))
    if unknown:
        logger.warning("Ignoring unknown config keys in %s: %s", path, ", ".join(unknown))
    for key, value in data.items():
        if key not in CONFIG_KEYS or value is None:
            continue
        expected = bool if key in BOOL_KEYS else str
        if not isinstance(value, expected):
            raise ConfigurationError(
                f"Config key {key} in {path} must be a {expected.__name__}, got {value!r}; "
                "quote version numbers"
            )
    logger.debug("Loaded config from %s", path)
    return {CONFIG_KEYS[k]: v for k, v in data.items() if k in CONFIG_KEYS}


def get_setting(args, config: Dict[str, Any], name: str, default: Any = None) -> Any:
    """Return a setting by precedence: CLI, then config, then ``default``."""
    value = getattr(args, name, None)
    if value is not None:
        return value
    if name in config and config[name] is not None:
        return config[name]
    return default


def build_inputs(args, config: Dict[str, Any]) -> DeclarationInputs:
    """Build DeclarationInputs from parsed CLI args and the loaded config."""
    ruby_version = get_setting(args, config, "RUBY_VERSION", Constants.DEFAULT_VERSION_INPUT)
    ruby_version = str(ruby_version).strip() or Constants.DEFAULT_VERSION_INPUT

    configured_file = get_setting(args, config, "RUBY_VERSION_FILE")
    if configured_file is None:
        version_file: Optional[str] = Constants.DEFAULT_VERSION_FILE
        version_file_explicit = False
    else:
        # An empty value turns lock-file reading off.
        version_file = str(configured_file).strip() or None
        version_file_explicit = version_file is not None

    return DeclarationInputs(
        ruby_version=ruby_version,
        version_file=version_file,
        version_file_explicit=version_file_explicit,
        working_directory=str(
            get_setting(args, config, "WORKING_DIRECTORY", Constants.DEFAULT_WORKING_DIRECTORY)
        ),
        legacy_lockfile_pattern=get_setting(args, config, "LEGACY_LOCKFILE_PATTERN", False) is True,
    )
