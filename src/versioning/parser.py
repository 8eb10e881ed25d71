"""Declaration parsing: turn version inputs and files into a VersionSpec.

Sources are selected through an explicit precedence table; the first row
whose predicate holds wins:

1. an explicit ``ruby_version`` (anything but ``default``)
2. the lock-file header (``Gemfile.lock``)
3. ``.ruby-version``
4. ``.tool-versions``
"""

from __future__ import annotations

import logging
import os
import re
from typing import Callable, List, Optional, Tuple

from constants import Constants
from .classifiers import is_head_version, partition
from .errors import ConfigurationError, DeclarationFileNotFoundError, MalformedDeclarationError
from .models import DeclarationInputs, DeclarationSource, VersionSpec

logger = logging.getLogger(__name__)

_LINE_SPLIT_RE = re.compile(r"\r?\n")
_LEADING_DIGITS_RE = re.compile(r"^\d+")

# Explicit inputs naming a version file select that file directly.
_FILE_INPUTS = {
    Constants.RUBY_VERSION_FILE: DeclarationSource.RUBY_VERSION_FILE,
    Constants.TOOL_VERSIONS_FILE: DeclarationSource.TOOL_VERSIONS_FILE,
}


def _resolve_path(inputs: DeclarationInputs, name: str) -> str:
    return os.path.join(inputs.working_directory, name)


def _has_explicit_version(inputs: DeclarationInputs) -> bool:
    return inputs.ruby_version != Constants.DEFAULT_VERSION_INPUT


def _has_lockfile(inputs: DeclarationInputs) -> bool:
    if not inputs.version_file:
        return False
    # The default lock-file name is only consulted when present.
    if inputs.version_file_explicit:
        return True
    return os.path.isfile(_resolve_path(inputs, inputs.version_file))


def _has_ruby_version_file(inputs: DeclarationInputs) -> bool:
    return os.path.isfile(_resolve_path(inputs, Constants.RUBY_VERSION_FILE))


def _has_tool_versions_file(inputs: DeclarationInputs) -> bool:
    return os.path.isfile(_resolve_path(inputs, Constants.TOOL_VERSIONS_FILE))


SOURCE_PRECEDENCE: List[Tuple[Callable[[DeclarationInputs], bool], DeclarationSource]] = [
    (_has_explicit_version, DeclarationSource.EXPLICIT),
    (_has_lockfile, DeclarationSource.LOCKFILE),
    (_has_ruby_version_file, DeclarationSource.RUBY_VERSION_FILE),
    (_has_tool_versions_file, DeclarationSource.TOOL_VERSIONS_FILE),
]


def select_source(inputs: DeclarationInputs) -> DeclarationSource:
    """Pick the single declaration source to consult.

    Raises:
        ConfigurationError: when no row of the precedence table applies.
    """
    if _has_explicit_version(inputs) and inputs.version_file and inputs.version_file_explicit:
        logger.warning(
            "The ruby-version input is not `%s` and ruby-version-file input is specified, "
            "only ruby-version will be used",
            Constants.DEFAULT_VERSION_INPUT,
        )

    for predicate, source in SOURCE_PRECEDENCE:
        if predicate(inputs):
            if source == DeclarationSource.EXPLICIT:
                return _FILE_INPUTS.get(inputs.ruby_version, source)
            return source

    raise ConfigurationError(
        f"input ruby-version needs to be specified if no {Constants.RUBY_VERSION_FILE} "
        f"or {Constants.TOOL_VERSIONS_FILE} file exists"
    )


def read_declaration_file(path: str) -> str:
    """Read a declaration file as UTF-8 text.

    Raises:
        DeclarationFileNotFoundError: if ``path`` does not exist.
        MalformedDeclarationError: if ``path`` is not valid UTF-8.
    """
    try:
        with open(path, encoding="utf-8") as fh:
            return fh.read()
    except FileNotFoundError as e:
        raise DeclarationFileNotFoundError(f"Version file not found: {path}") from e
    except UnicodeDecodeError as e:
        raise MalformedDeclarationError(f"Version file {path} is not valid UTF-8: {e}") from e


def parse_lockfile_header(text: str, legacy_pattern: bool = False) -> str:
    """Extract the Ruby version from the ``RUBY VERSION`` section of a lock-file.

    The line following the marker must start with a digit; the first
    match of the version pattern on it is returned. ``legacy_pattern``
    switches to the historical ``\\d.\\d.\\d`` pattern.

    Raises:
        MalformedDeclarationError: marker missing or no usable version line.
    """
    lines = _LINE_SPLIT_RE.split(text)
    marker_index: Optional[int] = None
    for i, line in enumerate(lines):
        if line.strip() == Constants.LOCKFILE_MARKER:
            marker_index = i
            break
    if marker_index is None or marker_index + 1 >= len(lines):
        raise MalformedDeclarationError("no ruby version in lock-file")

    next_line = lines[marker_index + 1].strip()
    if not _LEADING_DIGITS_RE.match(next_line):
        raise MalformedDeclarationError("no ruby version in lock-file")

    pattern = Constants.LOCKFILE_VERSION_PATTERN_LEGACY if legacy_pattern else Constants.LOCKFILE_VERSION_PATTERN
    match = re.search(pattern, next_line)
    if not match:
        raise MalformedDeclarationError(f"no ruby version in lock-file line: {next_line}")
    return match.group(0)


def parse_ruby_version_file(text: str) -> str:
    """Return the trimmed content of a single-engine version file."""
    return text.strip()


def parse_tool_versions_file(text: str, tool: str = Constants.DEFAULT_ENGINE) -> str:
    """Return the version token of the first ``tool`` line in a multi-tool version file.

    Tokens after the version are ignored.

    Raises:
        MalformedDeclarationError: no line for ``tool``, or the line has no version.
    """
    for line in _LINE_SPLIT_RE.split(text):
        if not line or line[0].isspace():
            continue
        tokens = line.split()
        if tokens[0] != tool:
            continue
        if len(tokens) < 2:
            raise MalformedDeclarationError(f"no version for {tool} in {Constants.TOOL_VERSIONS_FILE}")
        return tokens[1]
    raise MalformedDeclarationError(f"no {tool} entry in {Constants.TOOL_VERSIONS_FILE}")


def classify_version(raw: str, is_head: Callable[[str], bool] = is_head_version) -> VersionSpec:
    """Split a raw declaration into engine and version prefix.

    ``3.1.2`` and head names map to the default engine, a bare ``jruby``
    requests the latest stable of that engine, and ``engine-X.Y`` splits on
    the first hyphen.

    Raises:
        MalformedDeclarationError: the declaration yields no engine name.
    """
    if _LEADING_DIGITS_RE.match(raw) or is_head(raw):
        return VersionSpec(engine=Constants.DEFAULT_ENGINE, version_prefix=raw)
    if "-" not in raw:
        spec = VersionSpec(engine=raw, version_prefix="")
    else:
        engine, version = partition(raw, "-")
        spec = VersionSpec(engine=engine, version_prefix=version)
    if not spec.engine:
        raise MalformedDeclarationError(f"no engine in version declaration {raw!r}")
    return spec


def parse_declaration(
    inputs: DeclarationInputs,
    is_head: Callable[[str], bool] = is_head_version,
) -> Tuple[VersionSpec, DeclarationSource]:
    """Read the selected source and classify it into a VersionSpec.

    Args:
        inputs: Declaration inputs; relative paths resolve against
            ``inputs.working_directory``.
        is_head: Head/dev build predicate used during classification.

    Returns:
        Tuple of (VersionSpec, DeclarationSource)
    """
    source = select_source(inputs)

    if source == DeclarationSource.LOCKFILE:
        path = _resolve_path(inputs, inputs.version_file)
        version = parse_lockfile_header(read_declaration_file(path), inputs.legacy_lockfile_pattern)
        logger.info("Using %s as input from file %s", version, inputs.version_file)
        return VersionSpec(engine=Constants.DEFAULT_ENGINE, version_prefix=version), source

    if source == DeclarationSource.RUBY_VERSION_FILE:
        text = read_declaration_file(_resolve_path(inputs, Constants.RUBY_VERSION_FILE))
        raw = parse_ruby_version_file(text)
        logger.info("Using %s as input from file %s", raw, Constants.RUBY_VERSION_FILE)
    elif source == DeclarationSource.TOOL_VERSIONS_FILE:
        text = read_declaration_file(_resolve_path(inputs, Constants.TOOL_VERSIONS_FILE))
        raw = parse_tool_versions_file(text)
        logger.info("Using %s as input from file %s", raw, Constants.TOOL_VERSIONS_FILE)
    else:
        raw = inputs.ruby_version
        logger.info("Using %s as explicit input", raw)

    return classify_version(raw, is_head), source
