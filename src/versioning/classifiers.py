"""Default stability and head-build predicates for Ruby version strings."""

import re
from typing import Tuple

from constants import Constants

_STABLE_RE = re.compile(Constants.STABLE_VERSION_PATTERN)


def is_head_version(version: str) -> bool:
    """Return True for development build names that must match exactly."""
    return version in Constants.HEAD_VERSIONS


def is_stable_version(version: str) -> bool:
    """Return True for released versions made only of dotted numbers."""
    return bool(_STABLE_RE.fullmatch(version))


def partition(value: str, separator: str) -> Tuple[str, str]:
    """Split ``value`` on the first ``separator``.

    Raises:
        ValueError: if ``separator`` does not occur in ``value``.
    """
    head, sep, tail = value.partition(separator)
    if not sep:
        raise ValueError(f"No {separator} in string {value}")
    return head, tail
