"""Match a requested engine version against a catalog of available builds.

Matching strategies, in order: exact, newest stable with prefix, newest
non-head with prefix. Head builds only ever match exactly.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from .classifiers import is_head_version, is_stable_version
from .errors import UnknownEngineError, UnknownVersionError

logger = logging.getLogger(__name__)


class VersionMatcher:
    """Resolves a version prefix to one catalog entry.

    The stability and head-build predicates are injected so engine-specific
    conventions stay outside the matching policy.
    """

    def __init__(
        self,
        is_stable: Callable[[str], bool] = is_stable_version,
        is_head: Callable[[str], bool] = is_head_version,
    ):
        """Initialize the matcher.

        Args:
            is_stable: Predicate for released, production-quality versions
            is_head: Predicate for development builds requiring exact match
        """
        self.is_stable = is_stable
        self.is_head = is_head

    def resolve(
        self,
        catalog: Sequence[str],
        engine: str,
        version_prefix: str,
        platform: Optional[str] = None,
    ) -> str:
        """Return the catalog entry selected for ``version_prefix``.

        Args:
            catalog: Available versions, oldest first
            engine: Engine name, used in error messages
            version_prefix: Full version, partial prefix, or "" for latest stable
            platform: Platform name, used in error messages

        Returns:
            The matching catalog entry, verbatim

        Raises:
            UnknownVersionError: if no entry matches
        """
        if version_prefix in catalog:
            return version_prefix

        newest_first = list(reversed(catalog))

        # Stable first, so an empty prefix picks the latest stable version
        found = self._find_prefix_match(
            newest_first, version_prefix, self.is_stable
        )
        if found is None:
            found = self._find_prefix_match(
                newest_first, version_prefix, lambda v: not self.is_head(v)
            )

        if found is None:
            raise UnknownVersionError(engine, version_prefix, list(catalog), platform)

        logger.debug("Resolved %s-%s to %s", engine, version_prefix, found)
        return found

    def validate(
        self,
        platform: str,
        catalog: Optional[Sequence[str]],
        engine: str,
        version_prefix: str,
    ) -> str:
        """Check the engine is known on ``platform``, then resolve.

        Raises:
            UnknownEngineError: if ``catalog`` is None
            UnknownVersionError: if no entry matches
        """
        if catalog is None:
            raise UnknownEngineError(engine, platform)
        return self.resolve(catalog, engine, version_prefix, platform)

    @staticmethod
    def _find_prefix_match(
        versions: Sequence[str],
        prefix: str,
        eligible: Callable[[str], bool],
    ) -> Optional[str]:
        """Find the first eligible version starting with ``prefix``."""
        for version in versions:
            if eligible(version) and version.startswith(prefix):
                return version
        return None
