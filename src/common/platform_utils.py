"""Best-effort detection of the runner platform identifier.

The identifier is opaque to the resolution core; it only keys catalog
lookups and appears in error messages.
"""

from __future__ import annotations

import logging
import os
import platform
import re
import sys
from typing import Dict, Optional

logger = logging.getLogger(__name__)

OS_RELEASE_FILE = "/etc/os-release"
IMAGE_OS_ENV = "ImageOS"
_IMAGE_OS_RE = re.compile(r"(ubuntu|win|macos)(\d+)")

# Build numbers of Windows Server releases, for Pythons that report "10".
WINDOWS_SERVER_BUILDS = {"17763": "2019", "20348": "2022", "26100": "2025"}


def _read_os_release(path: str = OS_RELEASE_FILE) -> Dict[str, str]:
    """Parse KEY=value lines from an os-release style file."""
    values: Dict[str, str] = {}
    try:
        with open(path, encoding="utf-8") as fh:
            for line in fh:
                key, sep, value = line.strip().partition("=")
                if sep:
                    values[key] = value.strip().strip('"')
    except OSError as e:
        logger.debug("Could not read %s: %s", path, e)
    return values


def _from_image_os(image_os: str) -> Optional[str]:
    """Map a hosted runner ImageOS value (``ubuntu22``, ``win22``, ``macos13``) to a platform name."""
    match = _IMAGE_OS_RE.fullmatch(image_os)
    if not match:
        return None
    family, number = match.groups()
    if family == "ubuntu":
        return f"ubuntu-{number}.04"
    if family == "win":
        return f"windows-20{number}"
    return f"macos-{number}"


def _windows_year() -> Optional[str]:
    """Return the Windows Server year from ``platform.win32_ver()``, or None."""
    release, version = platform.win32_ver()[:2]
    # Server releases read like "2022Server"; newer Pythons may report "10".
    match = re.match(r"(\d{4})", release or "")
    if match:
        return match.group(1)
    build = (version or "").split(".")[-1]
    return WINDOWS_SERVER_BUILDS.get(build)


def get_platform_name(os_release_path: str = OS_RELEASE_FILE) -> Optional[str]:
    """Return an identifier such as ``ubuntu-22.04``, ``macos-13`` or ``windows-2022``.

    The ImageOS variable set on hosted runners wins over probing the system.
    Returns None when the platform cannot be identified.
    """
    image_os = os.environ.get(IMAGE_OS_ENV)
    if image_os:
        name = _from_image_os(image_os)
        if name:
            return name
        logger.debug("Unrecognized %s value %s, probing the system", IMAGE_OS_ENV, image_os)

    if sys.platform.startswith("linux"):
        info = _read_os_release(os_release_path)
        distro = info.get("ID")
        version = info.get("VERSION_ID")
        if distro and version:
            return f"{distro}-{version}"
        return None
    if sys.platform == "darwin":
        release = platform.mac_ver()[0]
        if release:
            return f"macos-{release.split('.')[0]}"
        return None
    if sys.platform == "win32":
        year = _windows_year()
        if year:
            return f"windows-{year}"
        return None
    return None
