"""
Platform detection — resolve the release asset for this host.

Release archives are named after ``uname -m`` and a normalized
``uname -s``: ``hayride-<version>-<arch>-<os>.tar.xz``.
"""

from __future__ import annotations

import logging
import platform
from dataclasses import dataclass

from hayride_installer.core.errors import DetectionError

logger = logging.getLogger(__name__)

RELEASE_ARCHIVE_SUFFIX = "tar.xz"
CORE_ARCHIVE_NAME = f"hayride-core.{RELEASE_ARCHIVE_SUFFIX}"

# uname -s (lowercased) → release OS label
_OS_MAP = {
    "darwin": "macos",
    "linux": "linux-gnu",
}

SUPPORTED_OS = frozenset({"macos", "darwin", "linux-gnu"})

RELEASES_PAGE = "https://github.com/hayride-dev/releases/releases"


@dataclass(frozen=True)
class PlatformInfo:
    """Architecture and OS labels as they appear in release asset names."""

    arch: str
    os_info: str

    def archive_name(self, version: str) -> str:
        """Release archive filename for this platform."""
        return f"hayride-{version}-{self.arch}-{self.os_info}.{RELEASE_ARCHIVE_SUFFIX}"

    def to_dict(self) -> dict:
        return {"arch": self.arch, "os": self.os_info}


def normalize_os(uname_s: str) -> str:
    """Map ``uname -s`` output to the OS label used by release assets.

    Unknown systems are passed through lowercased.
    """
    lowered = uname_s.strip().lower()
    return _OS_MAP.get(lowered, lowered)


def detect_platform(system: str | None = None, machine: str | None = None) -> PlatformInfo:
    """Resolve and validate the host platform.

    Args:
        system: ``uname -s`` value (default: ``platform.system()``).
        machine: ``uname -m`` value (default: ``platform.machine()``).

    Raises:
        DetectionError: Architecture or OS is empty, or the OS is unsupported.
    """
    if system is None:
        system = platform.system()
    if machine is None:
        machine = platform.machine()

    arch = machine.strip()
    os_info = normalize_os(system)

    if not arch:
        raise DetectionError("Unable to determine architecture.")
    if not os_info:
        raise DetectionError("Unable to determine OS information.")
    if os_info not in SUPPORTED_OS:
        raise DetectionError(
            f"Unsupported OS '{os_info}'. This installer currently only supports "
            f"Unix-like systems.\nVisit {RELEASES_PAGE} to download an installer for your OS."
        )

    info = PlatformInfo(arch=arch, os_info=os_info)
    logger.debug("Detected platform: %s/%s", info.arch, info.os_info)
    return info

