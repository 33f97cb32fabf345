"""
Install use case — the end-to-end installer flows.

Two flows share the same steps:

    full   platform binaries + core morphs into ``hayride-core``,
           general morphs into ``hayride``, compositions copied flat.
    core   platform binaries + core morphs into ``hayride-core`` only,
           plus an optional model artifact download.

Every step depends on the previous one, so the run is strictly
sequential. Fatal problems raise an ``InstallerError`` subclass; the
shell profile step degrades to manual instructions instead.
"""

from __future__ import annotations

import logging
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal
from urllib.parse import urlparse

from hayride_installer.adapters.base import ArchiveAdapter, ReleaseAdapter
from hayride_installer.core.config.platform_config import write_platform_config
from hayride_installer.core.errors import DownloadError, ExtractionError
from hayride_installer.core.models.settings import (
    CORE_NAMESPACE,
    HAYRIDE_NAMESPACE,
    InstallerSettings,
)
from hayride_installer.core.services.platform_detect import (
    CORE_ARCHIVE_NAME,
    PlatformInfo,
    detect_platform,
)
from hayride_installer.core.services.registrar import (
    RegistrationReport,
    copy_flat,
    register,
)
from hayride_installer.core.services.shell_profile import (
    ProfileResult,
    build_path_block,
    integrate_profile,
)

logger = logging.getLogger(__name__)

# Subtrees of the core morphs archive
CORE_SUBDIR = "core"
HAYRIDE_SUBDIR = "hayride"
COMPOSITIONS_SUBDIR = "compositions"


@dataclass
class InstallResult:
    """Everything an install run produced."""

    flow: Literal["full", "core"]
    hayride_dir: Path
    version: str = ""
    platform: PlatformInfo | None = None
    config_file: Path | None = None
    binaries_extracted: int = 0
    registrations: dict[str, RegistrationReport] = field(default_factory=dict)
    compositions: list[Path] = field(default_factory=list)
    model_path: Path | None = None
    model_status: Literal["downloaded", "present", "skipped"] = "skipped"
    profile: ProfileResult | None = None

    @property
    def skipped(self) -> list[str]:
        """Filenames skipped by any registration."""
        return [name for r in self.registrations.values() for name in r.skipped]

    def to_dict(self) -> dict:
        return {
            "flow": self.flow,
            "version": self.version,
            "hayride_dir": str(self.hayride_dir),
            "platform": self.platform.to_dict() if self.platform else None,
            "config_file": str(self.config_file) if self.config_file else None,
            "binaries_extracted": self.binaries_extracted,
            "registrations": {ns: r.to_dict() for ns, r in self.registrations.items()},
            "compositions": [str(p) for p in self.compositions],
            "model": {
                "status": self.model_status,
                "path": str(self.model_path) if self.model_path else None,
            },
            "profile": self.profile.to_dict() if self.profile else None,
        }


# ── Steps ───────────────────────────────────────────────────────


def prepare_layout(settings: InstallerSettings, namespaces: list[str]) -> None:
    """Create the install tree (idempotent)."""
    dirs = [settings.bin_dir, settings.compositions_dir]
    dirs.extend(settings.registry_root(ns) for ns in namespaces)
    for d in dirs:
        d.mkdir(parents=True, exist_ok=True)
    logger.debug("Install layout ready under %s", settings.hayride_dir)


def resolve_version(release: ReleaseAdapter) -> str:
    """Ask the release source for the newest tag.

    Raises:
        DownloadError: The source is unavailable, or the lookup failed or
            returned nothing.
    """
    if not release.is_available():
        raise DownloadError(f"Release source '{release.name}' is not available.")
    receipt = release.latest_version()
    if receipt.failed or not receipt.output:
        raise DownloadError(f"Failed to resolve the latest release: {receipt.error}")
    logger.info("Hayride latest release version: %s", receipt.output)
    return receipt.output


def _download(release: ReleaseAdapter, url: str, dest: Path, what: str) -> Path:
    receipt = release.download(url, dest)
    if receipt.failed:
        logger.error("%s", receipt.error)
        raise DownloadError(f"Failed to download {what}.")
    return dest


def _extract(archive: ArchiveAdapter, path: Path, target: Path) -> int:
    receipt = archive.extract(path, target)
    if receipt.failed:
        raise ExtractionError(receipt.error or f"Cannot extract {path}")
    return int(receipt.metadata.get("members", 0))


def install_binaries(
    settings: InstallerSettings,
    release: ReleaseAdapter,
    archive: ArchiveAdapter,
    version: str,
    platform_info: PlatformInfo,
    work_dir: Path,
) -> int:
    """Download the platform archive and unpack it into the bin dir."""
    filename = platform_info.archive_name(version)
    path = _download(
        release,
        release.asset_url(version, filename),
        work_dir / filename,
        "the release",
    )
    return _extract(archive, path, settings.bin_dir)


def fetch_core_archive(
    release: ReleaseAdapter,
    archive: ArchiveAdapter,
    version: str,
    work_dir: Path,
) -> Path:
    """Download and unpack the core morphs archive; returns the unpack dir."""
    path = _download(
        release,
        release.asset_url(version, CORE_ARCHIVE_NAME),
        work_dir / CORE_ARCHIVE_NAME,
        "the core morphs archive",
    )
    unpacked = work_dir / "core-morphs"
    _extract(archive, path, unpacked)
    return unpacked


def fetch_model(
    settings: InstallerSettings,
    release: ReleaseAdapter,
    model_url: str,
) -> tuple[Path, Literal["downloaded", "present"]]:
    """Download the model artifact unless it's already in place."""
    filename = Path(urlparse(model_url).path).name or "model.bin"
    dest = settings.models_dir / filename

    if dest.is_file() and dest.stat().st_size > 0:
        logger.info("Model %s already present, not downloading again", dest)
        return dest, "present"

    logger.info("Downloading model %s", filename)
    _download(release, model_url, dest, f"the model artifact {filename}")
    return dest, "downloaded"


def setup_profile(settings: InstallerSettings) -> ProfileResult:
    """Patch the shell profile; unreadable or unwritable files degrade to manual steps."""
    try:
        return integrate_profile(
            shell_name=settings.shell_name,
            system=settings.system,
            home=settings.home_dir,
            hayride_dir=settings.hayride_dir,
            profile_override=settings.profile,
        )
    except OSError as e:
        logger.warning("Cannot update shell profile: %s", e)
        return ProfileResult(
            status="not_detected",
            profile=None,
            block=build_path_block(None, settings.hayride_dir),
        )


def _skip_profile(settings: InstallerSettings) -> ProfileResult:
    return ProfileResult(
        status="skipped",
        profile=None,
        block=build_path_block(settings.profile, settings.hayride_dir),
    )


# ── Flows ───────────────────────────────────────────────────────


def install_full(
    settings: InstallerSettings,
    release: ReleaseAdapter,
    archive: ArchiveAdapter,
    *,
    update_profile: bool = True,
) -> InstallResult:
    """Install binaries, both morph namespaces and compositions.

    Raises:
        DetectionError, DownloadError, ExtractionError, RegistrationError
    """
    result = InstallResult(flow="full", hayride_dir=settings.hayride_dir)

    result.platform = detect_platform(settings.system, settings.machine)
    prepare_layout(settings, [HAYRIDE_NAMESPACE, CORE_NAMESPACE])

    result.version = resolve_version(release)
    result.config_file = write_platform_config(settings.config_file, result.version)

    with tempfile.TemporaryDirectory(prefix="hayride-", dir=settings.temp_dir) as tmp:
        work_dir = Path(tmp)
        result.binaries_extracted = install_binaries(
            settings, release, archive, result.version, result.platform, work_dir,
        )
        unpacked = fetch_core_archive(release, archive, result.version, work_dir)

        result.registrations[CORE_NAMESPACE] = register(
            unpacked / CORE_SUBDIR, settings.registry_root(CORE_NAMESPACE),
        )
        result.registrations[HAYRIDE_NAMESPACE] = register(
            unpacked / HAYRIDE_SUBDIR, settings.registry_root(HAYRIDE_NAMESPACE),
        )
        result.compositions = copy_flat(
            unpacked / COMPOSITIONS_SUBDIR, settings.compositions_dir,
        )

    result.profile = setup_profile(settings) if update_profile else _skip_profile(settings)
    logger.info("Hayride %s installed into %s", result.version, settings.hayride_dir)
    return result


def install_core(
    settings: InstallerSettings,
    release: ReleaseAdapter,
    archive: ArchiveAdapter,
    *,
    model_url: str | None = None,
    update_profile: bool = True,
) -> InstallResult:
    """Install binaries and the core morph namespace, optionally a model.

    Args:
        model_url: Model artifact to fetch (default: ``settings.model_url``).
            No model is downloaded when both are empty.

    Raises:
        DetectionError, DownloadError, ExtractionError, RegistrationError
    """
    result = InstallResult(flow="core", hayride_dir=settings.hayride_dir)
    model_url = model_url or settings.model_url

    result.platform = detect_platform(settings.system, settings.machine)
    prepare_layout(settings, [CORE_NAMESPACE])

    result.version = resolve_version(release)
    result.config_file = write_platform_config(settings.config_file, result.version)

    with tempfile.TemporaryDirectory(prefix="hayride-", dir=settings.temp_dir) as tmp:
        work_dir = Path(tmp)
        result.binaries_extracted = install_binaries(
            settings, release, archive, result.version, result.platform, work_dir,
        )
        unpacked = fetch_core_archive(release, archive, result.version, work_dir)
        result.registrations[CORE_NAMESPACE] = register(
            unpacked / CORE_SUBDIR, settings.registry_root(CORE_NAMESPACE),
        )

    if model_url:
        result.model_path, result.model_status = fetch_model(settings, release, model_url)

    result.profile = setup_profile(settings) if update_profile else _skip_profile(settings)
    logger.info("Hayride %s (core) installed into %s", result.version, settings.hayride_dir)
    return result
