"""
Artifact registrar — files extracted morphs into a versioned registry.

Given a directory of extracted files, every ``<name>-<X.Y.Z>.wasm`` found
(recursively) is copied to ``<registry_root>/<X.Y.Z>/<name>.wasm``.
Files that don't follow the naming scheme are skipped with a warning.

Re-registering the same (name, version) overwrites the previous copy, so
running the registrar again after a partial failure is always safe.

Copy failures are collected, not fatal on the spot: every candidate is
attempted, then a ``RegistrationError`` is raised if any copy failed.
"""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from hayride_installer.core.errors import RegistrationError
from hayride_installer.core.models.artifact import (
    WASM_EXTENSION,
    ArtifactId,
    RegistryEntry,
    is_artifact_name,
    is_version,
    parse_artifact_filename,
)

logger = logging.getLogger(__name__)

# Compositions are copied as-is, no versioning
COMPOSITION_EXTENSION = ".wac"


@dataclass
class RegistrationReport:
    """Outcome of one ``register`` call."""

    source_dir: Path
    registry_root: Path
    placed: list[RegistryEntry] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failures: list[dict[str, str]] = field(default_factory=list)

    @property
    def placed_count(self) -> int:
        return len(self.placed)

    @property
    def ok(self) -> bool:
        return not self.failures

    def to_dict(self) -> dict:
        return {
            "source_dir": str(self.source_dir),
            "registry_root": str(self.registry_root),
            "placed_count": self.placed_count,
            "placed": [e.model_dump() for e in self.placed],
            "skipped": self.skipped,
            "failures": self.failures,
        }


def _ensure_root(registry_root: Path) -> None:
    try:
        registry_root.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise RegistrationError(f"Cannot create registry root {registry_root}: {e}") from e

    if not registry_root.is_dir():
        raise RegistrationError(f"Registry root is not a directory: {registry_root}")
    if not os.access(registry_root, os.W_OK | os.X_OK):
        raise RegistrationError(f"Registry root is not writable: {registry_root}")


def _candidates(source_dir: Path, extension: str) -> list[Path]:
    """Regular files under source_dir whose name mentions extension.

    Look-alikes such as ``README.wasm.txt`` are included so that they are
    reported as skipped instead of being silently ignored.
    """
    return sorted(
        p for p in source_dir.rglob(f"*{extension}*")
        if p.is_file()
    )


def _place(source: Path, artifact: ArtifactId, registry_root: Path) -> Path:
    version_dir = registry_root / artifact.version
    version_dir.mkdir(parents=True, exist_ok=True)
    dest = version_dir / artifact.filename
    shutil.copyfile(source, dest)
    return dest


def register(
    source_dir: Path,
    registry_root: Path,
    extension: str = WASM_EXTENSION,
) -> RegistrationReport:
    """Copy every versioned artifact under source_dir into registry_root.

    Args:
        source_dir: Extracted archive subtree (e.g. ``<tmp>/core``).
        registry_root: Namespace root, created if absent.
        extension: Files whose name contains this extension are candidates;
            only ``<name>-<X.Y.Z><ext>`` names are placed.

    Returns:
        RegistrationReport listing placed entries and skipped filenames.

    Raises:
        RegistrationError: source_dir is missing, registry_root can't be
            created or written, or at least one copy failed. In the last
            case ``err.report`` holds the full report.
    """
    source_dir = Path(source_dir)
    registry_root = Path(registry_root)

    if not source_dir.is_dir():
        raise RegistrationError(f"Source directory does not exist: {source_dir}")

    _ensure_root(registry_root)

    report = RegistrationReport(source_dir=source_dir, registry_root=registry_root)
    first_error: OSError | None = None

    for path in _candidates(source_dir, extension):
        parsed = parse_artifact_filename(path.name, extension)

        if not isinstance(parsed, ArtifactId):
            logger.warning("Could not extract version from %s", parsed.filename)
            report.skipped.append(parsed.filename)
            continue

        try:
            dest = _place(path, parsed, registry_root)
        except OSError as e:
            logger.error("Failed to register %s: %s", path.name, e)
            report.failures.append({"filename": path.name, "error": str(e)})
            if first_error is None:
                first_error = e
            continue

        logger.debug("Registered %s → %s", path.name, dest)
        report.placed.append(
            RegistryEntry(name=parsed.name, version=parsed.version, path=str(dest))
        )

    logger.info(
        "Registered %d artifact(s) into %s (%d skipped)",
        report.placed_count, registry_root, len(report.skipped),
    )

    if first_error is not None:
        raise RegistrationError(
            f"{len(report.failures)} artifact(s) could not be copied into "
            f"{registry_root}: {report.failures[0]['filename']}: {first_error}",
            report=report,
        ) from first_error

    return report


def copy_flat(
    source_dir: Path,
    dest_dir: Path,
    extension: str = COMPOSITION_EXTENSION,
) -> list[Path]:
    """Copy matching files as-is into dest_dir (no versioning).

    A missing source_dir is not an error: the archive simply shipped
    nothing of this kind.
    """
    source_dir = Path(source_dir)
    dest_dir = Path(dest_dir)

    if not source_dir.is_dir():
        logger.warning("No %s files to copy: %s does not exist", extension, source_dir)
        return []

    dest_dir.mkdir(parents=True, exist_ok=True)
    copied: list[Path] = []
    for path in _candidates(source_dir, extension):
        if not path.name.endswith(extension):
            continue
        dest = dest_dir / path.name
        shutil.copyfile(path, dest)
        copied.append(dest)

    logger.info("Copied %d %s file(s) into %s", len(copied), extension, dest_dir)
    return copied


def list_registry(
    registry_root: Path,
    extension: str = WASM_EXTENSION,
) -> list[RegistryEntry]:
    """Enumerate the artifacts stored under a registry root.

    Only ``<version>/<name><ext>`` entries are reported; anything else
    in the tree is ignored.
    """
    registry_root = Path(registry_root)
    if not registry_root.is_dir():
        return []

    entries: list[RegistryEntry] = []
    for version_dir in sorted(p for p in registry_root.iterdir() if p.is_dir()):
        for path in sorted(version_dir.glob(f"*{extension}")):
            if not path.is_file():
                continue
            name = path.name[: -len(extension)]
            if is_artifact_name(name) and is_version(version_dir.name):
                entries.append(
                    RegistryEntry(name=name, version=version_dir.name, path=str(path))
                )
    return entries
