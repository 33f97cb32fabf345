"""
Tar archive adapter — unpacks release tarballs (``.tar.xz`` and friends).

Compression is auto-detected. Archives holding absolute member paths are
rejected up front; the ``data`` filter refuses ``..`` components and links
pointing outside the target.
"""

from __future__ import annotations

import logging
import tarfile
import time
from pathlib import Path

from hayride_installer.adapters.base import ArchiveAdapter
from hayride_installer.core.models.receipt import Receipt

logger = logging.getLogger(__name__)


class TarArchiveAdapter(ArchiveAdapter):
    """Extract tar archives with ``tarfile``."""

    @property
    def name(self) -> str:
        return "tar"

    def extract(self, archive: Path, target: Path) -> Receipt:
        if not archive.is_file():
            return Receipt.failure(
                adapter=self.name,
                operation="extract",
                error=f"Archive not found: {archive}",
            )

        start = time.monotonic()
        try:
            target.mkdir(parents=True, exist_ok=True)
            with tarfile.open(archive, "r:*") as tar:
                members = tar.getmembers()
                absolute = [m.name for m in members if m.name.startswith("/")]
                if absolute:
                    return Receipt.failure(
                        adapter=self.name,
                        operation="extract",
                        error=f"Refusing {archive.name}: absolute member path {absolute[0]}",
                        metadata={"archive": str(archive)},
                    )
                tar.extractall(target, filter="data")
        except (tarfile.TarError, OSError, EOFError) as e:
            return Receipt.failure(
                adapter=self.name,
                operation="extract",
                error=f"Cannot extract {archive.name}: {e}",
                metadata={"archive": str(archive)},
            )

        logger.debug("Extracted %d member(s) of %s into %s", len(members), archive.name, target)
        return Receipt.success(
            adapter=self.name,
            operation="extract",
            output=f"Extracted {len(members)} member(s)",
            path=str(target),
            duration_ms=int((time.monotonic() - start) * 1000),
            metadata={"archive": str(archive), "members": len(members)},
        )
