"""
Local mirror adapter — install from a directory instead of GitHub.

Mirror layout (same shape as the GitHub download URLs):

    <mirror>/latest                          text file holding the tag
    <mirror>/download/<tag>/<asset>          release assets

Handy for air-gapped machines and for exercising the full install
flow in tests without network access.
"""

from __future__ import annotations

import logging
import shutil
import time
from pathlib import Path
from urllib.parse import urlparse
from urllib.request import url2pathname

from hayride_installer.adapters.base import ReleaseAdapter
from hayride_installer.core.models.receipt import Receipt

logger = logging.getLogger(__name__)

LATEST_FILE = "latest"


class LocalReleaseAdapter(ReleaseAdapter):
    """Releases served from a local mirror directory."""

    def __init__(self, mirror_dir: Path):
        self._mirror = Path(mirror_dir)

    @property
    def name(self) -> str:
        return "local"

    def is_available(self) -> bool:
        return self._mirror.is_dir()

    def latest_version(self) -> Receipt:
        latest = self._mirror / LATEST_FILE
        try:
            tag = latest.read_text(encoding="utf-8").strip()
        except OSError as e:
            return Receipt.failure(
                adapter=self.name,
                operation="latest_version",
                error=f"Cannot read {latest}: {e}",
            )
        if not tag:
            return Receipt.failure(
                adapter=self.name,
                operation="latest_version",
                error=f"{latest} is empty",
            )
        return Receipt.success(adapter=self.name, operation="latest_version", output=tag)

    def asset_url(self, version: str, filename: str) -> str:
        return (self._mirror / "download" / version / filename).resolve().as_uri()

    def download(self, url: str, dest: Path) -> Receipt:
        source = _to_path(url)
        start = time.monotonic()

        if not source.is_file():
            return Receipt.failure(
                adapter=self.name,
                operation="download",
                error=f"Asset not found in mirror: {source}",
                metadata={"url": url},
            )

        dest.parent.mkdir(parents=True, exist_ok=True)
        try:
            shutil.copyfile(source, dest)
        except OSError as e:
            dest.unlink(missing_ok=True)
            return Receipt.failure(
                adapter=self.name,
                operation="download",
                error=f"Copy failed for {source}: {e}",
                metadata={"url": url},
            )

        size = dest.stat().st_size
        logger.debug("Copied %s from mirror (%d bytes)", source.name, size)
        return Receipt.success(
            adapter=self.name,
            operation="download",
            output=f"Copied {size:,} bytes",
            path=str(dest),
            duration_ms=int((time.monotonic() - start) * 1000),
            metadata={"url": url, "size_bytes": size},
        )


def _to_path(url: str) -> Path:
    """Accept both ``file://`` URIs and plain paths."""
    parsed = urlparse(url)
    if parsed.scheme == "file":
        return Path(url2pathname(parsed.path))
    return Path(url)
