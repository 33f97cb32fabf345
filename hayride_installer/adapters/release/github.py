"""
GitHub release adapter — latest-tag lookup and asset download over HTTPS.

Uses the releases API for the tag and plain ``releases/download/`` URLs
for assets. Every request is attempted exactly once.
"""

from __future__ import annotations

import http.client
import json
import logging
import shutil
import time
import urllib.error
import urllib.request
from pathlib import Path

from hayride_installer import __version__
from hayride_installer.adapters.base import ReleaseAdapter
from hayride_installer.core.models.receipt import Receipt

logger = logging.getLogger(__name__)

_USER_AGENT = f"hayride-installer/{__version__}"
_CHUNK_SIZE = 64 * 1024


class GitHubReleaseAdapter(ReleaseAdapter):
    """Releases published on github.com.

    Args:
        api_url: ``.../releases/latest`` endpoint of the releases API.
        base_url: ``https://github.com/<owner>/<repo>/releases``.
        timeout: Per-request timeout in seconds.
    """

    def __init__(self, api_url: str, base_url: str, timeout: int = 30):
        self._api_url = api_url
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "github"

    def is_available(self) -> bool:
        return True  # no local tooling required

    def asset_url(self, version: str, filename: str) -> str:
        return f"{self._base_url}/download/{version}/{filename}"

    def _open(self, url: str, accept: str = "*/*"):
        req = urllib.request.Request(
            url,
            headers={"Accept": accept, "User-Agent": _USER_AGENT},
        )
        return urllib.request.urlopen(req, timeout=self._timeout)

    def latest_version(self) -> Receipt:
        start = time.monotonic()
        try:
            with self._open(self._api_url, accept="application/vnd.github.v3+json") as resp:
                data = json.loads(resp.read())
        except (urllib.error.URLError, http.client.HTTPException, OSError, ValueError) as e:
            return Receipt.failure(
                adapter=self.name,
                operation="latest_version",
                error=f"Failed to fetch latest release: {e}",
                metadata={"url": self._api_url},
            )

        tag = data.get("tag_name", "") if isinstance(data, dict) else ""
        elapsed_ms = int((time.monotonic() - start) * 1000)
        if not tag:
            return Receipt.failure(
                adapter=self.name,
                operation="latest_version",
                error="Release metadata has no tag_name",
                duration_ms=elapsed_ms,
                metadata={"url": self._api_url},
            )

        return Receipt.success(
            adapter=self.name,
            operation="latest_version",
            output=tag,
            duration_ms=elapsed_ms,
            metadata={"url": self._api_url},
        )

    def download(self, url: str, dest: Path) -> Receipt:
        logger.debug("Downloading %s → %s", url, dest)
        start = time.monotonic()
        dest.parent.mkdir(parents=True, exist_ok=True)

        try:
            with self._open(url) as resp, dest.open("wb") as out:
                expected = resp.headers.get("Content-Length")
                shutil.copyfileobj(resp, out, _CHUNK_SIZE)
        except (urllib.error.URLError, http.client.HTTPException, OSError) as e:
            dest.unlink(missing_ok=True)
            return Receipt.failure(
                adapter=self.name,
                operation="download",
                error=f"Download failed for {url}: {e}",
                metadata={"url": url},
            )

        size = dest.stat().st_size
        if expected is not None and expected.isdigit() and int(expected) != size:
            dest.unlink(missing_ok=True)
            return Receipt.failure(
                adapter=self.name,
                operation="download",
                error=f"Download truncated for {url}: got {size} of {expected} bytes",
                metadata={"url": url, "size_bytes": size, "expected_bytes": int(expected)},
            )

        return Receipt.success(
            adapter=self.name,
            operation="download",
            output=f"Downloaded {size:,} bytes",
            path=str(dest),
            duration_ms=int((time.monotonic() - start) * 1000),
            metadata={"url": url, "size_bytes": size},
        )
