"""
Mock release adapter — in-memory test double for release sources.

Assets are registered as bytes keyed by filename. Downloads write those
bytes to the requested destination. Any operation can be made to fail,
and every call is logged for assertions.
"""

from __future__ import annotations

from pathlib import Path

from hayride_installer.adapters.base import ReleaseAdapter
from hayride_installer.core.models.receipt import Receipt

MOCK_BASE_URL = "mock://releases"


class MockReleaseAdapter(ReleaseAdapter):
    """Release source backed by a dict of assets.

    By default ``latest_version`` returns ``tag`` and downloads succeed
    for every registered asset.
    """

    def __init__(
        self,
        tag: str = "v0.0.0-mock",
        assets: dict[str, bytes] | None = None,
        available: bool = True,
    ):
        self._tag = tag
        self._assets: dict[str, bytes] = dict(assets or {})
        self._available = available
        self._failures: dict[str, str] = {}
        self._call_log: list[tuple[str, str]] = []

    @property
    def name(self) -> str:
        return "mock"

    @property
    def call_log(self) -> list[tuple[str, str]]:
        """``(operation, argument)`` pairs in call order."""
        return self._call_log

    @property
    def downloaded(self) -> list[str]:
        """URLs passed to ``download``."""
        return [arg for op, arg in self._call_log if op == "download"]

    def is_available(self) -> bool:
        return self._available

    def add_asset(self, filename: str, content: bytes) -> None:
        self._assets[filename] = content

    def set_failure(self, key: str, error: str = "Mock failure") -> None:
        """Fail ``latest_version`` (key ``"latest_version"``) or a download by filename."""
        self._failures[key] = error

    def latest_version(self) -> Receipt:
        self._call_log.append(("latest_version", ""))
        if "latest_version" in self._failures:
            return Receipt.failure(
                adapter=self.name,
                operation="latest_version",
                error=self._failures["latest_version"],
            )
        return Receipt.success(adapter=self.name, operation="latest_version", output=self._tag)

    def asset_url(self, version: str, filename: str) -> str:
        return f"{MOCK_BASE_URL}/download/{version}/{filename}"

    def download(self, url: str, dest: Path) -> Receipt:
        self._call_log.append(("download", url))
        filename = url.rsplit("/", 1)[-1]

        if filename in self._failures:
            return Receipt.failure(
                adapter=self.name,
                operation="download",
                error=self._failures[filename],
                metadata={"url": url},
            )
        if filename not in self._assets:
            return Receipt.failure(
                adapter=self.name,
                operation="download",
                error=f"404 Not Found: {url}",
                metadata={"url": url},
            )

        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(self._assets[filename])
        return Receipt.success(
            adapter=self.name,
            operation="download",
            output=f"Downloaded {len(self._assets[filename])} bytes",
            path=str(dest),
            metadata={"url": url, "mock": True},
        )

    def reset(self) -> None:
        """Clear call log and configured failures."""
        self._call_log.clear()
        self._failures.clear()
