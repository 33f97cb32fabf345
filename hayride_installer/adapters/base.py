"""
Adapter base — the contract between the installer and the outside world.

The install use case never talks to the network or to archive formats
directly. It goes through a ``ReleaseAdapter`` (where releases come
from) and an ``ArchiveAdapter`` (how they are unpacked), so tests can
swap in a local mirror or a mock.

Adapters NEVER raise. Every outcome is a ``Receipt``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from hayride_installer.core.models.receipt import Receipt


class ReleaseAdapter(ABC):
    """Source of published releases.

    To add a new source:
        1. Subclass ReleaseAdapter
        2. Implement name, is_available, latest_version, asset_url, download
        3. Offer it from the CLI (see ``main._release_adapter``)
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The adapter identifier (e.g., 'github', 'local')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the source can be used at all. Fast, never raises."""

    @abstractmethod
    def latest_version(self) -> Receipt:
        """Resolve the tag of the newest release.

        On success ``receipt.output`` holds the tag (e.g. ``v0.0.6-alpha``).
        """

    @abstractmethod
    def asset_url(self, version: str, filename: str) -> str:
        """Location of a release asset, suitable for ``download``."""

    @abstractmethod
    def download(self, url: str, dest: Path) -> Receipt:
        """Fetch ``url`` into ``dest``.

        On success ``receipt.path`` is the written file. On failure no
        partial file is left behind.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"


class ArchiveAdapter(ABC):
    """Unpacks downloaded archives."""

    @property
    @abstractmethod
    def name(self) -> str:
        """The adapter identifier (e.g., 'tar')."""

    @abstractmethod
    def extract(self, archive: Path, target: Path) -> Receipt:
        """Expand ``archive`` into ``target`` (created if absent).

        On success ``receipt.path`` is ``target`` and
        ``receipt.metadata["members"]`` counts extracted entries.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
