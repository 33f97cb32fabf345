"""Adapters — bindings for release sources and archive formats.

Public re-exports for convenient access.
"""

from hayride_installer.adapters.archive.tar import TarArchiveAdapter
from hayride_installer.adapters.base import ArchiveAdapter, ReleaseAdapter
from hayride_installer.adapters.mock import MockReleaseAdapter
from hayride_installer.adapters.release.github import GitHubReleaseAdapter
from hayride_installer.adapters.release.local import LocalReleaseAdapter

__all__ = [
    "ArchiveAdapter",
    "GitHubReleaseAdapter",
    "LocalReleaseAdapter",
    "MockReleaseAdapter",
    "ReleaseAdapter",
    "TarArchiveAdapter",
]
