"""
Artifact models — parsed morph filenames and registry entries.

A morph is published as ``<name>-<major>.<minor>.<patch>.<ext>``
(e.g. ``server-0.0.1.wasm``). In the registry it lives at
``<root>/<version>/<name>.<ext>`` so that several versions of the same
morph can sit side by side.
"""

from __future__ import annotations

import re
from pathlib import PurePath
from typing import Literal

from pydantic import BaseModel

# Default morph extension
WASM_EXTENSION = ".wasm"

_NAME_PATTERN = r"[A-Za-z0-9_-]+"
_VERSION_PATTERN = r"[0-9]+\.[0-9]+\.[0-9]+"

_NAME_RE = re.compile(_NAME_PATTERN)
_VERSION_RE = re.compile(_VERSION_PATTERN)


def is_artifact_name(name: str) -> bool:
    return bool(_NAME_RE.fullmatch(name))


def is_version(version: str) -> bool:
    return bool(_VERSION_RE.fullmatch(version))


def _filename_regex(extension: str) -> re.Pattern[str]:
    return re.compile(
        rf"(?P<name>{_NAME_PATTERN})-(?P<version>{_VERSION_PATTERN}){re.escape(extension)}"
    )


class ArtifactId(BaseModel, frozen=True):
    """A successfully parsed artifact filename."""

    kind: Literal["artifact"] = "artifact"
    name: str
    version: str
    extension: str = WASM_EXTENSION

    @property
    def filename(self) -> str:
        """Name of the file inside its version directory."""
        return f"{self.name}{self.extension}"

    @property
    def relative_path(self) -> PurePath:
        """Location relative to a registry root."""
        return PurePath(self.version) / self.filename

    @property
    def reference(self) -> str:
        """``name@version`` form, as used by the platform config."""
        return f"{self.name}@{self.version}"


class NotAnArtifact(BaseModel, frozen=True):
    """A filename that does not follow the artifact naming scheme."""

    kind: Literal["not_artifact"] = "not_artifact"
    filename: str
    reason: str = ""


def parse_artifact_filename(
    filename: str,
    extension: str = WASM_EXTENSION,
) -> ArtifactId | NotAnArtifact:
    """Split an artifact filename into name and version.

    Any leading directories are stripped first. The match is anchored,
    so ``README.wasm.txt`` or ``server-0.0.1.wasm.bak`` never qualify.

    Args:
        filename: File name or path.
        extension: Expected extension including the dot.

    Returns:
        ``ArtifactId`` on a match, ``NotAnArtifact`` otherwise.
    """
    base = PurePath(filename).name
    if not base.endswith(extension):
        return NotAnArtifact(filename=base, reason=f"does not end with {extension}")

    match = _filename_regex(extension).fullmatch(base)
    if match is None:
        return NotAnArtifact(filename=base, reason="no <name>-<X.Y.Z> version suffix")

    return ArtifactId(
        name=match.group("name"),
        version=match.group("version"),
        extension=extension,
    )


class RegistryEntry(BaseModel):
    """An artifact placed in (or found in) a registry."""

    name: str
    version: str
    path: str

    @property
    def reference(self) -> str:
        return f"{self.name}@{self.version}"
