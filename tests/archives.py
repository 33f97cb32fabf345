"""
Release archive builders shared by the install and adapter tests.
"""

import io
import tarfile
from pathlib import Path

RELEASE_TAG = "v0.0.6-alpha"

# Contents of the core morphs archive used across install tests
CORE_ARCHIVE_FILES = {
    "core/server-0.0.1.wasm": b"core-server",
    "core/cli-0.0.1.wasm": b"core-cli",
    "core/cfg-0.0.1.wasm": b"core-cfg",
    "core/README.wasm.txt": b"not a morph",
    "hayride/llama-0.0.2.wasm": b"llama",
    "hayride/nested/ai-server-0.0.1.wasm": b"ai-server",
    "compositions/feature-ai.wac": b"compose",
}

BINARY_ARCHIVE_FILES = {
    "hayride": b"#!/bin/sh\necho hayride\n",
}


def write_tar_xz(path: Path, files: dict[str, bytes]) -> Path:
    """Create a .tar.xz archive holding the given relative paths."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with tarfile.open(path, "w:xz") as tar:
        for name, content in files.items():
            info = tarfile.TarInfo(name=name)
            info.size = len(content)
            info.mode = 0o755
            tar.addfile(info, io.BytesIO(content))
    return path


def platform_archive_name(tag: str = RELEASE_TAG) -> str:
    return f"hayride-{tag}-x86_64-linux-gnu.tar.xz"


def build_mirror(root: Path, core_files: dict[str, bytes] | None = None) -> Path:
    """A local release mirror with one release for linux-gnu/x86_64."""
    release_dir = root / "download" / RELEASE_TAG
    write_tar_xz(release_dir / platform_archive_name(), BINARY_ARCHIVE_FILES)
    write_tar_xz(
        release_dir / "hayride-core.tar.xz",
        CORE_ARCHIVE_FILES if core_files is None else core_files,
    )
    (root / "latest").write_text(RELEASE_TAG + "\n")
    return root
