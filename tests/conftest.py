"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from hayride_installer.core.models.settings import InstallerSettings
from tests.archives import build_mirror


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """An empty home directory."""
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    return home_dir


@pytest.fixture
def settings(tmp_path: Path, home: Path) -> InstallerSettings:
    """Settings for a Linux x86_64 bash user living in a temp home."""
    work = tmp_path / "work"
    work.mkdir()
    return InstallerSettings(
        home_dir=home,
        hayride_dir=home / ".hayride",
        system="Linux",
        machine="x86_64",
        shell="/bin/bash",
        temp_dir=work,
    )


@pytest.fixture
def mirror(tmp_path: Path) -> Path:
    """A local release mirror serving the standard test release."""
    return build_mirror(tmp_path / "mirror")
