"""
Installer settings — every path and host fact an install run depends on.

The settings are built once (see ``core.config.loader``) and passed
explicitly to the services, so nothing downstream reads ``$HOME`` or
``$SHELL`` on its own.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

# Registry namespaces
HAYRIDE_NAMESPACE = "hayride"
CORE_NAMESPACE = "hayride-core"

DEFAULT_RELEASE_REPO = "hayride-dev/releases"


class InstallerSettings(BaseModel):
    """Resolved installer configuration."""

    home_dir: Path
    hayride_dir: Path

    # Host facts (uname -s / uname -m, $SHELL, $PROFILE)
    system: str = ""
    machine: str = ""
    shell: str = ""
    profile: Path | None = None

    release_repo: str = DEFAULT_RELEASE_REPO
    model_url: str | None = None
    temp_dir: Path | None = None    # None = system default

    namespaces: list[str] = Field(
        default_factory=lambda: [HAYRIDE_NAMESPACE, CORE_NAMESPACE]
    )

    @property
    def bin_dir(self) -> Path:
        return self.hayride_dir / "bin"

    @property
    def compositions_dir(self) -> Path:
        return self.hayride_dir / "compositions"

    @property
    def models_dir(self) -> Path:
        return self.hayride_dir / "ai" / "models"

    @property
    def registry_dir(self) -> Path:
        return self.hayride_dir / "registry" / "morphs"

    @property
    def config_file(self) -> Path:
        return self.hayride_dir / "config.yaml"

    @property
    def registry_roots(self) -> dict[str, Path]:
        """Registry root directory per namespace."""
        return {ns: self.registry_dir / ns for ns in self.namespaces}

    def registry_root(self, namespace: str) -> Path:
        """Registry root for one namespace (need not be declared)."""
        return self.registry_dir / namespace

    @property
    def release_base_url(self) -> str:
        return f"https://github.com/{self.release_repo}/releases"

    @property
    def api_url(self) -> str:
        return f"https://api.github.com/repos/{self.release_repo}/releases/latest"

    @property
    def shell_name(self) -> str:
        """Basename of ``$SHELL`` (``/usr/bin/zsh`` → ``zsh``)."""
        return Path("/" + self.shell).name if self.shell else ""
