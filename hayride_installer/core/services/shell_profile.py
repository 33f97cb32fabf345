"""
Shell profile integration — put ``$HAYRIDE_HOME/bin`` on the user's PATH.

Finds the profile file for the user's shell and appends a small
``HAYRIDE_HOME`` / ``PATH`` block. The write is idempotent: if the file
already mentions ``HAYRIDE_HOME`` it is left untouched.

When no profile can be found the block is handed back to the caller so
it can be printed as manual instructions. That is never fatal.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

logger = logging.getLogger(__name__)

# Presence of this token in a profile means we already ran
SENTINEL = "HAYRIDE_HOME"

# Candidate order for shells we don't recognize, relative to $HOME
_FALLBACK_PROFILES = {
    "Darwin": (".profile", ".bash_profile", ".bashrc", ".zshrc", ".config/fish/config.fish"),
    "default": (".profile", ".bashrc", ".bash_profile", ".zshrc", ".config/fish/config.fish"),
}

_BASH_PROFILES = {
    "Darwin": (".bash_profile", ".bashrc"),
    "default": (".bashrc", ".bash_profile"),
}

# Shells whose profile is used even if it doesn't exist yet
_FIXED_PROFILES = {
    "zsh": ".zshrc",
    "fish": ".config/fish/config.fish",
}


@dataclass
class ProfileResult:
    """What happened to the shell profile."""

    status: Literal["updated", "already_present", "not_detected", "skipped"]
    profile: Path | None
    block: str

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "profile": str(self.profile) if self.profile else None,
            "block": self.block,
        }


def _first_existing(home: Path, candidates: tuple[str, ...]) -> Path | None:
    for rel in candidates:
        path = home / rel
        if path.is_file():
            return path
    return None


def detect_profile(
    shell_name: str,
    system: str,
    home: Path,
    profile_override: Path | None = None,
) -> Path | None:
    """Pick the profile file to patch.

    Args:
        shell_name: Basename of ``$SHELL`` (``bash``, ``zsh``, ``fish``, ...).
        system: ``uname -s`` value (``Darwin``, ``Linux``, ...).
        home: User home directory.
        profile_override: ``$PROFILE``; wins if it names an existing file.

    Returns:
        Profile path, or None if nothing suitable was found.
    """
    if profile_override is not None and Path(profile_override).is_file():
        return Path(profile_override)

    key = "Darwin" if system == "Darwin" else "default"

    if shell_name == "bash":
        return _first_existing(home, _BASH_PROFILES[key])

    if shell_name in _FIXED_PROFILES:
        return home / _FIXED_PROFILES[shell_name]

    return _first_existing(home, _FALLBACK_PROFILES[key])


def build_path_block(profile: Path | None, hayride_dir: Path) -> str:
    """Shell snippet exporting HAYRIDE_HOME and prepending its bin dir to PATH.

    fish gets its own syntax; everything else gets POSIX ``export``.
    """
    if profile is not None and profile.name.endswith(".fish"):
        return (
            "\n"
            f'set -gx HAYRIDE_HOME "{hayride_dir}"\n'
            "\n"
            'string match -r ".hayride" "$PATH" > /dev/null; '
            'or set -gx PATH "$HAYRIDE_HOME/bin" $PATH\n'
        )
    return (
        "\n"
        f'export HAYRIDE_HOME="{hayride_dir}"\n'
        "\n"
        'export PATH="$HAYRIDE_HOME/bin:$PATH"\n'
    )


def integrate_profile(
    shell_name: str,
    system: str,
    home: Path,
    hayride_dir: Path,
    profile_override: Path | None = None,
) -> ProfileResult:
    """Detect the profile and append the PATH block unless already present.

    Raises:
        OSError: The detected profile exists but cannot be read or written.
    """
    profile = detect_profile(shell_name, system, home, profile_override)
    block = build_path_block(profile, hayride_dir)

    if profile is None:
        logger.warning("Could not detect a shell profile for shell %r", shell_name or "?")
        return ProfileResult(status="not_detected", profile=None, block=block)

    # Byte-level check; profiles may be in any encoding
    existing = profile.read_bytes() if profile.is_file() else b""
    if SENTINEL.encode() in existing:
        logger.info("Profile %s already contains %s", profile, SENTINEL)
        return ProfileResult(status="already_present", profile=profile, block=block)

    profile.parent.mkdir(parents=True, exist_ok=True)
    with profile.open("a", encoding="utf-8") as f:
        f.write(block)

    logger.info("Appended %s and PATH setup to %s", SENTINEL, profile)
    return ProfileResult(status="updated", profile=profile, block=block)
