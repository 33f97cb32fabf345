"""
Settings loader — builds InstallerSettings from the process environment.

This is the only place that reads environment variables or asks the
``platform`` module about the host. Everything downstream receives an
``InstallerSettings`` instance, which keeps the services testable
against a temp directory.

Recognized variables:
    HOME                   user home (required)
    SHELL                  login shell, used for profile detection
    PROFILE                explicit shell profile to patch
    HAYRIDE_DIR            install root (default: $HOME/.hayride)
    HAYRIDE_RELEASE_REPO   GitHub ``owner/repo`` publishing releases
    HAYRIDE_MODEL_URL      model artifact fetched by ``install-core``
"""

from __future__ import annotations

import logging
import os
import platform
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from hayride_installer.core.errors import ConfigError
from hayride_installer.core.models.settings import DEFAULT_RELEASE_REPO, InstallerSettings

logger = logging.getLogger(__name__)

__all__ = ["ConfigError", "load_settings"]

HAYRIDE_DIR_NAME = ".hayride"


def load_settings(
    environ: Mapping[str, str] | None = None,
    **overrides: Any,
) -> InstallerSettings:
    """Resolve installer settings.

    Args:
        environ: Environment mapping (default: ``os.environ``).
        **overrides: Field values that win over the environment
            (e.g. ``model_url`` from a CLI option).

    Returns:
        Validated InstallerSettings.

    Raises:
        ConfigError: HOME is unset or a value fails validation.
    """
    env = os.environ if environ is None else environ

    home = env.get("HOME", "")
    if not home:
        raise ConfigError("HOME is not set; cannot determine where to install.")

    home_dir = Path(home).expanduser()
    hayride_dir = Path(env["HAYRIDE_DIR"]).expanduser() if env.get("HAYRIDE_DIR") else home_dir / HAYRIDE_DIR_NAME
    profile = env.get("PROFILE", "")

    values: dict[str, Any] = {
        "home_dir": home_dir,
        "hayride_dir": hayride_dir,
        "system": platform.system(),
        "machine": platform.machine(),
        "shell": env.get("SHELL", ""),
        "profile": Path(profile).expanduser() if profile else None,
        "release_repo": env.get("HAYRIDE_RELEASE_REPO") or DEFAULT_RELEASE_REPO,
        "model_url": env.get("HAYRIDE_MODEL_URL") or None,
    }
    values.update({k: v for k, v in overrides.items() if v is not None})

    try:
        settings = InstallerSettings.model_validate(values)
    except ValidationError as e:
        raise ConfigError(f"Invalid installer settings: {e}") from e

    logger.debug("Install root: %s (shell=%s)", settings.hayride_dir, settings.shell_name or "?")
    return settings
