"""
Domain models — Pydantic types for the installer.

All models are re-exported here for convenient access:

    from hayride_installer.core.models import ArtifactId, Receipt, InstallerSettings
"""

from hayride_installer.core.models.artifact import (
    ArtifactId,
    NotAnArtifact,
    RegistryEntry,
    parse_artifact_filename,
)
from hayride_installer.core.models.receipt import Receipt
from hayride_installer.core.models.settings import (
    CORE_NAMESPACE,
    HAYRIDE_NAMESPACE,
    InstallerSettings,
)

__all__ = [
    # artifact.py
    "ArtifactId",
    "NotAnArtifact",
    "RegistryEntry",
    "parse_artifact_filename",
    # receipt.py
    "Receipt",
    # settings.py
    "CORE_NAMESPACE",
    "HAYRIDE_NAMESPACE",
    "InstallerSettings",
]
