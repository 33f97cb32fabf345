"""
Installer error hierarchy.

Every fatal condition in an install run raises a subclass of
``InstallerError``. The CLI catches the base class, prints the message
and exits with status 1. Non-fatal conditions (unparseable artifact
names, an undetectable shell profile) are logged and never raised.
"""

from __future__ import annotations


class InstallerError(Exception):
    """Base class for all fatal installer errors."""


class ConfigError(InstallerError):
    """Raised when installer settings or the platform config are invalid."""


class DetectionError(InstallerError):
    """Raised when the host architecture or OS cannot be resolved or is unsupported."""


class DownloadError(InstallerError):
    """Raised when a release lookup or archive download fails."""


class ExtractionError(InstallerError):
    """Raised when a downloaded archive cannot be expanded."""


class RegistrationError(InstallerError):
    """Raised when artifacts cannot be placed into a registry.

    Carries the partial ``RegistrationReport`` when the failure happened
    after some files were already processed.
    """

    def __init__(self, message: str, report=None):
        super().__init__(message)
        self.report = report
