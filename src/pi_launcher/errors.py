"""Exceptions raised by the launcher."""

from __future__ import annotations


class LauncherError(Exception):
    """Base class for launcher failures."""


class ProvisioningError(LauncherError):
    """Fetching, unpacking or copying a remote release failed."""


class DependencyInstallError(LauncherError):
    """Installing the cached tool's dependencies failed.

    Carries the manual commands the user can run instead, one per package
    manager found on this machine.
    """

    def __init__(self, message: str, *, manual_commands: list[str] | None = None) -> None:
        super().__init__(message)
        self.manual_commands = manual_commands or []
