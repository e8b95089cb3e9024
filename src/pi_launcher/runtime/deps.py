"""Install the cached tool's Node.js dependencies.

The install only runs when the cache holds a ``package.json`` but no
``node_modules/``. The package manager is picked from lockfile evidence and
confirmed with a ``--version`` query; npm is the fallback.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path

from pi_launcher.errors import DependencyInstallError
from pi_launcher.runtime.cache import CacheStore

logger = logging.getLogger(__name__)

DEFAULT_MANAGER = "npm"

# Checked in order; the first lockfile present implies the manager.
LOCKFILE_MANAGERS: tuple[tuple[str, str], ...] = (
    ("pnpm-lock.yaml", "pnpm"),
    ("yarn.lock", "yarn"),
    ("bun.lockb", "bun"),
    ("bun.lock", "bun"),
    ("package-lock.json", "npm"),
)

INSTALL_COMMANDS: dict[str, list[str]] = {
    "pnpm": ["pnpm", "install", "--prod", "--reporter=append-only"],
    "yarn": ["yarn", "install", "--production", "--non-interactive"],
    "bun": ["bun", "install", "--production"],
    "npm": ["npm", "install", "--omit=dev", "--no-audit", "--no-fund"],
}

KNOWN_MANAGERS: tuple[str, ...] = ("npm", "pnpm", "yarn", "bun")


def is_manager_available(manager: str) -> bool:
    """Return True if ``<manager> --version`` runs successfully."""
    binary = shutil.which(manager)
    if binary is None:
        return False
    try:
        subprocess.run(
            [binary, "--version"],
            check=True,
            capture_output=True,
        )
        return True
    except (subprocess.CalledProcessError, OSError):
        return False


def available_managers() -> list[str]:
    return [manager for manager in KNOWN_MANAGERS if is_manager_available(manager)]


def manual_install_commands(root: Path, managers: list[str]) -> list[str]:
    """Commands a user can run by hand to finish the install."""
    return [f'cd "{root}" && {" ".join(INSTALL_COMMANDS[m])}' for m in managers]


class DependencyInstaller:
    """Runs the production dependency install inside the cache root."""

    def __init__(self, cache: CacheStore) -> None:
        self.cache = cache

    def needs_install(self) -> bool:
        return self.cache.manifest.is_file() and not self.cache.dependencies_installed()

    def select_manager(self) -> str:
        root = self.cache.root
        for lockfile, manager in LOCKFILE_MANAGERS:
            if not (root / lockfile).exists():
                continue
            if is_manager_available(manager):
                logger.debug("Selected %s from %s", manager, lockfile)
                return manager
            logger.debug("%s present but %s is not available", lockfile, manager)
            return DEFAULT_MANAGER
        return DEFAULT_MANAGER

    def ensure(self) -> bool:
        """Install dependencies if needed.

        Returns:
            True if an install ran and succeeded, False if none was needed.

        Raises:
            DependencyInstallError: The install command could not start or
                exited non-zero.
        """
        if not self.needs_install():
            return False

        root = self.cache.root
        manager = self.select_manager()
        command = INSTALL_COMMANDS[manager]
        # npm and friends are .cmd shims on Windows; spawn the resolved path.
        command = [shutil.which(manager) or manager, *command[1:]]
        logger.debug("Running %s in %s", " ".join(command), root)
        try:
            result = subprocess.run(command, cwd=root)
        except OSError as exc:
            raise DependencyInstallError(
                f"Could not run {manager}: {exc}",
                manual_commands=manual_install_commands(root, available_managers()),
            ) from exc

        if result.returncode != 0:
            raise DependencyInstallError(
                f"{manager} install exited with code {result.returncode}",
                manual_commands=manual_install_commands(root, available_managers()),
            )
        return True
