"""Read-only lookups for a tool copy that is already on disk."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from pi_launcher.config import LauncherConfig
from pi_launcher.runtime.home import get_launcher_dir

logger = logging.getLogger(__name__)


class LocalInstallLocator:
    """Finds a project-local ``node_modules`` install of the tool.

    The fixed relative paths are tried at the working directory, then at each
    parent directory up to ``config.max_parent_levels`` levels above it.
    """

    def __init__(self, config: LauncherConfig, cwd: Path | None = None) -> None:
        self.config = config
        self.cwd = cwd

    def search_dirs(self) -> list[Path]:
        start = (self.cwd or Path.cwd()).resolve()
        dirs = [start]
        for parent in start.parents:
            if len(dirs) > self.config.max_parent_levels:
                break
            dirs.append(parent)
        return dirs

    def find(self) -> Path | None:
        relative_paths = self.config.local_install_paths()
        for directory in self.search_dirs():
            for rel in relative_paths:
                candidate = directory / rel
                if candidate.is_file():
                    logger.debug("Local install found at %s", candidate)
                    return candidate
        return None


class BundledArtifactLocator:
    """Finds artifacts shipped in a ``bundle/`` directory.

    Every lookup checks the launcher's own directory first and then the
    working directory (development checkouts).
    """

    def __init__(
        self,
        config: LauncherConfig,
        launcher_dir: Path | None = None,
        cwd: Path | None = None,
        platform: str | None = None,
    ) -> None:
        self.config = config
        self.launcher_dir = launcher_dir
        self.cwd = cwd
        self.platform = platform or sys.platform

    def base_dirs(self) -> list[Path]:
        bases = [self.launcher_dir or get_launcher_dir(), self.cwd or Path.cwd()]
        unique: list[Path] = []
        for base in bases:
            if base not in unique:
                unique.append(base)
        return unique

    def _first_existing(self, relative: Path) -> Path | None:
        for base in self.base_dirs():
            candidate = base / self.config.bundle_dir / relative
            if candidate.is_file():
                logger.debug("Bundled artifact found at %s", candidate)
                return candidate
        return None

    def find_script(self, variant: str) -> Path | None:
        """Locate ``bundle/<variant>/<entry point>``."""
        return self._first_existing(Path(variant) / self.config.entry_point)

    def native_executable_name(self) -> str:
        return self.config.native_executable_name(self.platform)

    def find_native(self) -> Path | None:
        """Locate ``bundle/executables/<platform executable name>``."""
        return self._first_existing(Path("executables") / self.native_executable_name())
