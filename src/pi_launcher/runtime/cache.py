"""Per-user cache slot for the provisioned tool.

Layout under the cache root::

    dist/index.js        runnable entry point
    package.json         manifest (full provisioning only)
    *.lock / *-lock.*    lockfiles (full provisioning only)
    node_modules/        dependency install marker
    temp/                unpack area, only present while provisioning
    .provision.lock      advisory lock for provision-and-install

There is a single slot per user; a fresh provisioning run overwrites it.
An existing entry point is trusted without any version or checksum check.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from filelock import FileLock

from pi_launcher.config import LauncherConfig
from pi_launcher.runtime.home import get_cache_root

logger = logging.getLogger(__name__)


class CacheStore:
    """Owns the cache root: path layout, existence checks and locking."""

    def __init__(self, config: LauncherConfig, root: Path | None = None) -> None:
        self.config = config
        self._root = root

    @property
    def root(self) -> Path:
        """The cache root, created on first access."""
        if self._root is None:
            self._root = get_cache_root(self.config)
        self._root.mkdir(parents=True, exist_ok=True)
        return self._root

    @property
    def entry_point(self) -> Path:
        return self.root / self.config.dist_dir / self.config.entry_point

    @property
    def dist_path(self) -> Path:
        return self.root / self.config.dist_dir

    @property
    def manifest(self) -> Path:
        return self.root / self.config.manifest

    @property
    def dependency_dir(self) -> Path:
        return self.root / self.config.dependency_dir

    @property
    def temp_dir(self) -> Path:
        return self.root / "temp"

    @property
    def lock_path(self) -> Path:
        return self.root / ".provision.lock"

    def has_entry_point(self) -> bool:
        return self.entry_point.is_file()

    def dependencies_installed(self) -> bool:
        return self.dependency_dir.is_dir()

    def lock(self) -> FileLock:
        """Advisory lock serialising provision-and-install across processes."""
        return FileLock(str(self.lock_path))

    def reset_temp(self) -> Path:
        """Remove any stale unpack area and return a fresh, empty one."""
        temp = self.temp_dir
        if temp.exists():
            logger.debug("Removing stale temp directory %s", temp)
            shutil.rmtree(temp)
        temp.mkdir(parents=True)
        return temp

    def discard_temp(self) -> None:
        if self.temp_dir.exists():
            shutil.rmtree(self.temp_dir, ignore_errors=True)

    def populate_from(self, source: Path, *, full: bool) -> None:
        """Copy a provisioned release tree into the cache root.

        Args:
            source: Top-level directory of an unpacked release.
            full: Copy the whole tree (manifest, lockfiles, sources) when True,
                otherwise only the runnable ``dist`` subtree.
        """
        root = self.root
        if not full:
            src_dist = source / self.config.dist_dir
            if not src_dist.is_dir():
                raise FileNotFoundError(f"Release has no {self.config.dist_dir}/ directory: {source}")
            shutil.copytree(src_dist, self.dist_path, dirs_exist_ok=True)
            return

        for item in source.iterdir():
            dest = root / item.name
            if item.is_dir():
                shutil.copytree(item, dest, dirs_exist_ok=True)
            else:
                shutil.copy2(item, dest)
