"""Per-user cache location and launcher install directory discovery.

Provides the canonical functions for locating:
- The per-user cache root that holds the provisioned tool
- The directory of the launcher's own executable (for bundled artifacts)
"""

from __future__ import annotations

import sys
from pathlib import Path

from platformdirs import user_cache_dir

from pi_launcher.config import LauncherConfig


def get_cache_root(config: LauncherConfig) -> Path:
    """Return the per-user cache directory for the provisioned tool.

    Resolution order:
    1. ``config.cache_root`` (set from ``PI_LAUNCHER_CACHE_DIR`` or the config file)
    2. ``<platform user cache dir>/<cache_namespace>`` via platformdirs

    The directory is not created here; see :class:`CacheStore`.
    """
    if config.cache_root is not None:
        return config.cache_root
    return Path(user_cache_dir(appauthor=False)) / config.cache_namespace


def get_launcher_dir() -> Path:
    """Return the directory containing the running launcher executable.

    Frozen builds report their binary through ``sys.executable``; otherwise
    the console-script path in ``sys.argv[0]`` is used.
    """
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    if sys.argv and sys.argv[0]:
        return Path(sys.argv[0]).resolve().parent
    return Path.cwd()
