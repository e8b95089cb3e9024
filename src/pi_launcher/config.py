"""Launcher configuration.

All process-wide constants (upstream repository, release tag, cache
namespace, on-disk layout names) live in a single frozen
:class:`LauncherConfig` that is built once at startup by
:func:`load_config` and passed to every component.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

import toml  # type: ignore[import-untyped]
from platformdirs import user_config_dir

logger = logging.getLogger(__name__)

CONFIG_ENV_CACHE_DIR = "PI_LAUNCHER_CACHE_DIR"
CONFIG_ENV_VERSION = "PI_LAUNCHER_VERSION"
CONFIG_ENV_REPO = "PI_LAUNCHER_REPO"
CONFIG_ENV_NODE = "PI_LAUNCHER_NODE"
CONFIG_ENV_API_URL = "PI_LAUNCHER_API_URL"
CONFIG_ENV_FILE = "PI_LAUNCHER_CONFIG"


@dataclass(frozen=True)
class LauncherConfig:
    """Immutable settings shared by the router, resolver and delegate."""

    repo_owner: str = "0xshariq"
    repo_name: str = "package-installer-cli"
    version_tag: str = "latest"
    api_url: str = "https://api.github.com"
    user_agent: str = "pi-launcher"

    cache_namespace: str = "package-installer-cli"
    cache_root: Path | None = None
    dist_dir: str = "dist"
    entry_point: str = "index.js"
    manifest: str = "package.json"
    dependency_dir: str = "node_modules"
    install_dependencies: bool = True

    vendor: str = "@0xshariq"
    tool: str = "package-installer"
    legacy_packages: tuple[str, ...] = ("package-installer-cli",)
    max_parent_levels: int = 5

    aliases: tuple[str, ...] = ("pi", "package-installer")
    trigger: str = "pi"
    script_runtime: str = "node"

    bundle_dir: str = "bundle"
    bundle_script_variants: tuple[str, ...] = ("pkg-ready", "standalone")
    native_executables: dict[str, str] = field(
        default_factory=lambda: {
            "win32": "package-installer-win.exe",
            "darwin": "package-installer-macos",
            "linux": "package-installer-linux",
        }
    )

    @property
    def repo_slug(self) -> str:
        return f"{self.repo_owner}/{self.repo_name}"

    def local_install_paths(self) -> list[Path]:
        """Relative paths of a project-local install, in lookup order."""
        modules = Path(self.dependency_dir)
        packages = [Path(self.vendor) / self.tool]
        packages.extend(Path(name) for name in self.legacy_packages)
        return [modules / pkg / self.dist_dir / self.entry_point for pkg in packages]

    def native_executable_name(self, platform: str) -> str:
        """Bundled native executable name for a ``sys.platform`` value."""
        if platform.startswith("win"):
            return self.native_executables["win32"]
        if platform == "darwin":
            return self.native_executables["darwin"]
        return self.native_executables["linux"]


def default_config_file() -> Path:
    """Return the user config file location (may not exist)."""
    if env_path := os.environ.get(CONFIG_ENV_FILE):
        return Path(env_path)
    return Path(user_config_dir("pi-launcher")) / "config.toml"


def _load_file_overrides(path: Path) -> dict[str, Any]:
    """Read the ``[launcher]`` table from *path*.

    Unknown keys are dropped; a missing, unreadable or malformed file yields
    no overrides.
    """
    if not path.is_file():
        return {}
    try:
        data = toml.load(path)
    except (toml.TomlDecodeError, OSError) as exc:
        logger.warning("Ignoring unreadable launcher config %s: %s", path, exc)
        return {}

    section = data.get("launcher")
    if not isinstance(section, dict):
        return {}

    known = {f.name for f in fields(LauncherConfig)}
    overrides: dict[str, Any] = {}
    for key, value in section.items():
        if key not in known:
            logger.debug("Unknown launcher config key %r in %s", key, path)
            continue
        if key == "cache_root":
            value = Path(str(value)).expanduser()
        elif isinstance(value, list):
            value = tuple(str(v) for v in value)
        overrides[key] = value
    return overrides


def _load_env_overrides() -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if cache_dir := os.environ.get(CONFIG_ENV_CACHE_DIR):
        overrides["cache_root"] = Path(cache_dir).expanduser()
    if version := os.environ.get(CONFIG_ENV_VERSION):
        overrides["version_tag"] = version.strip()
    if repo := os.environ.get(CONFIG_ENV_REPO):
        owner, sep, name = repo.strip().partition("/")
        if sep and owner and name:
            overrides["repo_owner"] = owner
            overrides["repo_name"] = name
        else:
            logger.warning("Ignoring %s=%r (expected owner/name)", CONFIG_ENV_REPO, repo)
    if node := os.environ.get(CONFIG_ENV_NODE):
        overrides["script_runtime"] = node
    if api_url := os.environ.get(CONFIG_ENV_API_URL):
        overrides["api_url"] = api_url.rstrip("/")
    return overrides


def load_config(config_file: Path | None = None) -> LauncherConfig:
    """Build the launcher configuration.

    Resolution order (later wins):
    1. Built-in defaults
    2. ``[launcher]`` table of the user config file
    3. ``PI_LAUNCHER_*`` environment variables
    """
    path = config_file if config_file is not None else default_config_file()
    config = LauncherConfig()
    file_overrides = _load_file_overrides(path)
    if file_overrides:
        config = replace(config, **file_overrides)
    env_overrides = _load_env_overrides()
    if env_overrides:
        config = replace(config, **env_overrides)
    return config


def github_token() -> str | None:
    """Return a sanitized GitHub token from the environment, or None."""
    return (os.getenv("GH_TOKEN") or os.getenv("GITHUB_TOKEN") or "").strip() or None


def github_headers(config: LauncherConfig) -> dict[str, str]:
    """Headers sent with every GitHub request."""
    headers = {
        "User-Agent": config.user_agent,
        "Accept": "application/vnd.github+json",
    }
    token = github_token()
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers
