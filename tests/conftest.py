from __future__ import annotations

import io
import tarfile
from pathlib import Path
from typing import Callable

import pytest

from pi_launcher.config import LauncherConfig

_LAUNCHER_ENV = (
    "PI_LAUNCHER_CACHE_DIR",
    "PI_LAUNCHER_VERSION",
    "PI_LAUNCHER_REPO",
    "PI_LAUNCHER_NODE",
    "PI_LAUNCHER_API_URL",
    "PI_LAUNCHER_DEBUG",
    "GH_TOKEN",
    "GITHUB_TOKEN",
)

RELEASE_TOP_DIR = "0xshariq-package-installer-cli-1a2b3c4"


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep user config, tokens and cache overrides out of every test."""
    for name in _LAUNCHER_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("PI_LAUNCHER_CONFIG", str(tmp_path / "no-such-config.toml"))


@pytest.fixture()
def cache_root(tmp_path: Path) -> Path:
    return tmp_path / "cache" / "package-installer-cli"


@pytest.fixture()
def config(cache_root: Path) -> LauncherConfig:
    return LauncherConfig(cache_root=cache_root)


def build_tarball(files: dict[str, str], top: str | None = RELEASE_TOP_DIR) -> bytes:
    """Build a gzipped tarball in memory, wrapping *files* in *top* when given."""
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
        for name, content in files.items():
            data = content.encode("utf-8")
            info = tarfile.TarInfo(f"{top}/{name}" if top else name)
            info.size = len(data)
            info.mode = 0o644
            tar.addfile(info, io.BytesIO(data))
    return buffer.getvalue()


@pytest.fixture()
def release_tarball() -> Callable[..., bytes]:
    return build_tarball


@pytest.fixture()
def release_files() -> dict[str, str]:
    return {
        "dist/index.js": "console.log('pi');\n",
        "dist/utils/banner.js": "export default {};\n",
        "package.json": '{"name": "@0xshariq/package-installer"}\n',
        "package-lock.json": "{}\n",
        "README.md": "# Package Installer CLI\n",
    }
