"""Tests for pi_launcher.config -- defaults, TOML file and env overrides."""

from __future__ import annotations

from pathlib import Path

import pytest

from pi_launcher.config import (
    LauncherConfig,
    default_config_file,
    github_headers,
    load_config,
)


class TestDefaults:
    def test_repo_and_tag(self) -> None:
        cfg = LauncherConfig()
        assert cfg.repo_slug == "0xshariq/package-installer-cli"
        assert cfg.version_tag == "latest"

    def test_local_install_paths_in_lookup_order(self) -> None:
        paths = LauncherConfig().local_install_paths()
        assert paths == [
            Path("node_modules/@0xshariq/package-installer/dist/index.js"),
            Path("node_modules/package-installer-cli/dist/index.js"),
        ]

    @pytest.mark.parametrize(
        ("platform", "name"),
        [
            ("win32", "package-installer-win.exe"),
            ("darwin", "package-installer-macos"),
            ("linux", "package-installer-linux"),
            ("freebsd13", "package-installer-linux"),
        ],
    )
    def test_native_executable_name(self, platform: str, name: str) -> None:
        assert LauncherConfig().native_executable_name(platform) == name

    def test_config_is_frozen(self) -> None:
        cfg = LauncherConfig()
        with pytest.raises(AttributeError):
            cfg.version_tag = "v1"  # type: ignore[misc]


class TestLoadConfig:
    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        assert load_config(tmp_path / "absent.toml") == LauncherConfig()

    def test_file_overrides(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text(
            "[launcher]\n"
            'version_tag = "v3.2.0"\n'
            'cache_root = "~/pi-cache"\n'
            'aliases = ["pi", "pkg"]\n'
            "install_dependencies = false\n"
            'bogus = "ignored"\n',
            encoding="utf-8",
        )
        cfg = load_config(path)
        assert cfg.version_tag == "v3.2.0"
        assert cfg.cache_root == Path("~/pi-cache").expanduser()
        assert cfg.aliases == ("pi", "pkg")
        assert cfg.install_dependencies is False

    def test_malformed_file_is_ignored(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text("[launcher\nversion_tag = ", encoding="utf-8")
        assert load_config(path) == LauncherConfig()

    def test_env_beats_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = tmp_path / "config.toml"
        path.write_text('[launcher]\nversion_tag = "v1"\n', encoding="utf-8")
        monkeypatch.setenv("PI_LAUNCHER_VERSION", "v2")
        monkeypatch.setenv("PI_LAUNCHER_CACHE_DIR", str(tmp_path / "c"))
        monkeypatch.setenv("PI_LAUNCHER_REPO", "someone/fork")
        monkeypatch.setenv("PI_LAUNCHER_NODE", "/opt/node/bin/node")
        monkeypatch.setenv("PI_LAUNCHER_API_URL", "https://ghe.example.com/api/v3/")

        cfg = load_config(path)

        assert cfg.version_tag == "v2"
        assert cfg.cache_root == tmp_path / "c"
        assert (cfg.repo_owner, cfg.repo_name) == ("someone", "fork")
        assert cfg.script_runtime == "/opt/node/bin/node"
        assert cfg.api_url == "https://ghe.example.com/api/v3"

    def test_bad_repo_env_is_ignored(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PI_LAUNCHER_REPO", "no-slash")
        cfg = load_config(tmp_path / "absent.toml")
        assert cfg.repo_slug == LauncherConfig().repo_slug

    def test_config_env_selects_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PI_LAUNCHER_CONFIG", str(tmp_path / "custom.toml"))
        assert default_config_file() == tmp_path / "custom.toml"


class TestGithubHeaders:
    def test_user_agent_always_sent(self) -> None:
        headers = github_headers(LauncherConfig())
        assert headers["User-Agent"] == "pi-launcher"
        assert "Authorization" not in headers

    def test_token_adds_bearer(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GITHUB_TOKEN", "  abc123 ")
        assert github_headers(LauncherConfig())["Authorization"] == "Bearer abc123"

    def test_gh_token_preferred(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GH_TOKEN", "first")
        monkeypatch.setenv("GITHUB_TOKEN", "second")
        assert github_headers(LauncherConfig())["Authorization"] == "Bearer first"
