"""Ordered fallback chain that finds (or provisions) a runnable tool.

Strategies, checked in order:
1. LOCAL    -- ``node_modules`` install in the working directory or up to 5 parents
2. CACHE    -- per-user cache, downloading the latest release when empty
3. BUNDLED  -- ``bundle/pkg-ready`` then ``bundle/standalone`` scripts
4. NATIVE   -- ``bundle/executables/<platform binary>``

Each strategy's ``attempt()`` returns a candidate or None (not applicable).
Whether a candidate that fails to run lets the chain continue is decided per
strategy by ``continue_on_spawn_failure`` and ``continue_on_exit_failure``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, Sequence

import httpx
from rich.console import Console

from pi_launcher.cli import ui
from pi_launcher.config import LauncherConfig
from pi_launcher.errors import DependencyInstallError, ProvisioningError
from pi_launcher.models import (
    ArtifactKind,
    ArtifactOrigin,
    ExecutionOutcome,
    ResolutionCandidate,
    RunResult,
)
from pi_launcher.runtime.cache import CacheStore
from pi_launcher.runtime.delegate import ProcessDelegate
from pi_launcher.runtime.deps import DependencyInstaller
from pi_launcher.runtime.locators import BundledArtifactLocator, LocalInstallLocator
from pi_launcher.runtime.provision import RemoteProvisioner

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

class ResolutionStrategy:
    """One step of the fallback chain."""

    name = "strategy"
    continue_on_spawn_failure = False
    continue_on_exit_failure = False

    def attempt(self) -> ResolutionCandidate | None:
        raise NotImplementedError


class LocalInstallStrategy(ResolutionStrategy):
    """A project-local install is the developer's explicit choice; its outcome is final."""

    name = "local"

    def __init__(self, locator: LocalInstallLocator) -> None:
        self.locator = locator

    def attempt(self) -> ResolutionCandidate | None:
        path = self.locator.find()
        if path is None:
            return None
        return ResolutionCandidate(ArtifactKind.SCRIPT, path, ArtifactOrigin.LOCAL_PROJECT)


class CacheStrategy(ResolutionStrategy):
    """Use the cached copy, provisioning it and its dependencies on demand."""

    name = "cache"
    continue_on_spawn_failure = True

    def __init__(
        self,
        cache: CacheStore,
        provisioner: RemoteProvisioner,
        installer: DependencyInstaller,
        console: Console | None = None,
    ) -> None:
        self.cache = cache
        self.provisioner = provisioner
        self.installer = installer
        self.console = console

    def attempt(self) -> ResolutionCandidate | None:
        try:
            with self.cache.lock():
                # Re-checked under the lock: a concurrent launcher may have
                # finished provisioning while we waited.
                if not self.cache.has_entry_point():
                    if not self._provision():
                        return None
                self._install_dependencies()
        except OSError as exc:
            logger.warning("Cache directory unusable: %s", exc)
            return None
        return ResolutionCandidate(ArtifactKind.SCRIPT, self.cache.entry_point, ArtifactOrigin.CACHE)

    def _provision(self) -> bool:
        ui.status("CLI not found in cache, downloading from GitHub...", out=self.console)
        try:
            release = self.provisioner.provision(self.cache)
        except ProvisioningError as exc:
            logger.debug("Provisioning failed: %s", exc)
            ui.print_provisioning_failure(exc, out=self.console)
            return False
        label = f"CLI {release.tag_name}" if release.tag_name else "CLI"
        ui.status(f"{label} downloaded successfully", out=self.console)
        return True

    def _install_dependencies(self) -> None:
        if not self.installer.needs_install():
            return
        ui.status("Installing CLI dependencies...", out=self.console)
        try:
            self.installer.ensure()
        except DependencyInstallError as exc:
            logger.debug("Dependency install failed: %s", exc)
            ui.print_dependency_failure(exc, out=self.console)
            return
        ui.status("Dependencies installed", out=self.console)


class BundledScriptStrategy(ResolutionStrategy):
    """A bundled script variant; any failure moves on to the next candidate."""

    continue_on_spawn_failure = True
    continue_on_exit_failure = True

    def __init__(self, locator: BundledArtifactLocator, variant: str) -> None:
        self.locator = locator
        self.variant = variant
        self.name = f"bundled-{variant}"

    def attempt(self) -> ResolutionCandidate | None:
        path = self.locator.find_script(self.variant)
        if path is None:
            return None
        return ResolutionCandidate(ArtifactKind.SCRIPT, path, ArtifactOrigin.BUNDLED)


class BundledNativeStrategy(ResolutionStrategy):
    name = "bundled-native"

    def __init__(self, locator: BundledArtifactLocator) -> None:
        self.locator = locator

    def attempt(self) -> ResolutionCandidate | None:
        path = self.locator.find_native()
        if path is None:
            return None
        return ResolutionCandidate(ArtifactKind.NATIVE_EXECUTABLE, path, ArtifactOrigin.BUNDLED)


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------

class Resolver:
    """Iterates the strategy chain and hands candidates to the delegate."""

    def __init__(
        self,
        strategies: Sequence[ResolutionStrategy],
        delegate: ProcessDelegate,
        console: Console | None = None,
    ) -> None:
        self.strategies = list(strategies)
        self.delegate = delegate
        self.console = console

    @classmethod
    def default(
        cls,
        config: LauncherConfig,
        *,
        cwd: Path | None = None,
        launcher_dir: Path | None = None,
        client: httpx.Client | None = None,
        platform: str | None = None,
        console: Console | None = None,
    ) -> "Resolver":
        """Build the standard chain from *config*."""
        cache = CacheStore(config)
        bundled = BundledArtifactLocator(config, launcher_dir=launcher_dir, cwd=cwd, platform=platform)
        strategies: list[ResolutionStrategy] = [
            LocalInstallStrategy(LocalInstallLocator(config, cwd=cwd)),
            CacheStrategy(
                cache,
                RemoteProvisioner(config, client=client),
                DependencyInstaller(cache),
                console=console,
            ),
        ]
        strategies.extend(BundledScriptStrategy(bundled, v) for v in config.bundle_script_variants)
        strategies.append(BundledNativeStrategy(bundled))
        return cls(strategies, ProcessDelegate(config), console=console)

    def candidates(self) -> Iterator[tuple[ResolutionStrategy, ResolutionCandidate]]:
        """Yield candidates lazily so later strategies only run when needed."""
        for strategy in self.strategies:
            candidate = strategy.attempt()
            if candidate is None:
                logger.debug("Strategy %s not applicable", strategy.name)
                continue
            yield strategy, candidate

    def resolve(self) -> ResolutionCandidate | None:
        """Return the first candidate in priority order, or None."""
        for _strategy, candidate in self.candidates():
            return candidate
        return None

    def run(self, args: Sequence[str]) -> RunResult:
        """Run the best candidate with *args*.

        Returns:
            A :class:`RunResult` carrying the final outcome, or an exhausted
            result (with the last fall-through outcome, if any) when no
            candidate ended the chain.
        """
        last: ExecutionOutcome | None = None
        for strategy, candidate in self.candidates():
            ui.announce(candidate, out=self.console)
            outcome = self.delegate.run(candidate, args)
            if outcome.spawn_failed and strategy.continue_on_spawn_failure:
                logger.warning("%s", outcome.error)
                last = outcome
                continue
            if (
                not outcome.spawn_failed
                and outcome.exit_code != 0
                and strategy.continue_on_exit_failure
            ):
                logger.warning("%s exited with code %d, trying next", candidate.path, outcome.exit_code)
                last = outcome
                continue
            return RunResult(outcome=outcome)
        return RunResult(last_failure=last)
