"""User-facing messages for the launcher.

Everything is written to stderr; stdout belongs to the delegated tool.
"""

from __future__ import annotations

import sys

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from pi_launcher.config import LauncherConfig
from pi_launcher.errors import DependencyInstallError, ProvisioningError
from pi_launcher.models import ArtifactOrigin, ExecutionOutcome, ResolutionCandidate
from pi_launcher.router import USAGE_HINT

console = Console(stderr=True, highlight=False)

_ORIGIN_LABELS = {
    ArtifactOrigin.LOCAL_PROJECT: "Using locally installed CLI from node_modules",
    ArtifactOrigin.CACHE: "Using cached CLI",
}


def status(message: str, *, out: Console | None = None) -> None:
    (out or console).print(f"[cyan]{escape(message)}[/cyan]")


def announce(candidate: ResolutionCandidate, *, out: Console | None = None) -> None:
    """Say which copy of the tool is about to run."""
    label = _ORIGIN_LABELS.get(candidate.origin)
    if label is None:
        variant = candidate.path.parent.name
        if variant == "executables":
            label = "Using bundled native executable"
        else:
            label = f"Using bundled {variant} CLI"
    (out or console).print(f"[green]✓[/green] {label} [dim]({escape(str(candidate.path))})[/dim]")


def print_usage(*, out: Console | None = None) -> None:
    (out or console).print(USAGE_HINT, markup=False)


def print_provisioning_failure(error: ProvisioningError, *, out: Console | None = None) -> None:
    (out or console).print(
        Panel(Text(str(error)), title="Download failed, trying other sources", border_style="yellow")
    )


def print_dependency_failure(error: DependencyInstallError, *, out: Console | None = None) -> None:
    """Explain how to finish the dependency install by hand."""
    lines = [str(error), "", "Install the dependencies manually with one of:"]
    if error.manual_commands:
        lines.extend(f"  {cmd}" for cmd in error.manual_commands)
    else:
        lines.append("  (no package manager found; install Node.js from https://nodejs.org)")
    lines.append("")
    lines.append("The cached CLI will still be used; it may fail until dependencies are installed.")
    (out or console).print(
        Panel(Text("\n".join(lines)), title="Dependency install failed", border_style="yellow")
    )


def print_spawn_failure(
    outcome: ExecutionOutcome,
    config: LauncherConfig,
    *,
    out: Console | None = None,
) -> None:
    body = outcome.error or "The CLI could not be started."
    body += (
        f"\n\nMake sure '{config.script_runtime}' is installed and on PATH "
        "(https://nodejs.org), or provide a bundled native executable."
    )
    (out or console).print(Panel(Text(body), title="Failed to execute the CLI", border_style="red"))


def print_not_found(config: LauncherConfig, cache_root: str, *, out: Console | None = None) -> None:
    """Print the remediation menu shown when no strategy produced a runnable CLI."""
    native = config.native_executable_name(sys.platform)
    menu = "\n".join(
        [
            "The Package Installer CLI was not found. Here are your options:",
            "",
            "OPTION 1: Install locally via npm (recommended)",
            f"   npm install {config.vendor}/{config.tool}",
            "   npx pi create my-app",
            "",
            "OPTION 2: Finish the cached install",
            f'   cd "{cache_root}" && npm install --omit=dev',
            "",
            "OPTION 3: Use the bundled version",
            f"   Make sure the '{config.bundle_dir}/' directory is available alongside this executable.",
            "   It should contain either:",
            f"   - {config.bundle_dir}/standalone/{config.entry_point} (Node.js required)",
            f"   - {config.bundle_dir}/executables/{native} (native executable)",
            "",
            "REQUIREMENTS:",
            "   - For the Node.js version: install Node.js from https://nodejs.org",
            "   - For the native executable: no additional requirements",
            "",
            f"More info: https://github.com/{config.repo_slug}",
        ]
    )
    (out or console).print(Panel(Text(menu), title="CLI NOT FOUND", border_style="red"))
