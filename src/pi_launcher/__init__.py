"""
pi-launcher - run the Package Installer CLI from wherever it can be found.

Usage:
    pi create my-app
    package-installer create my-app
    pi-launcher pi create my-app

The tool is taken from a project-local node_modules install, the per-user
cache (downloaded from the latest GitHub release on first use), or a bundled
script/native executable, in that order.
"""

from __future__ import annotations

import logging
import sys
from typing import Sequence

from rich.markup import escape

from pi_launcher.cli import ui
from pi_launcher.config import LauncherConfig, load_config
from pi_launcher.errors import LauncherError
from pi_launcher.logging_config import setup_logging
from pi_launcher.router import route
from pi_launcher.runtime.home import get_cache_root
from pi_launcher.runtime.resolver import Resolver

__version__ = "0.3.0"

logger = logging.getLogger(__name__)


def launch(argv: Sequence[str], config: LauncherConfig, resolver: Resolver | None = None) -> int:
    """Route, resolve and run; return the process exit code."""
    args = route(argv, config)
    if args is None:
        ui.print_usage()
        return 1

    if resolver is None:
        resolver = Resolver.default(config)

    result = resolver.run(args)
    outcome = result.outcome
    if outcome is not None and not outcome.spawn_failed:
        return outcome.exit_code

    failure = outcome or result.last_failure
    if failure is not None and failure.spawn_failed:
        ui.print_spawn_failure(failure, config)
    ui.print_not_found(config, str(get_cache_root(config)))
    return 1


def main(argv: Sequence[str] | None = None) -> None:
    setup_logging()
    argv = list(sys.argv if argv is None else argv)
    try:
        config = load_config()
        code = launch(argv, config)
    except KeyboardInterrupt:
        code = 130
    except LauncherError as exc:
        logger.debug("Launcher failure", exc_info=True)
        ui.console.print(f"[red]Error:[/red] {escape(str(exc))}")
        code = 1
    sys.exit(code)


__all__ = ["__version__", "launch", "main"]
