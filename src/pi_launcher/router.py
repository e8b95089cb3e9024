"""Decide whether an invocation delegates to the tool, and with which args."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from pi_launcher.config import LauncherConfig

USAGE_HINT = "Usage: pi [command] [options]  (or: pi-launcher pi [command] [options])"

_STRIP_SUFFIXES = (".exe", ".py")


def invocation_name(argv0: str) -> str:
    """Normalise ``argv[0]`` to a lowercase program name without extension."""
    name = Path(argv0).name.lower()
    for suffix in _STRIP_SUFFIXES:
        if name.endswith(suffix):
            return name[: -len(suffix)]
    return name


def route(argv: Sequence[str], config: LauncherConfig) -> list[str] | None:
    """Return the arguments to forward, or None when nothing should run.

    Two forms delegate:

    - ``pi create my-app`` (the program name is an alias): forwards
      ``argv[1:]``.
    - ``pi-launcher pi create my-app`` (first argument is the trigger):
      forwards ``argv[2:]``.
    """
    if not argv:
        return None
    if invocation_name(argv[0]) in config.aliases:
        return list(argv[1:])
    if len(argv) > 1 and argv[1] == config.trigger:
        return list(argv[2:])
    return None
