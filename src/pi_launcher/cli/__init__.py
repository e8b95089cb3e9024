"""CLI helpers exposed for other modules."""

from .ui import announce, print_not_found, print_spawn_failure, print_usage, status

__all__ = ["announce", "print_not_found", "print_spawn_failure", "print_usage", "status"]
