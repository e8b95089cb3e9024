"""Run a resolved artifact as a child process."""

from __future__ import annotations

import logging
import subprocess
from typing import Sequence

from pi_launcher.config import LauncherConfig
from pi_launcher.models import ArtifactKind, ExecutionOutcome, ResolutionCandidate

logger = logging.getLogger(__name__)


class ProcessDelegate:
    """Spawns a candidate with inherited stdio and waits for it to finish."""

    def __init__(self, config: LauncherConfig) -> None:
        self.config = config

    def command_for(self, candidate: ResolutionCandidate, args: Sequence[str]) -> list[str]:
        if candidate.kind is ArtifactKind.SCRIPT:
            return [self.config.script_runtime, str(candidate.path), *args]
        return [str(candidate.path), *args]

    def run(self, candidate: ResolutionCandidate, args: Sequence[str]) -> ExecutionOutcome:
        """Run *candidate* with *args* and map the result to an exit code.

        A child killed by a signal (negative return code) reports 1. Failure
        to start the process is reported with ``spawn_failed=True``.
        """
        command = self.command_for(candidate, args)
        logger.debug("Spawning %s", command)
        try:
            completed = subprocess.run(command)
        except OSError as exc:
            if candidate.kind is ArtifactKind.SCRIPT:
                error = f"Failed to run {self.config.script_runtime}: {exc}"
            else:
                error = f"Failed to run native executable {candidate.path}: {exc}"
            logger.debug(error)
            return ExecutionOutcome(exit_code=1, spawn_failed=True, error=error)

        code = completed.returncode
        if code is None or code < 0:
            logger.debug("Child terminated abnormally (returncode=%s)", code)
            return ExecutionOutcome(exit_code=1)
        return ExecutionOutcome(exit_code=code)
