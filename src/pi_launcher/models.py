"""Value types passed between the resolver and the process delegate."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class ArtifactKind(Enum):
    SCRIPT = "script"
    NATIVE_EXECUTABLE = "native_executable"


class ArtifactOrigin(Enum):
    LOCAL_PROJECT = "local_project"
    CACHE = "cache"
    BUNDLED = "bundled"


@dataclass(frozen=True)
class ResolutionCandidate:
    """A runnable copy of the tool found by one resolution strategy."""

    kind: ArtifactKind
    path: Path
    origin: ArtifactOrigin


@dataclass(frozen=True)
class ReleaseDescriptor:
    """Release metadata needed to download the tool's source archive."""

    tarball_url: str
    tag_name: str | None = None


@dataclass(frozen=True)
class ExecutionOutcome:
    """Result of running a candidate.

    ``spawn_failed`` distinguishes "could not start" from "ran and exited
    non-zero"; in the former case ``exit_code`` is always 1.
    """

    exit_code: int
    spawn_failed: bool = False
    error: str | None = None


@dataclass(frozen=True)
class RunResult:
    """What :meth:`Resolver.run` ended with.

    ``outcome`` is the final outcome of the candidate that ended the chain.
    It is None when the chain was exhausted, either because nothing was found
    or because every candidate fell through; ``last_failure`` then holds the
    last fall-through outcome, if any.
    """

    outcome: ExecutionOutcome | None = None
    last_failure: ExecutionOutcome | None = None

    @property
    def exhausted(self) -> bool:
        return self.outcome is None
