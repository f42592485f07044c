"""
Boundary layer data model(s).

A Job is a closed tagged variant: PendingJob | CompletedJob | FailedJob.
The Job Store persists them, the services pass them around. Each variant only carries the fields that make sense for its status,
so e.g. a completed job without a path cannot be constructed.
"""

from dataclasses import dataclass

from src.chess.square import Square
from src.core.exceptions import JobStateError
from src.core.shared_types import JobStatus

JobId = str


@dataclass(frozen=True)
class PendingJob:
    """Admitted, waiting for the worker. The only state with transitions."""

    id: JobId
    source: Square
    target: Square

    @property
    def status(self) -> JobStatus:
        return JobStatus.PENDING

    def complete(self, path: tuple[Square, ...]) -> "CompletedJob":
        return CompletedJob(id=self.id, source=self.source, target=self.target, path=path)

    def fail(self, reason: str) -> "FailedJob":
        return FailedJob(id=self.id, source=self.source, target=self.target, reason=reason)


@dataclass(frozen=True)
class CompletedJob:
    id: JobId
    source: Square
    target: Square
    path: tuple[Square, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", tuple(self.path))
        if not self.path:
            raise JobStateError(f"Completed job {self.id!r} must have a path.")
        if self.path[0] != self.source or self.path[-1] != self.target:
            raise JobStateError(
                f"Path of job {self.id!r} must run from {self.source} to {self.target}."
            )

    @property
    def status(self) -> JobStatus:
        return JobStatus.COMPLETED

    @property
    def move_count(self) -> int:
        return len(self.path) - 1


@dataclass(frozen=True)
class FailedJob:
    id: JobId
    source: Square
    target: Square
    reason: str

    @property
    def status(self) -> JobStatus:
        return JobStatus.FAILED


Job = PendingJob | CompletedJob | FailedJob
