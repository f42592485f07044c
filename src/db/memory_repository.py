"""Implementation of (Job)Repository using a dictionary. For local runs and service-level tests."""

import threading

from src.core.exceptions import DuplicateJobError, JobNotFoundError
from src.core.models import Job, JobId


class InMemoryJobRepository:
    """Jobs are immutable dataclasses, so storing the objects themselves is safe."""

    def __init__(self) -> None:
        self._jobs: dict[JobId, Job] = {}
        self._lock = threading.Lock()

    def create(self, job: Job) -> None:
        with self._lock:
            if job.id in self._jobs:
                raise DuplicateJobError(job.id)
            self._jobs[job.id] = job

    def load(self, job_id: JobId) -> Job:
        with self._lock:
            job = self._jobs.get(job_id)
        if job is None:
            raise JobNotFoundError(job_id)
        return job

    def save(self, job: Job) -> None:
        with self._lock:
            if job.id not in self._jobs:
                raise JobNotFoundError(job.id)
            self._jobs[job.id] = job

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)

    def clear(self) -> None:
        """Clear the repository (useful in between tests)"""
        with self._lock:
            self._jobs.clear()
