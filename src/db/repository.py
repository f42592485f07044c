"""Protocol repository (the Job Store). Implemented with SQLAlchemy, but any point-lookup key/value store would do."""

from typing import Protocol

from src.core.models import Job, JobId


class JobRepository(Protocol):
    """Persistence layer orchestration"""

    def create(self, job: Job) -> None:
        """Store a new job. Raises DuplicateJobError if the id is taken."""
        ...

    def load(self, job_id: JobId) -> Job:
        """Get job by ID. Raises JobNotFoundError if no record exists."""
        ...

    def save(self, job: Job) -> None:
        """Overwrite the full record of job.id. Raises JobNotFoundError if no record exists."""
        ...
