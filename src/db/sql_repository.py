"""Implementation of (Job)Repository using SQLAlchemy"""

from contextlib import contextmanager
from typing import Generator

import structlog
from sqlalchemy import select
from sqlalchemy.exc import (
    DBAPIError,
    IntegrityError,
    OperationalError,
    SQLAlchemyError,
)
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session

from src.chess.square import parse_square
from src.core.exceptions import (
    DuplicateJobError,
    InvalidSquareError,
    JobNotFoundError,
    JobStateError,
    StoreError,
    StoreUnavailableError,
)
from src.core.models import CompletedJob, FailedJob, Job, JobId, PendingJob
from src.core.shared_types import JobStatus
from src.db.schema import DBJob

logger = structlog.get_logger(__name__)


class SQLJobRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def create(self, job: Job) -> None:
        """Store a new job. Raises DuplicateJobError if the id is taken."""
        with self._translate_errors(job.id, duplicate_is_error=True):
            if self._fetch_job(job.id) is not None:
                raise DuplicateJobError(job.id)
            job_db = DBJob(id=job.id)
            self._copy_into(job_db, job)
            self.db.add(job_db)
            self.db.commit()

    def load(self, job_id: JobId) -> Job:
        """Get job by ID. Raises JobNotFoundError if no record exists."""
        with self._translate_errors(job_id):
            try:
                job_db = self._fetch_job(job_id)
                if job_db is None:
                    raise JobNotFoundError(job_id)
                return self._to_model(job_db)
            finally:
                # A read leaves no transaction (or pooled connection) open behind it
                self.db.rollback()

    def save(self, job: Job) -> None:
        """Overwrite the full record of job.id."""
        with self._translate_errors(job.id):
            job_db = self._fetch_job(job.id)
            if job_db is None:
                raise JobNotFoundError(job.id)
            self._copy_into(job_db, job)
            self.db.commit()

    # -- Internal helpers --
    def _fetch_job(self, job_id: JobId) -> DBJob | None:
        # populate_existing: another session may have written the row since this one last saw it
        query = (
            select(DBJob)
            .where(DBJob.id == job_id)
            .execution_options(populate_existing=True)
        )
        return self.db.scalar(query)

    @contextmanager
    def _translate_errors(
        self, job_id: JobId, duplicate_is_error: bool = False
    ) -> Generator[None, None, None]:
        """Roll back on any failure and map SQLAlchemy exceptions onto the store's error kinds."""
        try:
            yield
        except IntegrityError as exc:
            self.db.rollback()
            if duplicate_is_error:
                raise DuplicateJobError(job_id) from exc
            raise StoreError(f"Integrity error for job {job_id!r}: {exc}") from exc
        except (OperationalError, PoolTimeoutError) as exc:
            self.db.rollback()
            logger.warning("job_store_unavailable", job_id=job_id, error=str(exc))
            raise StoreUnavailableError(f"Job store unavailable: {exc}") from exc
        except DBAPIError as exc:
            self.db.rollback()
            if exc.connection_invalidated:
                raise StoreUnavailableError(f"Job store connection lost: {exc}") from exc
            raise StoreError(f"Job store error for job {job_id!r}: {exc}") from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StoreError(f"Job store error for job {job_id!r}: {exc}") from exc
        except StoreError:
            self.db.rollback()
            raise

    def _copy_into(self, job_db: DBJob, job: Job) -> None:
        """Write every column, so that save() is a full overwrite."""
        job_db.source = job.source.to_label()
        job_db.target = job.target.to_label()
        job_db.status = job.status.value
        job_db.path = None
        job_db.move_count = None
        job_db.failure_reason = None
        match job:
            case CompletedJob():
                job_db.path = [square.to_label() for square in job.path]
                job_db.move_count = job.move_count
            case FailedJob():
                job_db.failure_reason = job.reason

    def _to_model(self, job_db: DBJob) -> Job:
        """Convert SQLAlchemy model to the tagged Job variant."""
        try:
            source = parse_square(job_db.source)
            target = parse_square(job_db.target)
            status = JobStatus(job_db.status)
            match status:
                case JobStatus.PENDING:
                    return PendingJob(id=job_db.id, source=source, target=target)
                case JobStatus.COMPLETED:
                    if not job_db.path:
                        raise JobStateError("completed record without a path")
                    path = tuple(parse_square(label) for label in job_db.path)
                    return CompletedJob(
                        id=job_db.id, source=source, target=target, path=path
                    )
                case JobStatus.FAILED:
                    return FailedJob(
                        id=job_db.id,
                        source=source,
                        target=target,
                        reason=job_db.failure_reason or "",
                    )
        except (ValueError, InvalidSquareError, JobStateError) as exc:
            raise StoreError(f"Corrupt record for job {job_db.id!r}: {exc}") from exc
