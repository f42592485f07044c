"""Admission: validate a submission, record the job as pending, hand its id to the worker via the queue."""

from typing import Callable
from uuid import uuid4

import structlog

from src.api.models import (
    INVALID_POSITION_MESSAGE,
    JOB_CREATED_MESSAGE,
    SubmissionResponse,
)
from src.chess.square import parse_square
from src.core.exceptions import InvalidSquareError
from src.core.models import PendingJob
from src.db.repository import JobRepository
from src.messaging.job_queue import JobQueue

logger = structlog.get_logger(__name__)


def new_job_id() -> str:
    return str(uuid4())


class AdmissionService:
    def __init__(
        self,
        repository: JobRepository,
        queue: JobQueue,
        id_factory: Callable[[], str] = new_job_id,
    ) -> None:
        self.repo = repository
        self.queue = queue
        self.id_factory = id_factory

    def submit(self, source: str, target: str) -> SubmissionResponse:
        """
        Admit a new job.
        ----
        Invalid squares are rejected right here: no record, no message, job_id is None.
        Store and queue errors propagate. A failed enqueue leaves the pending record behind without a message,
        so the submission must not be reported as a success.
        """
        try:
            source_square = parse_square(source)
            target_square = parse_square(target)
        except InvalidSquareError as exc:
            logger.info("submission_rejected", source=source, target=target, reason=str(exc))
            return SubmissionResponse(job_id=None, message=INVALID_POSITION_MESSAGE)

        job = PendingJob(id=self.id_factory(), source=source_square, target=target_square)
        self.repo.create(job)

        try:
            self.queue.enqueue(job.id)
        except Exception:
            logger.error("enqueue_failed_job_orphaned", job_id=job.id, exc_info=True)
            raise

        logger.info(
            "job_admitted",
            job_id=job.id,
            source=job.source.to_label(),
            target=job.target.to_label(),
        )
        return SubmissionResponse(job_id=job.id, message=JOB_CREATED_MESSAGE)
