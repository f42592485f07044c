"""Read side: current status / result of a job, with a read-through cache for completed jobs."""

import structlog

from src.api.models import (
    CompletedResultResponse,
    FailedResultResponse,
    ProcessingResultResponse,
    ResultResponse,
)
from src.core.models import CompletedJob, FailedJob, JobId, PendingJob
from src.db.repository import JobRepository
from src.services.result_cache import ResultCache, get_result_cache

logger = structlog.get_logger(__name__)


class ResultService:
    """Never writes to the Job Store."""

    def __init__(
        self, repository: JobRepository, cache: ResultCache | None = None
    ) -> None:
        self.repo = repository
        self.cache = cache if cache is not None else get_result_cache()

    def get_result(self, job_id: JobId) -> ResultResponse:
        """
        Cache hit: return it without touching the store.
        Cache miss: load (JobNotFoundError propagates). Only a completed result is cached,
        pending and failed views are rebuilt on every call.
        """
        cached = self.cache.get(job_id)
        if cached is not None:
            logger.debug("result_cache_hit", job_id=job_id)
            return cached

        job = self.repo.load(job_id)
        match job:
            case PendingJob():
                return ProcessingResultResponse(job_id=job.id)
            case FailedJob():
                return FailedResultResponse(job_id=job.id)
            case CompletedJob():
                return self.cache.put_if_absent(job.id, self._create_result_response(job))

    # -- Internal helpers --
    def _create_result_response(self, job: CompletedJob) -> CompletedResultResponse:
        return CompletedResultResponse(
            job_id=job.id,
            source=job.source.to_label(),
            target=job.target.to_label(),
            path=tuple(square.to_label() for square in job.path),
            move_count=job.move_count,
        )
