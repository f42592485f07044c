"""
Computation Worker: turns a pending job into a completed (or failed) one.

Queue delivery is at-least-once, so process() must be safe to call repeatedly with the same job id.
That is guaranteed by a status check, not by a lock: only a pending job is ever computed and written.
Two workers handling duplicate deliveries at the very same moment can still both compute and save. Both write
the same deterministic path, so the race is accepted.
"""

from dataclasses import dataclass, field
from enum import StrEnum

import structlog

from src.chess.knight import require_path
from src.core.exceptions import JobNotFoundError, StoreUnavailableError
from src.core.models import JobId, PendingJob
from src.db.repository import JobRepository
from src.messaging.job_queue import JobQueue, QueueMessage

logger = structlog.get_logger(__name__)


class ProcessOutcome(StrEnum):
    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED_MISSING = "skipped_missing"
    SKIPPED_TERMINAL = "skipped_terminal"


@dataclass
class BatchResult:
    """Receipts of the messages in a batch, split by whether they were handled."""

    processed: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


class ComputationWorker:
    def __init__(self, repository: JobRepository) -> None:
        self.repo = repository

    def process(self, job_id: JobId) -> ProcessOutcome:
        """
        Handle one delivery of `job_id`.
        ---
        * unknown job: nothing to compute, the message counts as handled
        * completed/failed job: redelivery, leave it alone
        * pending job: compute the path and save it as completed

        StoreUnavailableError always propagates: the job is still pending, so redelivery retries it.
        Any other failure while computing or saving marks the job as failed. If even that save fails, the error propagates.
        """
        try:
            job = self.repo.load(job_id)
        except JobNotFoundError:
            logger.warning("job_not_found", job_id=job_id)
            return ProcessOutcome.SKIPPED_MISSING

        if not isinstance(job, PendingJob):
            logger.info("job_already_terminal", job_id=job_id, status=job.status.value)
            return ProcessOutcome.SKIPPED_TERMINAL

        try:
            result = require_path(job.source, job.target)
            completed = job.complete(result.path)
            self.repo.save(completed)
        except StoreUnavailableError:
            raise
        except Exception as exc:
            logger.error("job_computation_failed", job_id=job_id, exc_info=True)
            self.repo.save(job.fail(f"{type(exc).__name__}: {exc}"))
            return ProcessOutcome.FAILED

        logger.info("job_completed", job_id=job_id, move_count=completed.move_count)
        return ProcessOutcome.COMPLETED

    def handle_messages(
        self, messages: list[QueueMessage], queue: JobQueue
    ) -> BatchResult:
        """Process a batch of deliveries. Ack what was handled, release the rest for redelivery."""
        batch = BatchResult()
        for message in messages:
            try:
                self.process(message.body)
            except Exception:
                logger.error(
                    "queue_message_failed",
                    job_id=message.body,
                    receive_count=message.receive_count,
                    exc_info=True,
                )
                queue.release(message)
                batch.failed.append(message.receipt)
                continue
            queue.ack(message)
            batch.processed.append(message.receipt)
        return batch

    def drain(self, queue: JobQueue, max_messages: int = 10) -> BatchResult:
        """
        Keep receiving and handling until the queue has nothing visible left.

        Released messages become visible again, so this stops once every message was acked or dead-lettered.
        """
        total = BatchResult()
        while messages := queue.receive(max_messages):
            batch = self.handle_messages(messages, queue)
            total.processed.extend(batch.processed)
            total.failed.extend(batch.failed)
        return total
