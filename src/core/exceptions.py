"""
Custom exceptions used across layers.

Top-level KnightPathError lets callers catch anything raised by this package, the subclasses tell them what to do about it:
* InvalidInputError: the client sent something wrong. Never retried.
* NotFoundError: no job with the requested id.
* StoreError / QueueError: infrastructure problems. The *Unavailable variants are transient and safe to retry.
* InternalInvariantViolation: a defect. The affected job is marked failed instead of returning a wrong answer.
"""


class KnightPathError(Exception):
    """Base class for all errors raised by the knight path pipeline."""

    retryable: bool = False


# --- Input ---
class InvalidInputError(KnightPathError):
    pass


class InvalidSquareError(InvalidInputError):
    pass


class InvalidRequestError(InvalidInputError):
    pass


# --- Lookup ---
class NotFoundError(KnightPathError):
    pass


class JobNotFoundError(NotFoundError):
    def __init__(self, job_id: str) -> None:
        super().__init__(f"Job with {job_id=} not found.")
        self.job_id = job_id


# --- Infrastructure ---
class StoreError(KnightPathError):
    pass


class DuplicateJobError(StoreError):
    def __init__(self, job_id: str) -> None:
        super().__init__(f"Job with {job_id=} already exists.")
        self.job_id = job_id


class StoreUnavailableError(StoreError):
    retryable = True


class QueueError(KnightPathError):
    pass


class QueueUnavailableError(QueueError):
    retryable = True


# --- Domain ---
class JobStateError(KnightPathError):
    """Illegal job state or state transition."""


class InternalInvariantViolation(KnightPathError):
    pass
