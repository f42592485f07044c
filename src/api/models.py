"""Requests and Response models (serialized with camelCase keys: jobId, moveCount)"""

from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from src.core.shared_types import JobStatus

INVALID_POSITION_MESSAGE = (
    "Invalid source or target position. Please use positions like 'A1', 'H8', etc."
)
JOB_CREATED_MESSAGE = "Job created. Please query it with the job id to find your results."
STILL_PROCESSING_MESSAGE = "Calculation is still processing."
JOB_FAILED_MESSAGE = "Calculation failed. Please submit a new request."


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


# --- REQUEST MODELS ---
class SubmitRequest(ApiModel):
    """Square labels are validated by the Admission Service, so that a bad label is a rejection and not an error."""

    source: str
    target: str


# --- RESPONSE MODELS ---
class SubmissionResponse(ApiModel):
    job_id: str | None
    message: str


class ProcessingResultResponse(ApiModel):
    job_id: str
    status: Literal[JobStatus.PENDING] = JobStatus.PENDING
    message: str = STILL_PROCESSING_MESSAGE


class FailedResultResponse(ApiModel):
    job_id: str
    status: Literal[JobStatus.FAILED] = JobStatus.FAILED
    message: str = JOB_FAILED_MESSAGE


class CompletedResultResponse(ApiModel):
    job_id: str
    status: Literal[JobStatus.COMPLETED] = JobStatus.COMPLETED
    source: str
    target: str
    path: tuple[str, ...]
    move_count: int


ResultResponse = ProcessingResultResponse | FailedResultResponse | CompletedResultResponse


class ErrorResponse(ApiModel):
    message: str


class HandlerResponse(BaseModel):
    """Framing-neutral envelope. The host turns it into whatever its transport needs (HTTP response, ...)."""

    status_code: int
    body: str
