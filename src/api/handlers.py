"""
Entry points, one per stateless function the host invokes.

The host owns routing and framing: it passes already-decoded payloads / query parameters in and
turns the returned HandlerResponse into its own response type.
"""

from typing import Any, Mapping

import structlog
from pydantic import ValidationError

from src.api.models import ErrorResponse, HandlerResponse, SubmitRequest
from src.core.exceptions import InvalidRequestError, NotFoundError
from src.messaging.job_queue import JobQueue, QueueMessage
from src.services.admission_service import AdmissionService
from src.services.result_service import ResultService
from src.services.worker import BatchResult, ComputationWorker

logger = structlog.get_logger(__name__)

JOB_ID_REQUIRED_MESSAGE = "Job ID is required"
JOB_ID_NOT_FOUND_MESSAGE = "Job ID not found"
MALFORMED_REQUEST_MESSAGE = "Request must contain 'source' and 'target' as text."


def create_request(payload: Mapping[str, Any], service: AdmissionService) -> HandlerResponse:
    """
    Submission entry point: {source, target} -> {jobId, message}.

    An invalid square is still a 200 with jobId null. Only a payload that is not even shaped like a request gets a 400.
    """
    try:
        request = parse_submission(payload)
    except InvalidRequestError as exc:
        return _error_response(400, str(exc))

    response = service.submit(request.source, request.target)
    return HandlerResponse(status_code=200, body=response.model_dump_json(by_alias=True))


def get_result(params: Mapping[str, str] | None, service: ResultService) -> HandlerResponse:
    """Result entry point: jobId query parameter -> status / result body."""
    try:
        job_id = require_job_id(params)
        result = service.get_result(job_id)
    except InvalidRequestError as exc:
        return _error_response(400, str(exc))
    except NotFoundError:
        return _error_response(404, JOB_ID_NOT_FOUND_MESSAGE)
    return HandlerResponse(status_code=200, body=result.model_dump_json(by_alias=True))


def process_queue_batch(
    messages: list[QueueMessage], worker: ComputationWorker, queue: JobQueue
) -> BatchResult:
    """Queue-trigger entry point: one invocation per batch of delivered messages."""
    batch = worker.handle_messages(messages, queue)
    logger.info(
        "queue_batch_handled",
        processed=len(batch.processed),
        failed=len(batch.failed),
    )
    return batch


# -- Request parsing --
def parse_submission(payload: Mapping[str, Any]) -> SubmitRequest:
    """Raises InvalidRequestError unless payload carries text source and target."""
    try:
        return SubmitRequest.model_validate(payload)
    except ValidationError as exc:
        logger.info("malformed_submission", errors=exc.error_count())
        raise InvalidRequestError(MALFORMED_REQUEST_MESSAGE) from exc


def require_job_id(params: Mapping[str, str] | None) -> str:
    params = params or {}
    # operationId: name used by earlier clients
    job_id = params.get("jobId") or params.get("operationId")
    if not job_id:
        raise InvalidRequestError(JOB_ID_REQUIRED_MESSAGE)
    return job_id


def _error_response(status_code: int, message: str) -> HandlerResponse:
    return HandlerResponse(
        status_code=status_code,
        body=ErrorResponse(message=message).model_dump_json(),
    )
