"""End-to-end: admission -> store -> queue -> worker -> store <- results, on the SQLite store"""

from pathlib import Path
from unittest.mock import patch

from sqlalchemy.orm import Session, sessionmaker

from src.api.models import CompletedResultResponse, ProcessingResultResponse
from src.bootstrap import build_pipeline, init_process, pipeline_scope
from src.chess.knight import is_knight_move
from src.chess.square import parse_square
from src.config.settings import Settings
from src.core.models import CompletedJob
from src.db.memory_repository import InMemoryJobRepository
from src.db.sql_repository import SQLJobRepository
from src.messaging.memory_queue import InMemoryJobQueue
from src.services.result_cache import ResultCache


def test_submit_compute_and_poll(db_session_repo: Session) -> None:
    pipeline = build_pipeline(db_session_repo, cache=ResultCache(), settings=Settings())
    assert isinstance(pipeline.repository, SQLJobRepository)

    # submit -> job id
    submission = pipeline.admission.submit("A1", "H8")
    job_id = submission.job_id
    assert job_id is not None

    # before the worker runs: still processing
    assert isinstance(pipeline.results.get_result(job_id), ProcessingResultResponse)

    # worker runs
    batch = pipeline.run_worker()
    assert len(batch.processed) == 1

    # after: 6 moves from A1 to H8, every step a knight move
    result = pipeline.results.get_result(job_id)
    assert isinstance(result, CompletedResultResponse)
    assert result.move_count == 6
    assert result.path[0] == "A1"
    assert result.path[-1] == "H8"
    squares = [parse_square(label) for label in result.path]
    assert all(is_knight_move(a, b) for a, b in zip(squares, squares[1:]))

    # second read: identical, without a store hit
    with patch.object(pipeline.repository, "load") as load:
        again = pipeline.results.get_result(job_id)
    load.assert_not_called()
    assert again == result


def test_redelivered_message_after_completion(db_session_repo: Session) -> None:
    """The same job id on the queue twice: computed once, second delivery is a no-op"""
    pipeline = build_pipeline(db_session_repo, cache=ResultCache(), settings=Settings())
    job_id = pipeline.admission.submit("B1", "C3").job_id
    assert job_id is not None
    pipeline.queue.enqueue(job_id)

    with patch.object(pipeline.repository, "save", wraps=pipeline.repository.save) as save:
        batch = pipeline.run_worker()

    assert len(batch.processed) == 2
    save.assert_called_once()
    stored = pipeline.repository.load(job_id)
    assert isinstance(stored, CompletedJob)
    assert stored.move_count == 1


def test_invalid_submission_leaves_no_trace(db_session_repo: Session) -> None:
    pipeline = build_pipeline(db_session_repo, cache=ResultCache(), settings=Settings())
    for source, target in [("Z9", "A1"), ("", "A1"), ("A", "A1")]:
        assert pipeline.admission.submit(source, target).job_id is None
    assert pipeline.queue.receive(max_messages=10) == []


def test_in_memory_pipeline() -> None:
    pipeline = build_pipeline(settings=Settings())
    assert isinstance(pipeline.repository, InMemoryJobRepository)

    job_id = pipeline.admission.submit("D4", "D4").job_id
    assert job_id is not None
    pipeline.run_worker()

    result = pipeline.results.get_result(job_id)
    assert isinstance(result, CompletedResultResponse)
    assert result.path == ("D4",)
    assert result.move_count == 0


def test_init_process(tmp_path: Path, restore_root_logging: None) -> None:
    """Process start-up creates the tables; sessions from the factory can run the pipeline"""
    settings = Settings(database_url=f"sqlite:///{tmp_path / 'jobs.db'}")
    factory = init_process(settings)
    assert isinstance(factory, sessionmaker)

    with factory() as session:
        pipeline = build_pipeline(session, cache=ResultCache(), settings=settings)
        job_id = pipeline.admission.submit("A1", "B3").job_id
        assert job_id is not None
        pipeline.run_worker()
        assert isinstance(pipeline.results.get_result(job_id), CompletedResultResponse)


def test_one_session_per_invocation(tmp_path: Path, restore_root_logging: None) -> None:
    """Submit, compute and poll as three invocations sharing only the queue and the cache"""
    settings = Settings(database_url=f"sqlite:///{tmp_path / 'jobs.db'}")
    factory = init_process(settings)
    queue = InMemoryJobQueue()
    cache = ResultCache()

    with pipeline_scope(factory, queue, cache, settings) as pipeline:
        job_id = pipeline.admission.submit("A1", "H8").job_id
        first_session = pipeline.repository.db
    assert job_id is not None

    with pipeline_scope(factory, queue, cache, settings) as pipeline:
        assert pipeline.repository.db is not first_session
        assert len(pipeline.run_worker().processed) == 1

    with pipeline_scope(factory, queue, cache, settings) as pipeline:
        result = pipeline.results.get_result(job_id)
        assert not pipeline.repository.db.in_transaction()
    assert isinstance(result, CompletedResultResponse)
    assert result.move_count == 6


def test_default_queue_follows_settings() -> None:
    settings = Settings(queue_max_receive_count=2, queue_visibility_timeout_seconds=5.0)
    queue = build_pipeline(settings=settings).queue
    assert isinstance(queue, InMemoryJobQueue)
    assert queue.max_receive_count == 2
    assert queue.visibility_timeout == 5.0
