"""
Composition root: wires settings, Job Store, Job Queue and the three services together.

init_process() runs once per hosting process. Every handler invocation then gets its own Session and Pipeline
from pipeline_scope(); a Session is never shared between invocations or threads.
The queue and the result cache outlive the invocation: the queue is passed in, and unless a cache is passed in,
every Pipeline shares the process-wide instance.
"""

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Generator

from sqlalchemy.orm import Session, sessionmaker

from src.config.settings import Settings, get_settings
from src.core.logging import configure_logging
from src.db.database import build_engine, build_session_factory, init_db, session_scope
from src.db.memory_repository import InMemoryJobRepository
from src.db.repository import JobRepository
from src.db.sql_repository import SQLJobRepository
from src.messaging.job_queue import JobQueue
from src.messaging.memory_queue import InMemoryJobQueue
from src.services.admission_service import AdmissionService
from src.services.result_cache import ResultCache, get_result_cache
from src.services.result_service import ResultService
from src.services.worker import BatchResult, ComputationWorker


@dataclass
class Pipeline:
    repository: JobRepository
    queue: JobQueue
    admission: AdmissionService
    worker: ComputationWorker
    results: ResultService
    settings: Settings

    def run_worker(self) -> BatchResult:
        """Drain the queue in batches of settings.worker_batch_size (local runs / tests)."""
        return self.worker.drain(self.queue, self.settings.worker_batch_size)


def build_pipeline(
    session: Session | None = None,
    queue: JobQueue | None = None,
    cache: ResultCache | None = None,
    settings: Settings | None = None,
) -> Pipeline:
    settings = settings or get_settings()
    # No session: keep jobs in memory (local runs, tests)
    repository: JobRepository
    if session is None:
        repository = InMemoryJobRepository()
    else:
        repository = SQLJobRepository(session)
    if queue is None:
        queue = InMemoryJobQueue(
            max_receive_count=settings.queue_max_receive_count,
            visibility_timeout=settings.queue_visibility_timeout_seconds,
        )
    if cache is None:
        cache = get_result_cache()
    return Pipeline(
        repository=repository,
        queue=queue,
        admission=AdmissionService(repository, queue),
        worker=ComputationWorker(repository),
        results=ResultService(repository, cache),
        settings=settings,
    )


@contextmanager
def pipeline_scope(
    session_factory: sessionmaker[Session],
    queue: JobQueue,
    cache: ResultCache | None = None,
    settings: Settings | None = None,
) -> Generator[Pipeline, None, None]:
    """Pipeline for one handler invocation, on a fresh Session that is closed afterwards."""
    with session_scope(session_factory) as session:
        yield build_pipeline(session, queue, cache, settings)


def init_process(settings: Settings | None = None) -> sessionmaker[Session]:
    """Once per hosting process: logging, database engine and tables. Returns the session factory."""
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.log_json)
    engine = build_engine(settings)
    init_db(engine)
    return build_session_factory(engine)
