"""
Pytest will auto-discover / import this file called 'conftest.py'. ]
This file defines fixtures/variables required for testing multiple layers.
"""

import logging
from typing import Generator

import pytest
import structlog
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.db.memory_repository import InMemoryJobRepository
from src.db.schema import Base
from src.messaging.memory_queue import InMemoryJobQueue
from src.services.result_cache import ResultCache, reset_result_cache

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)


@pytest.fixture
def db_session_repo() -> Generator[Session, None, None]:
    """Connection to a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory() -> Generator[sessionmaker[Session], None, None]:
    """Mock real setup with multiple sessions connecting to the same engine / database tables."""
    Base.metadata.create_all(bind=engine)
    try:
        yield TestingSessionLocal
    finally:
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def memory_repository() -> Generator[InMemoryJobRepository, None, None]:
    """Ensures to clear the repository between tests"""
    repo = InMemoryJobRepository()
    try:
        yield repo
    finally:
        repo.clear()


@pytest.fixture
def memory_queue() -> InMemoryJobQueue:
    return InMemoryJobQueue(max_receive_count=3)


@pytest.fixture
def result_cache() -> ResultCache:
    return ResultCache()


@pytest.fixture(autouse=True)
def fresh_default_cache() -> Generator[None, None, None]:
    """The process-wide cache would otherwise leak results from one test into the next."""
    reset_result_cache()
    yield
    reset_result_cache()


@pytest.fixture
def restore_root_logging() -> Generator[None, None, None]:
    """configure_logging() swaps the root handlers, do not leave handlers bound to captured streams behind"""
    root_logger = logging.getLogger()
    handlers, level = root_logger.handlers[:], root_logger.level
    try:
        yield
    finally:
        root_logger.handlers[:] = handlers
        root_logger.setLevel(level)
        structlog.reset_defaults()
