"""Unit tests for src/db/memory_repository.py"""

import pytest

from src.chess.square import parse_square
from src.core.exceptions import DuplicateJobError, JobNotFoundError
from src.core.models import PendingJob
from src.db.memory_repository import InMemoryJobRepository

A1 = parse_square("A1")
B3 = parse_square("B3")


def test_create_load_save(memory_repository: InMemoryJobRepository) -> None:
    job = PendingJob(id="job-1", source=A1, target=B3)
    memory_repository.create(job)
    assert memory_repository.load("job-1") == job

    completed = job.complete((A1, B3))
    memory_repository.save(completed)
    assert memory_repository.load("job-1") == completed
    assert len(memory_repository) == 1


def test_duplicate_create(memory_repository: InMemoryJobRepository) -> None:
    job = PendingJob(id="job-1", source=A1, target=B3)
    memory_repository.create(job)
    with pytest.raises(DuplicateJobError):
        memory_repository.create(job)


def test_unknown_ids(memory_repository: InMemoryJobRepository) -> None:
    with pytest.raises(JobNotFoundError):
        memory_repository.load("nope")
    with pytest.raises(JobNotFoundError):
        memory_repository.save(PendingJob(id="nope", source=A1, target=B3))
    assert len(memory_repository) == 0
