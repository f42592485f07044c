"""
Process-wide cache of completed results.

Only completed results are stored: they never change, so entries are kept forever (no eviction).
The default instance lives for the whole hosting process. reset_result_cache() starts over (tests, restarts).
"""

import threading

from src.api.models import CompletedResultResponse


class ResultCache:
    """Thread-safe map of job id -> completed result."""

    def __init__(self) -> None:
        self._entries: dict[str, CompletedResultResponse] = {}
        self._lock = threading.Lock()

    def get(self, job_id: str) -> CompletedResultResponse | None:
        with self._lock:
            return self._entries.get(job_id)

    def put_if_absent(
        self, job_id: str, result: CompletedResultResponse
    ) -> CompletedResultResponse:
        """Insert unless present. Returns whichever value ends up cached."""
        with self._lock:
            return self._entries.setdefault(job_id, result)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, job_id: object) -> bool:
        with self._lock:
            return job_id in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


_default_cache = ResultCache()


def get_result_cache() -> ResultCache:
    return _default_cache


def reset_result_cache() -> ResultCache:
    global _default_cache
    _default_cache = ResultCache()
    return _default_cache
