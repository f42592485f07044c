"""In-process implementation of JobQueue. Stands in for a hosted queue in local runs and tests."""

import threading
import time
from collections import deque
from typing import Callable
from uuid import uuid4

import structlog

from src.messaging.job_queue import QueueMessage

logger = structlog.get_logger(__name__)


class InMemoryJobQueue:
    """
    At-least-once queue with in-flight tracking.
    ---
    receive() hides messages until they are acked, released, or visibility_timeout seconds have passed.
    A released or timed-out message comes back with receive_count + 1, so a consumer that dies between
    receive() and ack() does not lose its messages.
    Once a message has been received max_receive_count times without an ack, it is moved to `dead_letters`
    instead of being made visible again.
    """

    def __init__(
        self,
        max_receive_count: int = 5,
        visibility_timeout: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_receive_count = max_receive_count
        self.visibility_timeout = visibility_timeout
        self._clock = clock
        self._visible: deque[tuple[str, int]] = deque()
        self._in_flight: dict[str, tuple[QueueMessage, float]] = {}
        self.dead_letters: list[str] = []
        self._lock = threading.Lock()

    def enqueue(self, job_id: str) -> None:
        with self._lock:
            self._visible.append((job_id, 0))

    def receive(self, max_messages: int = 1) -> list[QueueMessage]:
        messages: list[QueueMessage] = []
        with self._lock:
            self._expire_in_flight()
            deadline = self._clock() + self.visibility_timeout
            while self._visible and len(messages) < max_messages:
                body, previous_receives = self._visible.popleft()
                message = QueueMessage(
                    receipt=str(uuid4()),
                    body=body,
                    receive_count=previous_receives + 1,
                )
                self._in_flight[message.receipt] = (message, deadline)
                messages.append(message)
        return messages

    def ack(self, message: QueueMessage) -> None:
        with self._lock:
            self._in_flight.pop(message.receipt, None)

    def release(self, message: QueueMessage) -> None:
        with self._lock:
            entry = self._in_flight.pop(message.receipt, None)
            if entry is None:
                return
            self._return_to_queue(entry[0])

    def visible_count(self) -> int:
        with self._lock:
            self._expire_in_flight()
            return len(self._visible)

    def in_flight_count(self) -> int:
        with self._lock:
            self._expire_in_flight()
            return len(self._in_flight)

    # -- Internal helpers (caller holds the lock) --
    def _expire_in_flight(self) -> None:
        now = self._clock()
        expired = [
            message
            for message, deadline in self._in_flight.values()
            if deadline <= now
        ]
        for message in expired:
            del self._in_flight[message.receipt]
            logger.warning(
                "queue_visibility_timeout",
                job_id=message.body,
                receive_count=message.receive_count,
            )
            self._return_to_queue(message)

    def _return_to_queue(self, message: QueueMessage) -> None:
        if message.receive_count >= self.max_receive_count:
            self.dead_letters.append(message.body)
            logger.error(
                "queue_message_dead_lettered",
                job_id=message.body,
                receive_count=message.receive_count,
            )
            return
        self._visible.append((message.body, message.receive_count))
