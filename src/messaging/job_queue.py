"""
Protocol for the work queue between admission and computation.

Contract:
* one message per submitted job, body = job id
* at-least-once: a message may be delivered more than once, never silently dropped
* no ordering guarantee across messages
"""

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class QueueMessage:
    """A received message. `receipt` identifies this delivery (not the job) for ack/release."""

    receipt: str
    body: str
    receive_count: int = 1


class JobQueue(Protocol):
    def enqueue(self, job_id: str) -> None:
        """Send a job id. Raises QueueUnavailableError if the queue cannot accept it."""
        ...

    def receive(self, max_messages: int = 1) -> list[QueueMessage]:
        """Take up to max_messages visible messages. They stay in flight until ack() or release()."""
        ...

    def ack(self, message: QueueMessage) -> None:
        """Message handled, delete it for good."""
        ...

    def release(self, message: QueueMessage) -> None:
        """Handling failed, make the message visible again for redelivery."""
        ...
