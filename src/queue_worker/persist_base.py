"""Abstract base for queue clients used by the worker.

Defines the four operations the poll loop and dispatcher need: receive one
message, delete it, make it visible again, and release the connection.
Implementations (e.g. PersistPGMQ) provide the concrete transport.
"""

from abc import ABC, abstractmethod

from queue_worker.queue_model_dto import ReceivedMessage


class MessageNotFoundError(Exception):
    """The message (or this receipt of it) no longer exists in the queue."""


class PersistBase(ABC):
    """Abstract base class for a single-queue client.

    All operations are coroutines. Any of them may raise on transport
    failure; callers decide whether that is fatal.
    """

    @abstractmethod
    async def receive(self) -> ReceivedMessage | None:
        """Read one message and hide it for the visibility timeout. Returns None if empty."""
        pass

    @abstractmethod
    async def delete(self, message_id: str, pop_receipt: str) -> None:
        """Permanently delete the message received with the given receipt."""
        pass

    @abstractmethod
    async def update_visibility(
        self,
        message_id: str,
        pop_receipt: str,
        text: str,
        visibility_timeout: int = 0,
    ) -> None:
        """Set how many seconds from now the message becomes visible again."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release connections; safe to call when never connected."""
        pass
