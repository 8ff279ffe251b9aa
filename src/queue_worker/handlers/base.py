"""Base handler interface for queue messages.

The worker resolves one handler per message and calls validate then handle
with the message text. Raising from either counts as a failed handle and
makes the message visible again for redelivery.
"""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Awaitable


class BaseHandler(ABC):
    """Abstract base for message handlers.

    handle may be a coroutine function or a plain function. Messages can be
    delivered more than once, so handle should be idempotent.
    """

    def validate(self, message: str) -> None:
        """Optionally validate the message; raise if invalid."""
        return None

    @abstractmethod
    def handle(self, message: str, stopping: asyncio.Event) -> Awaitable[None] | None:
        """Process the message. Raise on failure to trigger redelivery.

        stopping is set when the worker has been asked to shut down; long
        running handlers may check it and finish early.
        """
        pass
