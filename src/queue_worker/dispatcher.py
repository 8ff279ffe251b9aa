"""Dispatch a received message to its handler and acknowledge it.

A message is deleted only after the handler returns. A failed handle makes
the message visible again right away. Failures of the delete or visibility
call are logged and dropped; the queue's own visibility timeout covers them.
"""

import asyncio
import inspect
import logging
from enum import Enum

from queue_worker.handlers.registry import HandlerRegistry
from queue_worker.persist_base import PersistBase
from queue_worker.queue_model_dto import ReceivedMessage

logger = logging.getLogger(__name__)


class DispatchOutcome(str, Enum):
    """What happened to a message after one dispatch."""

    DELETED = "deleted"
    DELETE_FAILED = "delete_failed"
    RELEASED = "released"
    RELEASE_FAILED = "release_failed"
    NO_HANDLER = "no_handler"


class Dispatcher:
    """Resolves a handler per message, runs it and acknowledges the outcome."""

    def __init__(self, registry: HandlerRegistry) -> None:
        self.registry = registry

    async def dispatch(
        self,
        client: PersistBase,
        message: ReceivedMessage,
        stopping: asyncio.Event,
    ) -> DispatchOutcome:
        """Handle one message and delete or release it."""
        try:
            handler = self.registry.resolve()
            if handler is None:
                logger.warning(
                    "Could not resolve a handler implementing %s. Make sure the handler is registered correctly.",
                    self.registry.capability,
                )
                return DispatchOutcome.NO_HANDLER

            if hasattr(handler, "validate"):
                handler.validate(message.text)
            result = handler.handle(message.text, stopping)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception("Failed to handle message %s", message.id)
            return await self._release(client, message)

        return await self._delete(client, message)

    async def _delete(self, client: PersistBase, message: ReceivedMessage) -> DispatchOutcome:
        try:
            await client.delete(message.id, message.pop_receipt)
        except Exception:
            logger.warning("Failed to delete message after a successful handle: %s", message.id, exc_info=True)
            return DispatchOutcome.DELETE_FAILED
        return DispatchOutcome.DELETED

    async def _release(self, client: PersistBase, message: ReceivedMessage) -> DispatchOutcome:
        try:
            await client.update_visibility(message.id, message.pop_receipt, message.text, visibility_timeout=0)
        except Exception:
            logger.warning("Failed to update message after failed handle: %s", message.id, exc_info=True)
            return DispatchOutcome.RELEASE_FAILED
        return DispatchOutcome.RELEASED
