"""Poll loop: receive one message at a time and hand it to the dispatcher.

Runs until the stopping event is set. An empty queue is throttled by a short
idle delay; a failed receive is retried straight away.
"""

import asyncio
import contextlib
import logging
from collections.abc import Callable

from queue_worker.config import Settings
from queue_worker.dispatcher import Dispatcher
from queue_worker.persist_base import PersistBase
from queue_worker.persist_pgmq import PersistPGMQ
from queue_worker.queue_model_dto import ReceivedMessage

logger = logging.getLogger(__name__)

ClientFactory = Callable[..., PersistBase]


class QueueReader:
    """Long-running worker over a single queue.

    Processes one message at a time. Setting ``stopping`` cancels a pending
    receive and lets a message already received finish, then the loop closes
    the client and returns.

    Note: receive errors are retried with no delay, so a sustained outage
    keeps hitting the database as fast as it answers.
    """

    def __init__(
        self,
        settings: Settings,
        dispatcher: Dispatcher,
        client_factory: ClientFactory = PersistPGMQ.from_uri,
    ) -> None:
        self.settings = settings
        self.dispatcher = dispatcher
        self.client_factory = client_factory

    async def run(self, stopping: asyncio.Event) -> None:
        """Poll until stopping is set. Never raises for queue or handler errors."""
        queue_uri = self.settings.queue_uri
        if not queue_uri or not queue_uri.strip():
            logger.warning('No setting found in configuration with key "QUEUE_URI"')
            return

        try:
            client = self.client_factory(queue_uri, visibility_timeout=self.settings.visibility_timeout)
        except Exception:
            logger.exception("Failed to create a queue client from QUEUE_URI")
            return
        logger.info("%s started", self.settings.app_name)

        try:
            await self._poll(client, stopping)
        finally:
            try:
                await client.close()
            except Exception:
                logger.warning("Failed to close the queue client", exc_info=True)
        logger.info("Queue reader stopped")

    async def _poll(self, client: PersistBase, stopping: asyncio.Event) -> None:
        while not stopping.is_set():
            try:
                message = await self._receive(client, stopping)
            except Exception:
                logger.exception("Failed to receive a message")
                continue

            if message is not None:
                outcome = await self.dispatcher.dispatch(client, message, stopping)
                logger.debug("Message %s %s", message.id, outcome.value)
            elif not stopping.is_set():
                await self._idle(stopping)

    async def _receive(self, client: PersistBase, stopping: asyncio.Event) -> ReceivedMessage | None:
        """Receive one message; a receive still pending when stopping is set is cancelled."""
        receive = asyncio.ensure_future(client.receive())
        stop = asyncio.ensure_future(stopping.wait())
        try:
            await asyncio.wait({receive, stop}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            receive.cancel()
            raise
        finally:
            stop.cancel()

        if not receive.done():
            # a message hidden by the cancelled read reappears after its visibility timeout
            receive.cancel()
            await asyncio.gather(receive, return_exceptions=True)
            logger.info("Pending receive cancelled by stop request")
            return None
        return receive.result()

    async def _idle(self, stopping: asyncio.Event) -> None:
        """Wait idle_delay seconds, or less if stopping is set meanwhile."""
        with contextlib.suppress(asyncio.TimeoutError):
            await asyncio.wait_for(stopping.wait(), timeout=self.settings.idle_delay)
