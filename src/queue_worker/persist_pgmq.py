"""PostgreSQL-backed queue client using PGMQ.

Uses the pgmq library's asyncio client to read, delete and re-time messages
of a single queue. The queue is addressed by one URI: a Postgres DSN whose
``queue`` query parameter names the queue.
"""

import logging
import warnings
from urllib.parse import parse_qs, urlparse, urlunparse

from pgmq.async_queue import PGMQueue

from queue_worker.persist_base import MessageNotFoundError, PersistBase
from queue_worker.queue_model_dto import MessageDTO, MetaDTO, ReceivedMessage

SCHEMES = ("postgres", "postgresql")


def parse_queue_uri(uri: str) -> tuple[str, str]:
    """Split a queue URI into (dsn, queue_name).

    Raises:
        ValueError: If the scheme is not Postgres or no queue is named.
    """
    parts = urlparse(uri.strip())
    if parts.scheme not in SCHEMES:
        raise ValueError(f"Unsupported queue URI scheme {parts.scheme!r}, expected one of {', '.join(SCHEMES)}")
    queue_name = parse_qs(parts.query).get("queue", [""])[0]
    if not queue_name:
        raise ValueError("Queue URI does not name a queue, add ?queue=<name>")
    return urlunparse(parts._replace(query="")), queue_name


class PersistPGMQ(PersistBase):
    """Queue client implementation using PGMQ (PostgreSQL Message Queue).

    Connects lazily on first use, so an unreachable database surfaces as a
    failed receive rather than a failed construction. PGMQ has no pop
    receipts; the read count stands in for one and is not checked.
    """

    def __init__(self, dsn: str, queue_name: str, visibility_timeout: int = 30) -> None:
        """Prepare a client for queue_name on the database at dsn."""
        self.queue_name = queue_name
        self.visibility_timeout = visibility_timeout
        # the DSN is passed whole so DATABASE_URL in the environment cannot override it
        self.queue = PGMQueue(conn_string=str(dsn))
        self.logger = logging.getLogger(__name__)
        self._connected = False

    @classmethod
    def from_uri(cls, uri: str, visibility_timeout: int = 30) -> "PersistPGMQ":
        """Build a client from a ``postgresql://...?queue=<name>`` URI."""
        dsn, queue_name = parse_queue_uri(uri)
        return cls(dsn, queue_name, visibility_timeout=visibility_timeout)

    async def connect(self) -> None:
        """Open the connection pool if it is not open yet."""
        if self._connected:
            return
        await self.queue.init()
        self._connected = True
        self.logger.info("Connected to queue %s", self.queue_name)

    async def receive(self) -> ReceivedMessage | None:
        """Read one message, hiding it for the configured visibility timeout."""
        await self.connect()
        message = await self.queue.read(queue=self.queue_name, vt=self.visibility_timeout)
        if message is None:
            return None
        return ReceivedMessage.from_pgmq(message)

    async def delete(self, message_id: str, pop_receipt: str) -> None:
        """Permanently delete the message; raises MessageNotFoundError if it is gone."""
        await self.connect()
        deleted = await self.queue.delete(queue=self.queue_name, msg_id=int(message_id))
        if not deleted:
            raise MessageNotFoundError(f"Message {message_id} not found in queue {self.queue_name}")

    async def update_visibility(
        self,
        message_id: str,
        pop_receipt: str,
        text: str,
        visibility_timeout: int = 0,
    ) -> None:
        """Make the message visible after visibility_timeout seconds.

        PGMQ cannot rewrite a message body, so text is left as stored.
        """
        await self.connect()
        message = await self.queue.set_vt(queue=self.queue_name, msg_id=int(message_id), vt=visibility_timeout)
        if message is None:
            raise MessageNotFoundError(f"Message {message_id} not found in queue {self.queue_name}")

    async def send(self, text: str, correlation_id: str | None = None) -> int:
        """Append a text message to the queue. Returns the message ID."""
        await self.connect()
        body = MessageDTO(text=text, meta=MetaDTO(queue_name=self.queue_name, correlation_id=correlation_id))
        return await self.queue.send(queue=self.queue_name, message=body.model_dump())

    async def create_queue(self) -> None:
        """Create the queue if it does not exist."""
        await self.connect()
        await self.queue.create_queue(self.queue_name)

    async def queue_exists(self) -> bool:
        """Return True if the queue exists on the database."""
        await self.connect()
        with warnings.catch_warnings():
            # pgmq warns on every call that records replaced plain names
            warnings.filterwarnings("ignore", message="list_queues", category=UserWarning)
            records = await self.queue.list_queues()
        return any(record.queue_name == self.queue_name for record in records)

    async def metrics(self):
        """Get metrics (length, message ages) for the queue."""
        await self.connect()
        return await self.queue.metrics(self.queue_name)

    async def close(self) -> None:
        """Close the connection pool; call when done to avoid shutdown warnings."""
        if self._connected:
            await self.queue.close()
        self._connected = False
