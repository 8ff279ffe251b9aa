"""Queue message data transfer objects.

Defines the body stored in the queue (text payload plus metadata) and the
message handed to the dispatcher after a receive.
"""

import json

from pgmq import Message
from pydantic import BaseModel, Field


class MetaDTO(BaseModel):
    """Metadata for a queue message (queue name, correlation)."""

    queue_name: str = Field(..., description="Name of the queue")
    correlation_id: str | None = Field(None, description="Correlation identifier")


class MessageDTO(BaseModel):
    """A queue message body: text payload plus metadata.

    Used when enqueueing; the handler only ever sees ``text``.
    """

    text: str = Field(..., description="Application payload handed to the handler")
    meta: MetaDTO = Field(..., description="Message metadata")


class ReceivedMessage(BaseModel):
    """A message read from the queue, with the receipt needed to acknowledge it."""

    id: str = Field(..., description="Queue-assigned message identifier")
    pop_receipt: str = Field(..., description="Opaque token for this receipt of the message")
    text: str = Field(..., description="Payload")
    dequeue_count: int = Field(0, description="How many times the message has been read")

    @classmethod
    def from_pgmq(cls, message: Message) -> "ReceivedMessage":
        """Build from a pgmq Message; bodies without a text key are passed on as JSON."""
        body = message.message
        if isinstance(body, dict) and isinstance(body.get("text"), str):
            text = body["text"]
        elif isinstance(body, str):
            text = body
        else:
            text = json.dumps(body)
        return cls(
            id=str(message.msg_id),
            pop_receipt=str(message.read_ct),
            text=text,
            dequeue_count=message.read_ct,
        )
