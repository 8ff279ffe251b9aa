"""Exception-test handler.

Used to verify that validation and handling failures are caught, logged,
and the message made visible again.
"""

from queue_worker.handlers.base import BaseHandler


class Handler(BaseHandler):
    """Handler that always raises in handle for testing error paths."""

    async def handle(self, message: str, stopping) -> None:
        """Raise to test handle error handling and redelivery."""
        raise Exception("Testing Handle Exception")


class ValidateHandler(Handler):
    """Handler whose validate always raises."""

    def validate(self, message: str) -> None:
        """Raise ValueError to test validation error handling."""
        raise ValueError("Testing Validate Exception")
