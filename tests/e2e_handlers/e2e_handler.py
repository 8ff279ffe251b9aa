"""Handler used by the loader and E2E tests.

Loaded through --handlers-path; records every message it handles.
"""

from queue_worker.handlers.base import BaseHandler

HANDLED: list[str] = []


class Handler(BaseHandler):
    """Records messages; handles everything successfully."""

    def handle(self, message: str, stopping) -> None:
        """Append the message to HANDLED."""
        HANDLED.append(message)


class NotAHandler:
    """Has no handle method."""
