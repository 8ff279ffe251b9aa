"""No-op handler for smoke testing a worker deployment.

Point HANDLER at this module to verify messages flow end to end.
"""

import logging

from queue_worker.handlers.base import BaseHandler

logger = logging.getLogger(__name__)


class Handler(BaseHandler):
    """Handler that accepts every message and only logs it."""

    def handle(self, message: str, stopping) -> None:
        """Message will always be handled."""
        logger.info("Handled message: %s", message)
