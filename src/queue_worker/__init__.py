"""Queue worker: poll a PGMQ queue and dispatch each message to a handler."""

__version__ = "0.1.0"
