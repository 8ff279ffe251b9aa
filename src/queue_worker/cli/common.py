"""Helpers shared by the operator CLIs."""

import logging
import os

import click
import dotenv


def get_queue_uri(queue_uri: str | None) -> str:
    """Return the queue URI from the option, the environment or a .env file."""
    if queue_uri:
        return queue_uri
    if os.path.exists(".env"):
        dotenv.load_dotenv()
    queue_uri = os.getenv("QUEUE_URI")
    if not queue_uri:
        raise click.ClickException("No queue URI provided and QUEUE_URI environment variable is not set")
    return queue_uri


def configure_logging(level: str) -> None:
    """Send log records to stderr at the given level."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
