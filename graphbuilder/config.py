"""Runtime configuration read from the environment (and an optional .env file)."""

import logging
import os

from dotenv import load_dotenv

# load environment variables
load_dotenv()

LOG_LEVEL = os.getenv("GRAPHBUILDER_LOG_LEVEL", "WARNING").upper()
PROJECT_NAME = os.getenv("GRAPHBUILDER_PROJECT_NAME", "Agent Flow")
DEFAULT_TARGET = os.getenv("GRAPHBUILDER_DEFAULT_TARGET", "python")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    """configure root logging for the CLI and the API server."""
    resolved = (level or LOG_LEVEL).upper()
    logging.basicConfig(
        level=getattr(logging, resolved, logging.WARNING),
        format=LOG_FORMAT,
    )
