"""Logging setup for the service and CLI."""

import logging
import sys

from journal.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(log_level: str | None = None) -> None:
    """Configure the root logger once; later calls only adjust the level."""
    level_name = (log_level or settings.log_level).upper()
    level = getattr(logging, level_name, logging.INFO)

    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=LOG_FORMAT, stream=sys.stdout, level=level)
    root.setLevel(level)

    # Per-request access lines are noisy next to the journal's own logs
    logging.getLogger("uvicorn.access").setLevel(max(level, logging.WARNING))
