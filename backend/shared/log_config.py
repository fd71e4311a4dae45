"""
Logging setup shared by the API server and the CLI.

Modules log through ``logging.getLogger(__name__)``; this only configures
the root handler once per process.
"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

_configured = False


def configure_logging(level: str = "INFO") -> None:
    """Attach a stream handler to the root logger at the given level."""
    global _configured

    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    if not _configured:
        logging.basicConfig(format=LOG_FORMAT)
        _configured = True
    logging.getLogger().setLevel(numeric_level)
