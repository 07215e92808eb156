"""Logging utilities for eero_cli modules."""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger that inherits from the root logger.

    Library code never configures handlers itself; the CLI calls
    setup_logging() once. Until then the logger stays at WARNING.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance

    """
    logger = logging.getLogger(name)
    logger.propagate = True

    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logger.setLevel(logging.WARNING)

    return logger


def setup_logging(verbose: bool = False) -> None:
    """Configure root logging on stderr so stdout stays machine-readable."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr, force=True)

    # Module loggers created before basicConfig carry their own WARNING level
    for name in list(logging.root.manager.loggerDict):
        if name == "eero_cli" or name.startswith("eero_cli."):
            logging.getLogger(name).setLevel(logging.NOTSET)
    logging.getLogger("eero_cli").setLevel(level)
