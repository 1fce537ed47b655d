"""
Logging configuration for extended queue operations.

Verbosity levels:
    0: WARNING (default)
    1: INFO (-v)
    2: DEBUG (-vv)
    3: TRACE (-vvv), DEBUG including boto3/botocore/urllib3
"""

import logging
import sys

PACKAGE_LOGGER = "aws_extended_sqs"

_LIBRARY_LOGGERS = ("boto3", "botocore", "urllib3")


def setup_logging(verbose: int = 0) -> None:
    """
    Configure logging for the package based on verbosity.

    Args:
        verbose: Verbosity count (0-3)
    """
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S%z",
            )
        )
        logger.addHandler(handler)

    # AWS SDK noise only at trace level
    library_level = logging.DEBUG if verbose >= 3 else logging.WARNING
    for name in _LIBRARY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a module.

    Args:
        name: Module name (usually __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
