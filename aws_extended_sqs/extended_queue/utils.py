"""
Utility functions for extended queue operations.
"""

import logging

from .constants import SLOW_REQUEST_THRESHOLD_MS


def format_correlation_id(index: int) -> str:
    """
    Format a batch entry correlation id.

    Args:
        index: Position of the message in the caller's batch

    Returns:
        Stringified index (e.g., '3')
    """
    return str(index)


def parse_correlation_id(correlation_id: str, count: int) -> int | None:
    """
    Parse a correlation id echoed back by the transport.

    Args:
        correlation_id: Id from a batch response entry
        count: Number of messages in the originating batch

    Returns:
        The positional index, or None if the id is not a valid index
    """
    try:
        index = int(correlation_id)
    except ValueError:
        return None
    if 0 <= index < count:
        return index
    return None


def warn_if_slow(
    logger: logging.Logger,
    elapsed_ms: int,
    operation: str,
    threshold_ms: int = SLOW_REQUEST_THRESHOLD_MS,
) -> None:
    """
    Log a request that took longer than the threshold.

    Args:
        logger: Logger to report on
        elapsed_ms: Request duration in milliseconds
        operation: Name of the request (e.g., 'SendMessageBatch')
        threshold_ms: Report at or above this duration
    """
    if elapsed_ms >= threshold_ms:
        logger.info(f"{operation} elapsed {elapsed_ms} ms")
