"""
Size governance for extended queue operations.

Sizes are approximations of the on-wire size, used to keep blocks within the
hard SQS limits.
"""

from ..constants import (
    ATTRIBUTE_PAD_FACTOR,
    MAX_BLOCK_COUNT,
    MAX_BLOCK_SIZE,
    MAX_MESSAGE_SIZE,
    MAX_WAIT_SECONDS,
)
from ..exceptions import BlockCountTooLargeError, WaitTooLargeError
from ..models import Message


def message_size(message: Message) -> int:
    """
    Approximate on-wire size of a message.

    Payload length plus, for each attribute, the UTF-8 encoded name and value
    lengths and a fixed padding for each of the two strings.

    Args:
        message: Message to measure

    Returns:
        Size in bytes
    """
    size = len(message.payload)
    for attribute in message.attributes:
        size += (
            len(attribute.name.encode("utf-8"))
            + len(attribute.value.encode("utf-8"))
            + 2 * ATTRIBUTE_PAD_FACTOR
        )
    return size


def batch_size(messages: list[Message]) -> int:
    """Approximate on-wire size of a block of messages."""
    return sum(message_size(m) for m in messages)


def needs_offload(message: Message) -> bool:
    """True when the message is too large to send inline."""
    return message_size(message) > MAX_MESSAGE_SIZE


def exceeds_block_size(size: int) -> bool:
    return size > MAX_BLOCK_SIZE


def split_point(count: int) -> int:
    """Index at which an oversize block is split."""
    return count // 2


def validate_block_count(count: int) -> None:
    """
    Raises:
        BlockCountTooLargeError: If count exceeds MAX_BLOCK_COUNT
    """
    if count > MAX_BLOCK_COUNT:
        raise BlockCountTooLargeError(count)


def validate_wait_time(wait_seconds: float) -> None:
    """
    Raises:
        WaitTooLargeError: If wait_seconds is negative or exceeds MAX_WAIT_SECONDS
    """
    if wait_seconds < 0 or wait_seconds > MAX_WAIT_SECONDS:
        raise WaitTooLargeError(wait_seconds)
