"""
Batch put operations for extended queue.
"""

from ..exceptions import MessageTooLargeError, PartialFailureError, TransportError
from ..logging_config import get_logger
from ..models import Message, QueueHandle, SendEntry
from ..utils import format_correlation_id, parse_correlation_id
from .interfaces import BlobStore, QueueTransport
from .offload_codec import offload
from .size_operations import (
    batch_size,
    exceeds_block_size,
    message_size,
    needs_offload,
    split_point,
    validate_block_count,
)

logger = get_logger(__name__)


def batch_put(
    transport: QueueTransport,
    blob_store: BlobStore,
    bucket: str,
    queue: QueueHandle,
    messages: list[Message],
) -> list[bool]:
    """
    Put a batch of messages to a queue.

    Oversize messages are offloaded to the blob store first; this mutates them
    in place (payload, attributes and receipt handle), which a later delete
    relies on. Blocks too large for a single send are split in half until
    they fit. Statuses stay aligned with the input messages throughout.

    Args:
        transport: Queue transport
        blob_store: Blob store for oversize payloads
        bucket: Bucket for oversize payloads
        queue: Queue handle
        messages: Messages to send (at most MAX_BLOCK_COUNT)

    Returns:
        One True per message

    Raises:
        BlockCountTooLargeError: If more than MAX_BLOCK_COUNT messages are supplied
        PartialFailureError: If one or more messages were not sent (carries statuses),
            including every message of a split block whose send raised
        ExtendedQueueError: For transport errors when the batch went out as one block
    """
    if not messages:
        return []

    validate_block_count(len(messages))

    statuses = [True] * len(messages)
    errors: dict[int, Exception] = {}

    for ix, message in enumerate(messages):
        if not needs_offload(message):
            continue
        try:
            offload(message, bucket, blob_store)
        except Exception as e:
            logger.warning(
                f"Failed converting oversize message {ix}, ignoring further processing for it ({e})"
            )
            statuses[ix] = False
            errors[ix] = e
            continue
        if needs_offload(message):
            size_error = MessageTooLargeError(message_size(message))
            logger.warning(f"Message {ix} still too large after offload ({size_error})")
            statuses[ix] = False
            errors[ix] = size_error

    # Work list of [start, end) ranges; popped from the end, so push the upper half first
    pending = [(0, len(messages))]
    split = False
    while pending:
        start, end = pending.pop()
        eligible = [ix for ix in range(start, end) if statuses[ix]]
        if not eligible:
            continue

        total = batch_size([messages[ix] for ix in eligible])
        if exceeds_block_size(total) and end - start > 1:
            half = start + split_point(end - start)
            logger.info(f"Block size {total} too large, splitting at {half}")
            pending.append((half, end))
            pending.append((start, half))
            split = True
            continue

        try:
            _send_block(transport, queue, messages, eligible, statuses, errors)
        except Exception as e:
            # Other blocks may already be on the queue; statuses must still account for them
            if not split:
                raise
            logger.warning(f"Failed sending block [{start}, {end}) ({e})")
            for ix in eligible:
                statuses[ix] = False
                errors[ix] = e

    if not all(statuses):
        raise PartialFailureError(statuses, errors=errors)
    return statuses


def _send_block(
    transport: QueueTransport,
    queue: QueueHandle,
    messages: list[Message],
    indexes: list[int],
    statuses: list[bool],
    errors: dict[int, Exception],
) -> None:
    """Send one block, marking failed entries in statuses."""
    entries = [
        SendEntry(
            id=format_correlation_id(ix),
            payload=messages[ix].payload,
            attributes=list(messages[ix].attributes),
        )
        for ix in indexes
    ]
    logger.debug(f"Sending block of {len(entries)} messages to {queue}")

    result = transport.send_batch(queue, entries)

    sent = set(indexes)
    for failure in result.failed:
        ix = parse_correlation_id(failure.id, len(messages))
        if ix is None or ix not in sent:
            logger.warning(f"Suspect ID {failure.id} in send response")
            continue
        logger.warning(f"ID {failure.id} send not successful ({failure.message})")
        statuses[ix] = False
        errors[ix] = TransportError(f"{failure.code}: {failure.message}")
