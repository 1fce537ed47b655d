"""
Batch delete operations for extended queue.
"""

from ..exceptions import ExtendedQueueError, PartialFailureError, TransportError
from ..logging_config import get_logger
from ..models import DeleteEntry, Message, QueueHandle
from ..utils import format_correlation_id, parse_correlation_id
from .interfaces import BlobStore, QueueTransport
from .offload_codec import cleanup
from .size_operations import validate_block_count

logger = get_logger(__name__)


def batch_delete(
    transport: QueueTransport,
    blob_store: BlobStore,
    queue: QueueHandle,
    messages: list[Message],
) -> list[bool]:
    """
    Delete a batch of received messages so they are not delivered again.

    Once the queue confirms a delete, the blob behind an offloaded message is
    removed too. If that cleanup fails the message is reported as failed even
    though it is gone from the queue, so the orphaned blob is not lost track of.

    Args:
        transport: Queue transport
        blob_store: Blob store holding oversize payloads
        queue: Queue handle
        messages: Messages returned by batch get (at most MAX_BLOCK_COUNT)

    Returns:
        One True per message

    Raises:
        BlockCountTooLargeError: If more than MAX_BLOCK_COUNT messages are supplied
        PartialFailureError: If one or more deletes failed (carries statuses)
        ExtendedQueueError: For transport errors affecting the whole batch
    """
    if not messages:
        return []

    validate_block_count(len(messages))

    statuses = [True] * len(messages)
    errors: dict[int, Exception] = {}
    entries = []

    for ix, message in enumerate(messages):
        try:
            handle = message.native_receipt_handle()
        except ExtendedQueueError as e:
            logger.warning(f"ID {ix} has a bad receipt handle, not deleted ({e})")
            statuses[ix] = False
            errors[ix] = e
            continue
        entries.append(DeleteEntry(id=format_correlation_id(ix), receipt_handle=handle))

    if entries:
        result = transport.delete_batch(queue, entries)

        for failure in result.failed:
            ix = parse_correlation_id(failure.id, len(messages))
            if ix is None:
                logger.warning(f"Suspect ID {failure.id} in delete response")
                continue
            logger.warning(f"ID {failure.id} delete not successful ({failure.message})")
            statuses[ix] = False
            errors[ix] = TransportError(f"{failure.code}: {failure.message}")

        # Queue entries are gone; remove the blobs behind offloaded messages
        for correlation_id in result.successful:
            ix = parse_correlation_id(correlation_id, len(messages))
            if ix is None:
                logger.warning(f"Suspect ID {correlation_id} in delete response")
                continue
            if not messages[ix].is_offloaded:
                continue
            try:
                cleanup(messages[ix], blob_store)
            except Exception as e:
                logger.warning(f"ID {ix} failed deleting oversize message payload ({e})")
                statuses[ix] = False
                errors[ix] = e

    if not all(statuses):
        raise PartialFailureError(statuses, errors=errors)
    return statuses
