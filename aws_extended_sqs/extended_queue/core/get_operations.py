"""
Batch get operations for extended queue.
"""

from ..constants import SYSTEM_ATTR_FIRST_RECEIVE_TIMESTAMP, SYSTEM_ATTR_SENT_TIMESTAMP
from ..exceptions import PartialFailureError, ValidationError
from ..logging_config import get_logger
from ..models import Attribute, Message, QueueHandle, ReceivedMessage
from .interfaces import BlobStore, QueueTransport
from .offload_codec import resolve
from .size_operations import validate_block_count, validate_wait_time

logger = get_logger(__name__)


def make_message(received: ReceivedMessage) -> Message:
    """
    Build a message from what the transport returned.

    Offloaded payloads are not resolved here; see batch_get.
    """
    return Message(
        attributes=[Attribute(a.name, a.value) for a in received.attributes],
        payload=received.payload,
        receipt_handle=received.receipt_handle,
        first_sent=_timestamp(received.system_attributes, SYSTEM_ATTR_SENT_TIMESTAMP),
        first_received=_timestamp(
            received.system_attributes, SYSTEM_ATTR_FIRST_RECEIVE_TIMESTAMP
        ),
    )


def batch_get(
    transport: QueueTransport,
    blob_store: BlobStore,
    queue: QueueHandle,
    max_messages: int,
    wait_seconds: int,
) -> list[Message]:
    """
    Get a batch of messages from a queue.

    Returns as soon as any messages are available, waiting no longer than
    wait_seconds otherwise. Offloaded payloads are fetched from the blob
    store. A message whose payload cannot be restored does not fail the
    batch: it is flagged incomplete and reported through PartialFailureError,
    which carries every received message.

    Args:
        transport: Queue transport
        blob_store: Blob store holding oversize payloads
        queue: Queue handle
        max_messages: Maximum messages to return (at most MAX_BLOCK_COUNT)
        wait_seconds: Long poll duration (at most MAX_WAIT_SECONDS)

    Returns:
        Received messages, possibly empty

    Raises:
        BlockCountTooLargeError: If max_messages exceeds MAX_BLOCK_COUNT
        WaitTooLargeError: If wait_seconds is out of range
        PartialFailureError: If one or more payloads could not be restored
        ExtendedQueueError: For transport errors affecting the whole batch
    """
    if max_messages < 0:
        raise ValidationError(f"Max messages cannot be negative ({max_messages})")
    validate_block_count(max_messages)
    validate_wait_time(wait_seconds)

    if max_messages == 0:
        return []

    received = transport.receive_batch(queue, max_messages, int(wait_seconds))
    if not received:
        return []

    messages = []
    statuses = []
    errors: dict[int, Exception] = {}
    for ix, raw in enumerate(received):
        message = make_message(raw)
        try:
            resolve(message, blob_store)
            statuses.append(True)
        except Exception as e:
            logger.warning(f"Message {ix} is incomplete ({e})")
            statuses.append(False)
            errors[ix] = e
        messages.append(message)

    if errors:
        raise PartialFailureError(statuses, messages=messages, errors=errors)
    return messages


def _timestamp(system_attributes: dict[str, str], name: str) -> int:
    try:
        return int(system_attributes.get(name, 0))
    except ValueError:
        return 0
