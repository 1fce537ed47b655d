"""
Info operations for extended queue - queue lookup and depth.
"""

from ..logging_config import get_logger
from ..models import QueueHandle
from .interfaces import QueueTransport

logger = get_logger(__name__)


def get_queue_handle(transport: QueueTransport, queue_name: str) -> QueueHandle:
    """
    Resolve a queue name to its handle.

    Raises:
        QueueNotFoundError: If the queue does not exist
    """
    handle = transport.resolve_handle(queue_name)
    logger.debug(f"Queue '{queue_name}' resolved to {handle}")
    return handle


def get_messages_available(transport: QueueTransport, queue_name: str) -> int:
    """
    Approximate number of messages waiting in a named queue.

    Raises:
        QueueNotFoundError: If the queue does not exist
    """
    handle = get_queue_handle(transport, queue_name)
    return transport.messages_available(handle)
