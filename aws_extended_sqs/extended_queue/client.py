"""
Extended queue client.

Batched SQS access with transparent S3 offload of oversize payloads,
compatible with the Amazon SQS Extended Client (Java).
"""

from .config import ExtendedQueueSettings
from .constants import DEFAULT_RETRY_ATTEMPTS, DEFAULT_RETRY_DELAY
from .core.delete_operations import batch_delete
from .core.get_operations import batch_get
from .core.info_operations import get_messages_available, get_queue_handle
from .core.interfaces import BlobStore, QueueTransport
from .core.put_operations import batch_put
from .core.retry_operations import retry_put
from .core.s3_blob_store import S3BlobStore
from .core.sqs_transport import SQSTransport
from .exceptions import MissingConfigurationError
from .models import Message, QueueHandle


class ExtendedQueueClient:
    """
    Client for a size-limited queue that behaves as if payloads of any size fit.

    The client only holds configuration and its collaborators. Sharing one
    instance between threads is safe as long as the transport and blob store
    are safe for concurrent use.
    """

    def __init__(
        self,
        transport: QueueTransport,
        blob_store: BlobStore,
        bucket_name: str,
        retry_attempts: int = DEFAULT_RETRY_ATTEMPTS,
        retry_delay: float = DEFAULT_RETRY_DELAY,
    ):
        """
        Initialize the client.

        Args:
            transport: Queue transport
            blob_store: Blob store for oversize payloads
            bucket_name: Bucket for oversize payloads
            retry_attempts: Default attempt budget for retry_message_put
            retry_delay: Delay in seconds before each retry

        Raises:
            MissingConfigurationError: If bucket_name is empty
        """
        if not bucket_name:
            raise MissingConfigurationError("Message bucket name is required")
        self.transport = transport
        self.blob_store = blob_store
        self.bucket_name = bucket_name
        self.retry_attempts = retry_attempts
        self.retry_delay = retry_delay

    @classmethod
    def from_settings(cls, settings: ExtendedQueueSettings | None = None) -> "ExtendedQueueClient":
        """
        Build a client backed by boto3 SQS and S3.

        Args:
            settings: Settings (read from the environment when omitted)
        """
        if settings is None:
            settings = ExtendedQueueSettings()
        transport = SQSTransport(
            region=settings.region,
            profile=settings.profile,
            slow_request_ms=settings.slow_request_ms,
        )
        blob_store = S3BlobStore(region=settings.region, profile=settings.profile)
        return cls(
            transport,
            blob_store,
            settings.message_bucket_name,
            retry_attempts=settings.retry_attempts,
            retry_delay=settings.retry_delay_seconds,
        )

    def queue_handle(self, queue_name: str) -> QueueHandle:
        """Resolve a queue name to its handle (QueueNotFoundError if unknown)."""
        return get_queue_handle(self.transport, queue_name)

    def messages_available(self, queue_name: str) -> int:
        """Approximate number of messages waiting in a named queue."""
        return get_messages_available(self.transport, queue_name)

    def batch_message_get(
        self, queue: QueueHandle, max_messages: int, wait_seconds: int
    ) -> list[Message]:
        """Get up to max_messages, long polling for at most wait_seconds."""
        return batch_get(self.transport, self.blob_store, queue, max_messages, wait_seconds)

    def batch_message_put(self, queue: QueueHandle, messages: list[Message]) -> list[bool]:
        """Put a batch of messages; oversize payloads are offloaded in place."""
        return batch_put(self.transport, self.blob_store, self.bucket_name, queue, messages)

    def batch_message_delete(self, queue: QueueHandle, messages: list[Message]) -> list[bool]:
        """Delete received messages and the blobs behind offloaded ones."""
        return batch_delete(self.transport, self.blob_store, queue, messages)

    def retry_message_put(
        self,
        queue: QueueHandle,
        messages: list[Message],
        statuses: list[bool],
        max_attempts: int | None = None,
    ) -> None:
        """Resend the messages whose status is False (RetriesExhaustedError when out of attempts)."""
        if max_attempts is None:
            max_attempts = self.retry_attempts
        retry_put(
            self.batch_message_put, queue, messages, statuses, max_attempts, self.retry_delay
        )
