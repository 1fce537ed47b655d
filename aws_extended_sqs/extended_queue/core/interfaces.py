"""
Collaborator interfaces consumed by the batch pipelines.

Implementations are injected into the client. The client itself holds no
mutable state, so it is safe to share between threads exactly when the
injected transport and blob store are. boto3 clients are; boto3 resources
and sessions are not.

Implementations should raise ExtendedQueueError subclasses (NotFoundError,
TransportError and friends). Per-message steps (offload, resolve, blob
cleanup) isolate any exception to the message it concerns, so a foreign
exception from a blob store fails that message only.
"""

from typing import Protocol

from ..models import BatchResult, DeleteEntry, QueueHandle, ReceivedMessage, SendEntry


class QueueTransport(Protocol):
    """Size-limited message queue."""

    def resolve_handle(self, queue_name: str) -> QueueHandle:
        """Return the handle for a queue name, raising QueueNotFoundError if unknown."""
        ...

    def send_batch(self, queue: QueueHandle, entries: list[SendEntry]) -> BatchResult:
        """Send up to MAX_BLOCK_COUNT entries, reporting per-entry outcome by id."""
        ...

    def receive_batch(
        self, queue: QueueHandle, max_messages: int, wait_seconds: int
    ) -> list[ReceivedMessage]:
        """Receive up to max_messages, long polling for at most wait_seconds."""
        ...

    def delete_batch(self, queue: QueueHandle, entries: list[DeleteEntry]) -> BatchResult:
        """Delete up to MAX_BLOCK_COUNT entries, reporting per-entry outcome by id."""
        ...

    def messages_available(self, queue: QueueHandle) -> int:
        """Approximate number of visible messages."""
        ...


class BlobStore(Protocol):
    """Object store addressed by bucket and key."""

    def put(self, bucket: str, key: str, data: bytes) -> None: ...

    def get(self, bucket: str, key: str) -> bytes: ...

    def delete(self, bucket: str, key: str) -> None: ...
