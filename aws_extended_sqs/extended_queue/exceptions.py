"""
Custom exceptions for extended queue operations.
"""

from typing import Any

from .constants import MAX_BLOCK_COUNT, MAX_MESSAGE_SIZE, MAX_WAIT_SECONDS


class ExtendedQueueError(Exception):
    """Base exception for extended queue operations."""

    pass


class ValidationError(ExtendedQueueError):
    """Bad argument detected before any network call."""

    pass


class BlockCountTooLargeError(ValidationError):
    """Too many messages in a block."""

    def __init__(self, count: int):
        super().__init__(
            f"Block count is too large ({count}). Must be {MAX_BLOCK_COUNT} or less"
        )
        self.count = count


class MessageTooLargeError(ValidationError):
    """Message exceeds the maximum message size, even after offload."""

    def __init__(self, size: int):
        super().__init__(
            f"Message size is too large ({size}). Must be {MAX_MESSAGE_SIZE} or less"
        )
        self.size = size


class WaitTooLargeError(ValidationError):
    """Wait time outside the allowed long poll window."""

    def __init__(self, wait_seconds: float):
        super().__init__(
            f"Wait time is invalid ({wait_seconds}). Must be between 0 and {MAX_WAIT_SECONDS}"
        )
        self.wait_seconds = wait_seconds


class MissingConfigurationError(ValidationError):
    """Configuration information is incomplete."""

    pass


class NotFoundError(ExtendedQueueError):
    """Named resource does not exist."""

    pass


class QueueNotFoundError(NotFoundError):
    """Queue name does not exist."""

    pass


class BlobNotFoundError(NotFoundError):
    """Blob object (or its bucket) does not exist."""

    pass


class BadHandleError(ExtendedQueueError):
    """Handle is malformed."""

    pass


class BadQueueHandleError(BadHandleError):
    """Queue handle is bad."""

    pass


class BadReceiptHandleError(BadHandleError):
    """Receipt handle format is incorrect for large message support."""

    pass


class PartialFailureError(ExtendedQueueError):
    """
    One or more operations in a batch were not successful.

    Attributes:
        statuses: Per-message success flags, aligned with the input messages
        messages: Messages produced by the operation (batch get only)
        errors: Per-index exceptions that caused a status to be false, where known
    """

    def __init__(
        self,
        statuses: list[bool],
        messages: list[Any] | None = None,
        errors: dict[int, Exception] | None = None,
        message: str = "One or more operations were not successful",
    ):
        super().__init__(message)
        self.statuses = statuses
        self.messages = messages if messages is not None else []
        self.errors = errors if errors is not None else {}

    @property
    def failed_indexes(self) -> list[int]:
        """Indexes of the entries that failed."""
        return [ix for ix, ok in enumerate(self.statuses) if not ok]


class RetriesExhaustedError(PartialFailureError):
    """Retry budget used up with entries still failing."""

    pass


class ContentMismatchError(ExtendedQueueError):
    """Actual blob size differs from the size declared by the message."""

    def __init__(self, expected: int, actual: int):
        super().__init__(
            f"Actual S3 message size differs from expected size (expected {expected}, actual {actual})"
        )
        self.expected = expected
        self.actual = actual


class MalformedPayloadError(ExtendedQueueError):
    """Offload marker payload or size attribute cannot be decoded."""

    pass


class TransportError(ExtendedQueueError):
    """Unclassified failure reported by the queue or blob store."""

    pass


class AWSThrottlingError(TransportError):
    """AWS throttling occurred."""

    pass


class AWSPermissionError(TransportError):
    """AWS permission denied."""

    pass
