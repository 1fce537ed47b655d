"""Batched SQS client with transparent S3 offload of oversize payloads."""

from aws_extended_sqs.extended_queue.client import ExtendedQueueClient
from aws_extended_sqs.extended_queue.config import ExtendedQueueSettings
from aws_extended_sqs.extended_queue.constants import (
    ATTRIBUTE_KEY_RECORD_ID,
    ATTRIBUTE_KEY_RECORD_OPERATION,
    ATTRIBUTE_KEY_RECORD_SOURCE,
    ATTRIBUTE_KEY_RECORD_TYPE,
    ATTRIBUTE_VALUE_RECORD_OPERATION_DELETE,
    ATTRIBUTE_VALUE_RECORD_OPERATION_UPDATE,
    ATTRIBUTE_VALUE_RECORD_TYPE_B64_MARC,
    ATTRIBUTE_VALUE_RECORD_TYPE_XML,
    MAX_BLOCK_COUNT,
    MAX_BLOCK_SIZE,
    MAX_MESSAGE_SIZE,
    MAX_WAIT_SECONDS,
)
from aws_extended_sqs.extended_queue.core.s3_blob_store import S3BlobStore
from aws_extended_sqs.extended_queue.core.sqs_transport import SQSTransport
from aws_extended_sqs.extended_queue.exceptions import (
    BadHandleError,
    BadQueueHandleError,
    BadReceiptHandleError,
    BlockCountTooLargeError,
    ContentMismatchError,
    ExtendedQueueError,
    NotFoundError,
    PartialFailureError,
    QueueNotFoundError,
    RetriesExhaustedError,
    TransportError,
    ValidationError,
    WaitTooLargeError,
)
from aws_extended_sqs.extended_queue.logging_config import setup_logging
from aws_extended_sqs.extended_queue.models import Attribute, BlobReference, Message

__version__ = "0.1.0"

__all__ = [
    "ATTRIBUTE_KEY_RECORD_ID",
    "ATTRIBUTE_KEY_RECORD_OPERATION",
    "ATTRIBUTE_KEY_RECORD_SOURCE",
    "ATTRIBUTE_KEY_RECORD_TYPE",
    "ATTRIBUTE_VALUE_RECORD_OPERATION_DELETE",
    "ATTRIBUTE_VALUE_RECORD_OPERATION_UPDATE",
    "ATTRIBUTE_VALUE_RECORD_TYPE_B64_MARC",
    "ATTRIBUTE_VALUE_RECORD_TYPE_XML",
    "Attribute",
    "BadHandleError",
    "BadQueueHandleError",
    "BadReceiptHandleError",
    "BlobReference",
    "BlockCountTooLargeError",
    "ContentMismatchError",
    "ExtendedQueueClient",
    "ExtendedQueueError",
    "ExtendedQueueSettings",
    "MAX_BLOCK_COUNT",
    "MAX_BLOCK_SIZE",
    "MAX_MESSAGE_SIZE",
    "MAX_WAIT_SECONDS",
    "Message",
    "NotFoundError",
    "PartialFailureError",
    "QueueNotFoundError",
    "RetriesExhaustedError",
    "S3BlobStore",
    "SQSTransport",
    "TransportError",
    "ValidationError",
    "WaitTooLargeError",
    "setup_logging",
]
