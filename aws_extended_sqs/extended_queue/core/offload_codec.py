"""
Offload codec for oversize messages.

An oversize payload is stored as a blob and replaced by a pointer marker in the
same format the Amazon SQS Extended Client (Java) writes:

    ["com.amazon.sqs.javamessaging.MessageS3Pointer",
     {"s3BucketName":"my-bucket","s3Key":"9b9e4bc4-8bd8-4527-a25e-818f17dd5aab"}]

The original payload length travels in the SQSLargePayloadSize attribute, and
the blob location is folded into the receipt handle so that a later delete can
find the blob again.
"""

import json
import uuid

from ..constants import OVERSIZE_ATTRIBUTE_NAME, S3_BUCKET_FIELD, S3_KEY_FIELD, S3_POINTER_TAG
from ..exceptions import BadReceiptHandleError, ContentMismatchError, MalformedPayloadError
from ..logging_config import get_logger
from ..models import BlobReceiptHandle, BlobReference, Message, parse_receipt_handle
from .interfaces import BlobStore

logger = get_logger(__name__)


def encode_marker(blob: BlobReference) -> bytes:
    """
    Encode the pointer marker that replaces an offloaded payload.

    Args:
        blob: Location of the stored payload

    Returns:
        Marker payload bytes
    """
    marker = [S3_POINTER_TAG, {S3_BUCKET_FIELD: blob.bucket, S3_KEY_FIELD: blob.key}]
    return json.dumps(marker, separators=(",", ":")).encode("utf-8")


def decode_marker(payload: bytes) -> BlobReference:
    """
    Decode a pointer marker.

    Args:
        payload: Marker payload bytes

    Returns:
        Location of the stored payload

    Raises:
        MalformedPayloadError: If the payload is not a pointer marker
    """
    try:
        marker = json.loads(payload)
    except (ValueError, UnicodeDecodeError) as e:
        raise MalformedPayloadError(f"Offload marker is not valid JSON: {e}") from e

    if not isinstance(marker, list) or len(marker) != 2 or not isinstance(marker[1], dict):
        raise MalformedPayloadError("Offload marker has an unexpected structure")

    bucket = marker[1].get(S3_BUCKET_FIELD)
    key = marker[1].get(S3_KEY_FIELD)
    if not isinstance(bucket, str) or not isinstance(key, str) or not bucket or not key:
        raise MalformedPayloadError("Offload marker is missing the bucket or key")
    return BlobReference(bucket, key)


def blob_reference(message: Message) -> BlobReference:
    """
    Blob location carried by an offloaded message's receipt handle.

    Raises:
        BadReceiptHandleError: If the receipt handle carries no well-formed location
    """
    handle = parse_receipt_handle(message.receipt_handle)
    if not isinstance(handle, BlobReceiptHandle):
        raise BadReceiptHandleError("Receipt handle carries no blob location")
    return handle.blob


def offload(message: Message, bucket: str, blob_store: BlobStore) -> None:
    """
    Move a message payload to the blob store.

    Stores the payload under a fresh key, replaces it with a pointer marker,
    records the original length in the SQSLargePayloadSize attribute and
    folds the blob location into the receipt handle. The message is mutated
    in place. Already offloaded messages are left alone.

    Args:
        message: Message to convert
        bucket: Bucket for the payload
        blob_store: Blob store to upload to

    Raises:
        ExtendedQueueError: If the upload fails (message left unchanged)
    """
    if message.is_offloaded:
        return

    blob = BlobReference(bucket, str(uuid.uuid4()))
    blob_store.put(blob.bucket, blob.key, message.payload)

    message.receipt_handle = BlobReceiptHandle(blob, message.receipt_handle).encode()
    message.add_attribute(OVERSIZE_ATTRIBUTE_NAME, str(len(message.payload)))
    message.payload = encode_marker(blob)
    message.mark_offloaded()


def resolve(message: Message, blob_store: BlobStore) -> None:
    """
    Restore the payload of a received offloaded message.

    Messages without the SQSLargePayloadSize attribute are not offloaded and
    are left alone. On failure the message is flagged incomplete and left in
    its received state so the caller can still decide to delete or skip it.

    Args:
        message: Message as received from the queue
        blob_store: Blob store to download from

    Raises:
        MalformedPayloadError: If the marker or declared size cannot be decoded
        ContentMismatchError: If the blob size differs from the declared size
        ExtendedQueueError: If the download fails
    """
    declared = message.get_attribute(OVERSIZE_ATTRIBUTE_NAME)
    if declared is None:
        return

    try:
        blob = decode_marker(message.payload)
        try:
            expected = int(declared)
        except ValueError as e:
            raise MalformedPayloadError(f"Bad {OVERSIZE_ATTRIBUTE_NAME} value '{declared}'") from e

        contents = blob_store.get(blob.bucket, blob.key)
        if len(contents) != expected:
            logger.warning(
                f"Unexpected message payload size. Expected {expected}, actual {len(contents)}"
            )
            raise ContentMismatchError(expected, len(contents))
    except Exception:
        message.incomplete = True
        raise

    message.receipt_handle = BlobReceiptHandle(blob, message.receipt_handle).encode()
    message.delete_attribute(OVERSIZE_ATTRIBUTE_NAME)
    message.payload = contents
    message.mark_offloaded()


def cleanup(message: Message, blob_store: BlobStore) -> None:
    """
    Delete the blob backing an offloaded message.

    Args:
        message: Offloaded message (non-offloaded messages are ignored)
        blob_store: Blob store holding the payload

    Raises:
        BadReceiptHandleError: If the receipt handle carries no well-formed location
        ExtendedQueueError: If the delete fails
    """
    if not message.is_offloaded:
        return

    blob = blob_reference(message)
    blob_store.delete(blob.bucket, blob.key)
