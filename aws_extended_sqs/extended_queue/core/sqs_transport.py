"""
SQS transport wrapper with error handling.
"""

import time
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..constants import (
    INVALID_MESSAGE_CONTENTS,
    QUEUE_ATTR_MESSAGES_AVAILABLE,
    SLOW_REQUEST_THRESHOLD_MS,
)
from ..exceptions import (
    AWSPermissionError,
    AWSThrottlingError,
    BadQueueHandleError,
    QueueNotFoundError,
    TransportError,
)
from ..logging_config import get_logger
from ..models import (
    Attribute,
    BatchFailure,
    BatchResult,
    DeleteEntry,
    QueueHandle,
    ReceivedMessage,
    SendEntry,
)
from ..utils import warn_if_slow

logger = get_logger(__name__)

_QUEUE_MISSING_CODES = ("QueueDoesNotExist", "AWS.SimpleQueueService.NonExistentQueue")
_THROTTLING_CODES = ("ThrottlingException", "Throttling", "RequestThrottled")
_PERMISSION_CODES = ("AccessDenied", "AccessDeniedException")


class SQSTransport:
    """SQS client wrapper implementing the QueueTransport interface."""

    def __init__(
        self,
        region: str | None = None,
        profile: str | None = None,
        client: Any = None,
        slow_request_ms: int = SLOW_REQUEST_THRESHOLD_MS,
    ):
        """
        Initialize SQS transport.

        Args:
            region: AWS region (optional, uses SDK default)
            profile: AWS profile (optional, uses SDK default)
            client: Pre-built boto3 SQS client (overrides region/profile)
            slow_request_ms: Log requests taking at least this long
        """
        if client is None:
            session = boto3.Session(profile_name=profile, region_name=region)
            client = session.client("sqs")
        self.client = client
        self.slow_request_ms = slow_request_ms

    def resolve_handle(self, queue_name: str) -> QueueHandle:
        """
        Get a queue handle (URL) for a queue name.

        Raises:
            QueueNotFoundError: If the queue does not exist
            TransportError: For other SQS errors
        """
        try:
            response = self.client.get_queue_url(QueueName=queue_name)
        except ClientError as e:
            if _error_code(e) in _QUEUE_MISSING_CODES:
                raise QueueNotFoundError(f"Queue '{queue_name}' does not exist") from e
            self._handle_error(e, "GetQueueUrl")
            raise  # For type checker
        except BotoCoreError as e:
            raise TransportError(f"SQS GetQueueUrl failed: {e}") from e
        return response["QueueUrl"]

    def send_batch(self, queue: QueueHandle, entries: list[SendEntry]) -> BatchResult:
        """
        Send a batch of messages.

        Entries whose payload is not valid UTF-8 cannot be carried by SQS; they
        are reported as failed without being sent.

        Raises:
            BadQueueHandleError: If the queue handle is bad
            TransportError: For other SQS errors
        """
        result = BatchResult()
        request_entries = []
        for entry in entries:
            try:
                body = entry.payload.decode("utf-8")
            except UnicodeDecodeError:
                logger.warning(f"ID {entry.id} payload is not valid UTF-8, not sent")
                result.failed.append(
                    BatchFailure(
                        id=entry.id,
                        code=INVALID_MESSAGE_CONTENTS,
                        message="Payload is not valid UTF-8",
                        sender_fault=True,
                    )
                )
                continue
            request: dict[str, Any] = {"Id": entry.id, "MessageBody": body}
            if entry.attributes:
                request["MessageAttributes"] = {
                    a.name: {"DataType": "String", "StringValue": a.value}
                    for a in entry.attributes
                }
            request_entries.append(request)

        if not request_entries:
            return result

        response = self._timed(
            "SendMessageBatch",
            self.client.send_message_batch,
            QueueUrl=queue,
            Entries=request_entries,
        )
        _merge_batch_response(result, response)
        return result

    def receive_batch(
        self, queue: QueueHandle, max_messages: int, wait_seconds: int
    ) -> list[ReceivedMessage]:
        """
        Receive a batch of messages.

        Raises:
            BadQueueHandleError: If the queue handle is bad
            TransportError: For other SQS errors
        """
        response = self._timed(
            "ReceiveMessage",
            self.client.receive_message,
            QueueUrl=queue,
            MaxNumberOfMessages=max_messages,
            WaitTimeSeconds=wait_seconds,
            MessageAttributeNames=["All"],
            AttributeNames=["All"],
        )

        messages = []
        for raw in response.get("Messages", []):
            attributes = [
                Attribute(name, value["StringValue"])
                for name, value in raw.get("MessageAttributes", {}).items()
                if "StringValue" in value
            ]
            messages.append(
                ReceivedMessage(
                    payload=raw.get("Body", "").encode("utf-8"),
                    receipt_handle=raw["ReceiptHandle"],
                    attributes=attributes,
                    system_attributes=dict(raw.get("Attributes", {})),
                )
            )
        return messages

    def delete_batch(self, queue: QueueHandle, entries: list[DeleteEntry]) -> BatchResult:
        """
        Delete a batch of messages by receipt handle.

        Raises:
            BadQueueHandleError: If the queue handle is bad
            TransportError: For other SQS errors
        """
        result = BatchResult()
        if not entries:
            return result

        response = self._timed(
            "DeleteMessageBatch",
            self.client.delete_message_batch,
            QueueUrl=queue,
            Entries=[{"Id": e.id, "ReceiptHandle": e.receipt_handle} for e in entries],
        )
        _merge_batch_response(result, response)
        return result

    def messages_available(self, queue: QueueHandle) -> int:
        """
        Approximate number of visible messages in the queue.

        Raises:
            BadQueueHandleError: If the queue handle is bad
            TransportError: For other SQS errors
        """
        response = self._timed(
            "GetQueueAttributes",
            self.client.get_queue_attributes,
            QueueUrl=queue,
            AttributeNames=[QUEUE_ATTR_MESSAGES_AVAILABLE],
        )
        value = response.get("Attributes", {}).get(QUEUE_ATTR_MESSAGES_AVAILABLE, "0")
        return int(value)

    def _timed(self, operation: str, call: Any, **kwargs: Any) -> dict[str, Any]:
        """Make an SQS request, logging it if slow and converting errors."""
        start = time.monotonic()
        try:
            response = call(**kwargs)
        except ClientError as e:
            self._handle_error(e, operation)
            raise  # For type checker
        except BotoCoreError as e:
            raise TransportError(f"SQS {operation} failed: {e}") from e
        elapsed_ms = int((time.monotonic() - start) * 1000)
        warn_if_slow(logger, elapsed_ms, operation, self.slow_request_ms)
        return response  # type: ignore[no-any-return]

    def _handle_error(self, error: ClientError, operation: str) -> None:
        """
        Convert boto3 errors to extended queue exceptions.

        Args:
            error: ClientError from boto3
            operation: SQS request name

        Raises:
            BadQueueHandleError: If the queue URL is invalid or the queue is gone
            AWSThrottlingError: If throttled
            AWSPermissionError: If permission denied
            TransportError: For other errors
        """
        code = _error_code(error)

        if code.startswith("InvalidAddress") or code in _QUEUE_MISSING_CODES:
            raise BadQueueHandleError(f"Queue handle is bad ({operation}): {error}") from error
        elif code in _THROTTLING_CODES:
            raise AWSThrottlingError(f"SQS throttling on {operation} - retry with backoff") from error
        elif code in _PERMISSION_CODES:
            raise AWSPermissionError(f"AWS permission denied on {operation}") from error
        else:
            raise TransportError(f"SQS {operation} error: {error}") from error


def _error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", ""))


def _merge_batch_response(result: BatchResult, response: dict[str, Any]) -> None:
    for ok in response.get("Successful", []):
        result.successful.append(ok["Id"])
    for failure in response.get("Failed", []):
        result.failed.append(
            BatchFailure(
                id=failure["Id"],
                code=failure.get("Code", ""),
                message=failure.get("Message", ""),
                sender_fault=failure.get("SenderFault", False),
            )
        )
