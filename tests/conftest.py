"""Shared fixtures: in-memory queue transport and blob store fakes, moto clients."""

import itertools

import boto3
import pytest
from moto import mock_aws

from aws_extended_sqs.extended_queue.client import ExtendedQueueClient
from aws_extended_sqs.extended_queue.constants import MAX_BLOCK_COUNT, MAX_BLOCK_SIZE
from aws_extended_sqs.extended_queue.exceptions import (
    BlobNotFoundError,
    QueueNotFoundError,
    TransportError,
)
from aws_extended_sqs.extended_queue.models import (
    Attribute,
    BatchFailure,
    BatchResult,
    DeleteEntry,
    Message,
    ReceivedMessage,
    SendEntry,
)

BUCKET = "test-extended-messages"
QUEUE_NAME = "test-extended-queue"
QUEUE_URL = f"https://queue.local/{QUEUE_NAME}"
SENT_TIMESTAMP = "1700000000000"
FIRST_RECEIVE_TIMESTAMP = "1700000001000"


class FakeTransport:
    """In-memory QueueTransport recording every batch request."""

    def __init__(self):
        self.queues = {QUEUE_NAME: QUEUE_URL}
        self.visible: dict[str, list[tuple[bytes, list[Attribute]]]] = {QUEUE_URL: []}
        self.in_flight: dict[str, tuple[bytes, list[Attribute]]] = {}
        self.send_calls: list[list[SendEntry]] = []
        self.receive_calls: list[tuple[int, int]] = []
        self.delete_calls: list[list[DeleteEntry]] = []
        self.fail_send_ids: set[str] = set()
        self.send_error: Exception | None = None
        self.send_error_call: int | None = None
        self.extra_send_failures: list[BatchFailure] = []
        self._handles = itertools.count(1)

    def resolve_handle(self, queue_name):
        if queue_name not in self.queues:
            raise QueueNotFoundError(f"Queue '{queue_name}' does not exist")
        return self.queues[queue_name]

    def send_batch(self, queue, entries):
        assert len(entries) <= MAX_BLOCK_COUNT
        assert sum(len(e.payload) for e in entries) <= MAX_BLOCK_SIZE
        self.send_calls.append(list(entries))
        if self.send_error is not None and self.send_error_call in (None, len(self.send_calls)):
            raise self.send_error

        result = BatchResult()
        for entry in entries:
            if entry.id in self.fail_send_ids:
                result.failed.append(BatchFailure(entry.id, "InternalError", "send failed"))
                continue
            attributes = [Attribute(a.name, a.value) for a in entry.attributes]
            self.visible[queue].append((entry.payload, attributes))
            result.successful.append(entry.id)
        result.failed.extend(self.extra_send_failures)
        return result

    def receive_batch(self, queue, max_messages, wait_seconds):
        self.receive_calls.append((max_messages, wait_seconds))
        taken = self.visible[queue][:max_messages]
        self.visible[queue] = self.visible[queue][max_messages:]

        received = []
        for payload, attributes in taken:
            handle = f"native-receipt-{next(self._handles)}"
            self.in_flight[handle] = (payload, attributes)
            received.append(
                ReceivedMessage(
                    payload=payload,
                    receipt_handle=handle,
                    attributes=[Attribute(a.name, a.value) for a in attributes],
                    system_attributes={
                        "SentTimestamp": SENT_TIMESTAMP,
                        "ApproximateFirstReceiveTimestamp": FIRST_RECEIVE_TIMESTAMP,
                    },
                )
            )
        return received

    def delete_batch(self, queue, entries):
        self.delete_calls.append(list(entries))
        result = BatchResult()
        for entry in entries:
            if entry.receipt_handle in self.in_flight:
                del self.in_flight[entry.receipt_handle]
                result.successful.append(entry.id)
            else:
                result.failed.append(
                    BatchFailure(entry.id, "ReceiptHandleIsInvalid", "invalid receipt handle", True)
                )
        return result

    def messages_available(self, queue):
        return len(self.visible[queue])


class FakeBlobStore:
    """In-memory BlobStore with switchable failures; error, when set, is raised by every call."""

    def __init__(self):
        self.objects: dict[tuple[str, str], bytes] = {}
        self.fail_put = False
        self.fail_delete = False
        self.error: Exception | None = None

    def put(self, bucket, key, data):
        if self.error is not None:
            raise self.error
        if self.fail_put:
            raise TransportError(f"upload of s3://{bucket}/{key} failed")
        self.objects[(bucket, key)] = bytes(data)

    def get(self, bucket, key):
        if self.error is not None:
            raise self.error
        if (bucket, key) not in self.objects:
            raise BlobNotFoundError(f"s3://{bucket}/{key} not found")
        return self.objects[(bucket, key)]

    def delete(self, bucket, key):
        if self.error is not None:
            raise self.error
        if self.fail_delete:
            raise TransportError(f"delete of s3://{bucket}/{key} failed")
        self.objects.pop((bucket, key), None)


def make_message(payload: bytes, *attributes: tuple[str, str]) -> Message:
    """Build an outgoing message with a 'type' attribute plus any extras."""
    attribs = [Attribute("type", "text")]
    attribs.extend(Attribute(name, value) for name, value in attributes)
    return Message(attributes=attribs, payload=payload)


def payload_of(size: int, fill: bytes = b"x") -> bytes:
    return (fill * size)[:size]


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def blob_store():
    return FakeBlobStore()


@pytest.fixture
def queue(transport):
    return transport.resolve_handle(QUEUE_NAME)


@pytest.fixture
def client(transport, blob_store):
    return ExtendedQueueClient(transport, blob_store, BUCKET, retry_attempts=3, retry_delay=0)


@pytest.fixture
def aws_credentials(monkeypatch):
    """Fake credentials so boto3 never reaches for real ones."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def aws(aws_credentials):
    """Mocked AWS with an SQS queue and an S3 bucket created."""
    with mock_aws():
        sqs = boto3.client("sqs", region_name="us-east-1")
        s3 = boto3.client("s3", region_name="us-east-1")
        sqs.create_queue(QueueName=QUEUE_NAME)
        s3.create_bucket(Bucket=BUCKET)
        yield sqs, s3
