"""Tests for the batch put pipeline."""

import pytest

from aws_extended_sqs.extended_queue.constants import (
    MAX_BLOCK_COUNT,
    MAX_BLOCK_SIZE,
    MAX_MESSAGE_SIZE,
    OVERSIZE_ATTRIBUTE_NAME,
)
from aws_extended_sqs.extended_queue.core.offload_codec import decode_marker
from aws_extended_sqs.extended_queue.core.put_operations import batch_put
from aws_extended_sqs.extended_queue.core.size_operations import batch_size
from aws_extended_sqs.extended_queue.exceptions import (
    BadQueueHandleError,
    BlockCountTooLargeError,
    MessageTooLargeError,
    PartialFailureError,
    TransportError,
)
from aws_extended_sqs.extended_queue.models import BatchFailure, Message
from tests.conftest import BUCKET, make_message, payload_of


def put(transport, blob_store, queue, messages):
    return batch_put(transport, blob_store, BUCKET, queue, messages)


def sent_ids(transport):
    return [[entry.id for entry in call] for call in transport.send_calls]


def test_empty_batch_is_a_no_op(transport, blob_store, queue):
    assert put(transport, blob_store, queue, []) == []
    assert transport.send_calls == []


def test_block_count_too_large_is_rejected_before_sending(transport, blob_store, queue):
    messages = [make_message(b"m") for _ in range(MAX_BLOCK_COUNT + 1)]
    with pytest.raises(BlockCountTooLargeError):
        put(transport, blob_store, queue, messages)
    assert transport.send_calls == []


def test_happy_day(transport, blob_store, queue):
    messages = [make_message(f"message {i}".encode()) for i in range(3)]

    assert put(transport, blob_store, queue, messages) == [True, True, True]
    assert sent_ids(transport) == [["0", "1", "2"]]
    assert [p for p, _ in transport.visible[queue]] == [b"message 0", b"message 1", b"message 2"]
    assert blob_store.objects == {}


def test_oversize_message_is_offloaded(transport, blob_store, queue):
    original = payload_of(MAX_MESSAGE_SIZE * 2)
    messages = [make_message(b"small"), make_message(original)]

    assert put(transport, blob_store, queue, messages) == [True, True]

    big = messages[1]
    assert big.is_offloaded
    blob = decode_marker(big.payload)
    assert blob.bucket == BUCKET
    assert blob_store.objects[(blob.bucket, blob.key)] == original
    sent = transport.send_calls[0][1]
    assert sent.payload == big.payload
    assert OVERSIZE_ATTRIBUTE_NAME in [a.name for a in sent.attributes]


def test_offload_failure_is_isolated(transport, blob_store, queue):
    blob_store.fail_put = True
    messages = [
        make_message(b"first"),
        make_message(payload_of(MAX_MESSAGE_SIZE + 1)),
        make_message(b"third"),
    ]

    with pytest.raises(PartialFailureError) as excinfo:
        put(transport, blob_store, queue, messages)

    assert excinfo.value.statuses == [True, False, True]
    assert isinstance(excinfo.value.errors[1], TransportError)
    assert sent_ids(transport) == [["0", "2"]]


def test_message_still_too_large_after_offload_is_isolated(transport, blob_store, queue):
    messages = [
        make_message(b"first"),
        make_message(payload_of(10), ("huge", "v" * MAX_MESSAGE_SIZE)),
    ]

    with pytest.raises(PartialFailureError) as excinfo:
        put(transport, blob_store, queue, messages)

    assert excinfo.value.statuses == [True, False]
    assert isinstance(excinfo.value.errors[1], MessageTooLargeError)
    assert sent_ids(transport) == [["0"]]


def test_oversize_block_is_split_positionally(transport, blob_store, queue):
    messages = [make_message(payload_of(100_000, bytes([65 + i]))) for i in range(5)]

    statuses = put(transport, blob_store, queue, messages)

    assert statuses == [True] * 5
    assert sent_ids(transport) == [["0", "1"], ["2"], ["3", "4"]]
    for call in transport.send_calls:
        assert sum(len(e.payload) for e in call) <= MAX_BLOCK_SIZE
    assert [p[:1] for p, _ in transport.visible[queue]] == [b"A", b"B", b"C", b"D", b"E"]
    assert blob_store.objects == {}


def test_failure_after_split_maps_to_input_position(transport, blob_store, queue):
    transport.fail_send_ids = {"3"}
    messages = [make_message(payload_of(100_000)) for _ in range(5)]

    with pytest.raises(PartialFailureError) as excinfo:
        put(transport, blob_store, queue, messages)

    assert excinfo.value.statuses == [True, True, True, False, True]
    assert excinfo.value.failed_indexes == [3]


def test_full_block_of_maximum_size_messages(transport, blob_store, queue):
    messages = [make_message(payload_of(MAX_MESSAGE_SIZE - 100)) for _ in range(MAX_BLOCK_COUNT)]

    statuses = put(transport, blob_store, queue, messages)

    assert statuses == [True] * MAX_BLOCK_COUNT
    assert sorted(int(i) for ids in sent_ids(transport) for i in ids) == list(range(10))
    assert all(len(call) == 1 for call in transport.send_calls)


def test_transport_failures_are_reported(transport, blob_store, queue):
    transport.fail_send_ids = {"0", "2"}
    messages = [make_message(b"a"), make_message(b"b"), make_message(b"c")]

    with pytest.raises(PartialFailureError) as excinfo:
        put(transport, blob_store, queue, messages)

    assert excinfo.value.statuses == [False, True, False]
    assert [p for p, _ in transport.visible[queue]] == [b"b"]


def test_suspect_ids_in_response_are_ignored(transport, blob_store, queue):
    transport.extra_send_failures = [
        BatchFailure("7", "InternalError", "out of range"),
        BatchFailure("-1", "InternalError", "negative"),
        BatchFailure("bogus", "InternalError", "not an index"),
    ]
    assert put(transport, blob_store, queue, [make_message(b"a")]) == [True]
    assert [p for p, _ in transport.visible[queue]] == [b"a"]


def test_multibyte_attributes_force_a_split(transport, blob_store, queue):
    messages = [make_message(b"p", ("k", "ж" * 40000)) for _ in range(5)]

    assert put(transport, blob_store, queue, messages) == [True] * 5

    assert len(transport.send_calls) > 1
    for call in transport.send_calls:
        block = [Message(attributes=e.attributes, payload=e.payload) for e in call]
        assert batch_size(block) <= MAX_BLOCK_SIZE


def test_send_error_after_split_is_reported_per_message(transport, blob_store, queue):
    transport.send_error = TransportError("connection reset")
    transport.send_error_call = 2
    messages = [make_message(payload_of(100_000, bytes([ord("a") + i]))) for i in range(4)]

    with pytest.raises(PartialFailureError) as excinfo:
        put(transport, blob_store, queue, messages)

    error = excinfo.value
    assert error.statuses == [True, True, False, False]
    assert error.errors[2] is transport.send_error
    assert error.errors[3] is transport.send_error
    assert len(transport.visible[queue]) == 2


def test_foreign_blob_store_error_fails_only_that_message(transport, blob_store, queue):
    blob_store.error = OSError("disk full")
    messages = [make_message(payload_of(MAX_MESSAGE_SIZE + 1)), make_message(b"small")]

    with pytest.raises(PartialFailureError) as excinfo:
        put(transport, blob_store, queue, messages)

    assert excinfo.value.statuses == [False, True]
    assert isinstance(excinfo.value.errors[0], OSError)
    assert [p for p, _ in transport.visible[queue]] == [b"small"]


def test_transport_error_propagates(transport, blob_store, queue):
    transport.send_error = BadQueueHandleError("Queue handle is bad")
    with pytest.raises(BadQueueHandleError):
        put(transport, blob_store, queue, [make_message(b"a")])


def test_no_network_call_when_nothing_is_eligible(transport, blob_store, queue):
    blob_store.fail_put = True
    with pytest.raises(PartialFailureError) as excinfo:
        put(transport, blob_store, queue, [make_message(payload_of(MAX_MESSAGE_SIZE + 1))])
    assert excinfo.value.statuses == [False]
    assert transport.send_calls == []
