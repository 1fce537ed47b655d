"""
Type models for extended queue operations.
"""

from dataclasses import dataclass, field

from .constants import BUCKET_KEY_MARKER, BUCKET_NAME_MARKER
from .exceptions import BadReceiptHandleError

QueueHandle = str


@dataclass
class Attribute:
    """Message attribute, a simple name/value pair."""

    name: str
    value: str


@dataclass(frozen=True)
class BlobReference:
    """Location of an offloaded payload."""

    bucket: str
    key: str


@dataclass(frozen=True)
class NativeReceiptHandle:
    """Receipt handle exactly as issued by the queue."""

    value: str

    def encode(self) -> str:
        return self.value


@dataclass(frozen=True)
class BlobReceiptHandle:
    """Receipt handle of an offloaded message, carrying the blob location."""

    blob: BlobReference
    native: str

    def encode(self) -> str:
        """
        Encode into the enhanced receipt handle wire form.

        Format:
            bucket marker | bucket | bucket marker | key marker | key | key marker | native handle
        """
        return (
            f"{BUCKET_NAME_MARKER}{self.blob.bucket}{BUCKET_NAME_MARKER}"
            f"{BUCKET_KEY_MARKER}{self.blob.key}{BUCKET_KEY_MARKER}{self.native}"
        )


ReceiptHandle = NativeReceiptHandle | BlobReceiptHandle


def parse_receipt_handle(text: str) -> ReceiptHandle:
    """
    Decode a receipt handle from its wire form.

    A handle carrying neither marker is native. A handle carrying either marker
    must split into exactly three segments on both markers.

    Args:
        text: Receipt handle string

    Returns:
        NativeReceiptHandle or BlobReceiptHandle

    Raises:
        BadReceiptHandleError: If the enhanced form is malformed
    """
    if BUCKET_NAME_MARKER not in text and BUCKET_KEY_MARKER not in text:
        return NativeReceiptHandle(text)

    bucket_tokens = text.split(BUCKET_NAME_MARKER)
    key_tokens = text.split(BUCKET_KEY_MARKER)
    if len(bucket_tokens) != 3:
        raise BadReceiptHandleError("Cannot find bucket value in receipt handle")
    if len(key_tokens) != 3:
        raise BadReceiptHandleError("Cannot find key value in receipt handle")

    bucket = bucket_tokens[1]
    key = key_tokens[1]
    if not bucket or not key:
        raise BadReceiptHandleError("Receipt handle has an empty bucket or key")
    return BlobReceiptHandle(BlobReference(bucket, key), key_tokens[2])


@dataclass
class Message:
    """
    Queue message.

    Offloaded messages carry an enhanced receipt handle; use
    native_receipt_handle() for the handle the queue itself issued.
    """

    attributes: list[Attribute] = field(default_factory=list)
    payload: bytes = b""
    receipt_handle: str = ""
    first_sent: int = 0
    first_received: int = 0
    incomplete: bool = False
    _offloaded: bool = field(default=False, init=False, repr=False)

    @property
    def is_offloaded(self) -> bool:
        return self._offloaded

    def mark_offloaded(self) -> None:
        self._offloaded = True

    def get_attribute(self, name: str) -> str | None:
        """Return the value of the first attribute called name, or None."""
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute.value
        return None

    def add_attribute(self, name: str, value: str) -> None:
        """Set an attribute, replacing any existing one of the same name."""
        self.delete_attribute(name)
        self.attributes.append(Attribute(name, value))

    def delete_attribute(self, name: str) -> bool:
        for ix, attribute in enumerate(self.attributes):
            if attribute.name == name:
                del self.attributes[ix]
                return True
        return False

    def native_receipt_handle(self) -> str:
        """
        Receipt handle as issued by the queue.

        Raises:
            BadReceiptHandleError: If an offloaded message has a malformed handle
        """
        if not self._offloaded:
            return self.receipt_handle
        handle = parse_receipt_handle(self.receipt_handle)
        if isinstance(handle, BlobReceiptHandle):
            return handle.native
        raise BadReceiptHandleError("Offloaded message has no blob reference in its receipt handle")

    def content_clone(self) -> "Message":
        """Copy attributes and payload, none of the receipt or offload state."""
        return Message(
            attributes=[Attribute(a.name, a.value) for a in self.attributes],
            payload=self.payload,
        )


@dataclass
class SendEntry:
    """One entry of a batch send, as handed to the transport."""

    id: str
    payload: bytes
    attributes: list[Attribute] = field(default_factory=list)


@dataclass
class DeleteEntry:
    """One entry of a batch delete, as handed to the transport."""

    id: str
    receipt_handle: str


@dataclass
class BatchFailure:
    """Per-entry failure reported by the transport."""

    id: str
    code: str = ""
    message: str = ""
    sender_fault: bool = False


@dataclass
class BatchResult:
    """Outcome of a batch send or delete."""

    successful: list[str] = field(default_factory=list)
    failed: list[BatchFailure] = field(default_factory=list)


@dataclass
class ReceivedMessage:
    """Message as returned by the transport, before any offload resolution."""

    payload: bytes
    receipt_handle: str
    attributes: list[Attribute] = field(default_factory=list)
    system_attributes: dict[str, str] = field(default_factory=dict)
