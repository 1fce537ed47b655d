"""
Constants for extended queue operations.

Limits mirror the hard SQS quotas. The offload literals must match the
Amazon SQS Extended Client (Java) byte for byte so that messages written by
either side can be read by the other.
"""

# Queue limits
MAX_BLOCK_COUNT = 10  # messages per batch
MAX_BLOCK_SIZE = 262144  # bytes per batch
MAX_MESSAGE_SIZE = MAX_BLOCK_SIZE  # bytes per message
MAX_WAIT_SECONDS = 20  # long poll ceiling

# Size approximation: padding applied to each string of an attribute pair
ATTRIBUTE_PAD_FACTOR = 3

# Oversize message support (Java extended client compatible)
OVERSIZE_ATTRIBUTE_NAME = "SQSLargePayloadSize"
BUCKET_NAME_MARKER = "-..s3BucketName..-"
BUCKET_KEY_MARKER = "-..s3Key..-"
S3_POINTER_TAG = "com.amazon.sqs.javamessaging.MessageS3Pointer"
S3_BUCKET_FIELD = "s3BucketName"
S3_KEY_FIELD = "s3Key"

# SQS system attribute names
SYSTEM_ATTR_SENT_TIMESTAMP = "SentTimestamp"
SYSTEM_ATTR_FIRST_RECEIVE_TIMESTAMP = "ApproximateFirstReceiveTimestamp"
QUEUE_ATTR_MESSAGES_AVAILABLE = "ApproximateNumberOfMessages"

# Standard application attribute keys and values
ATTRIBUTE_KEY_RECORD_ID = "id"
ATTRIBUTE_KEY_RECORD_TYPE = "type"
ATTRIBUTE_KEY_RECORD_SOURCE = "source"
ATTRIBUTE_KEY_RECORD_OPERATION = "operation"

ATTRIBUTE_VALUE_RECORD_TYPE_B64_MARC = "base64/marc"
ATTRIBUTE_VALUE_RECORD_TYPE_XML = "xml"
ATTRIBUTE_VALUE_RECORD_OPERATION_UPDATE = "update"
ATTRIBUTE_VALUE_RECORD_OPERATION_DELETE = "delete"

# Failure code reported for payloads SQS cannot carry
INVALID_MESSAGE_CONTENTS = "InvalidMessageContents"

# Retry behavior
DEFAULT_RETRY_ATTEMPTS = 3
DEFAULT_RETRY_DELAY = 1.0  # seconds between attempts

# Requests slower than this (milliseconds) are logged
SLOW_REQUEST_THRESHOLD_MS = 250
