"""
S3 blob store wrapper with error handling.
"""

import time
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..exceptions import AWSPermissionError, AWSThrottlingError, BlobNotFoundError, TransportError
from ..logging_config import get_logger

logger = get_logger(__name__)


class S3BlobStore:
    """S3 client wrapper implementing the BlobStore interface."""

    def __init__(
        self,
        region: str | None = None,
        profile: str | None = None,
        client: Any = None,
    ):
        """
        Initialize S3 blob store.

        Args:
            region: AWS region (optional, uses SDK default)
            profile: AWS profile (optional, uses SDK default)
            client: Pre-built boto3 S3 client (overrides region/profile)
        """
        if client is None:
            session = boto3.Session(profile_name=profile, region_name=region)
            client = session.client("s3")
        self.client = client

    def put(self, bucket: str, key: str, data: bytes) -> None:
        """
        Upload a blob.

        Raises:
            BlobNotFoundError: If the bucket does not exist
            TransportError: For other S3 errors
        """
        logger.info(f"Uploading to s3://{bucket}/{key} ({len(data)} bytes)")
        start = time.monotonic()
        try:
            self.client.put_object(Bucket=bucket, Key=key, Body=data)
        except ClientError as e:
            self._handle_error(e, bucket, key)
            raise  # For type checker
        except BotoCoreError as e:
            raise TransportError(f"S3 upload of s3://{bucket}/{key} failed: {e}") from e
        logger.info(
            f"Upload of s3://{bucket}/{key} complete in {time.monotonic() - start:0.2f} seconds"
        )

    def get(self, bucket: str, key: str) -> bytes:
        """
        Download a blob.

        Raises:
            BlobNotFoundError: If the bucket or key does not exist
            TransportError: For other S3 errors
        """
        logger.info(f"Downloading from s3://{bucket}/{key}")
        start = time.monotonic()
        try:
            response = self.client.get_object(Bucket=bucket, Key=key)
            contents: bytes = response["Body"].read()
        except ClientError as e:
            self._handle_error(e, bucket, key)
            raise  # For type checker
        except BotoCoreError as e:
            raise TransportError(f"S3 download of s3://{bucket}/{key} failed: {e}") from e
        logger.info(
            f"Download of s3://{bucket}/{key} complete in {time.monotonic() - start:0.2f} seconds"
        )
        return contents

    def delete(self, bucket: str, key: str) -> None:
        """
        Delete a blob.

        Raises:
            BlobNotFoundError: If the bucket does not exist
            TransportError: For other S3 errors
        """
        logger.info(f"Deleting s3://{bucket}/{key}")
        start = time.monotonic()
        try:
            self.client.delete_object(Bucket=bucket, Key=key)
        except ClientError as e:
            self._handle_error(e, bucket, key)
            raise  # For type checker
        except BotoCoreError as e:
            raise TransportError(f"S3 delete of s3://{bucket}/{key} failed: {e}") from e
        logger.info(
            f"Delete of s3://{bucket}/{key} complete in {time.monotonic() - start:0.2f} seconds"
        )

    def _handle_error(self, error: ClientError, bucket: str, key: str) -> None:
        """
        Convert boto3 errors to extended queue exceptions.

        Raises:
            BlobNotFoundError: If bucket or key not found
            AWSThrottlingError: If throttled
            AWSPermissionError: If permission denied
            TransportError: For other errors
        """
        code = str(error.response.get("Error", {}).get("Code", ""))

        if code in ("NoSuchKey", "NoSuchBucket", "404"):
            raise BlobNotFoundError(f"s3://{bucket}/{key} not found") from error
        elif code in ("SlowDown", "Throttling", "ThrottlingException"):
            raise AWSThrottlingError("S3 throttling - retry with backoff") from error
        elif code in ("AccessDenied", "AccessDeniedException"):
            raise AWSPermissionError("AWS permission denied") from error
        else:
            raise TransportError(f"S3 error: {error}") from error
