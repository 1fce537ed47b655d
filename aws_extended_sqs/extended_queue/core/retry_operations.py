"""
Retry operations for extended queue.
"""

import time
from collections.abc import Callable

from ..constants import DEFAULT_RETRY_DELAY
from ..exceptions import PartialFailureError, RetriesExhaustedError
from ..logging_config import get_logger
from ..models import Message, QueueHandle

logger = get_logger(__name__)

PutFunction = Callable[[QueueHandle, list[Message]], list[bool]]


def retry_put(
    put: PutFunction,
    queue: QueueHandle,
    messages: list[Message],
    statuses: list[bool],
    max_attempts: int,
    delay: float = DEFAULT_RETRY_DELAY,
) -> None:
    """
    Resend the messages a previous batch put failed on.

    Only PartialFailureError is retried, each time narrowing to the messages
    that failed again. Anything else propagates at once.

    Args:
        put: Batch put callable, e.g. ExtendedQueueClient.batch_message_put
        queue: Queue handle
        messages: Messages of the original put
        statuses: Statuses of the original put, aligned with messages
        max_attempts: Maximum number of resends
        delay: Fixed delay in seconds before each resend

    Raises:
        RetriesExhaustedError: If messages still fail after max_attempts
            (statuses and messages describe the remaining failures)
        ExtendedQueueError: For any non-partial failure
    """
    pending = [m for m, ok in zip(messages, statuses) if not ok]
    attempts_left = max_attempts

    while pending:
        if attempts_left <= 0:
            raise RetriesExhaustedError(
                [False] * len(pending),
                messages=pending,
                message=f"{len(pending)} message(s) still failing after {max_attempts} retries",
            )

        logger.info(f"Retrying put of {len(pending)} message(s), {attempts_left} attempt(s) left")
        time.sleep(delay)
        try:
            put(queue, pending)
            return
        except PartialFailureError as e:
            pending = [m for m, ok in zip(pending, e.statuses) if not ok]
            attempts_left -= 1
