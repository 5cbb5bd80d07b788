"""Listener loops that drive the queue poller."""

import logging
import math
import time
from typing import Callable

from fanout_listener.models.schemas import DedupState
from fanout_listener.services.poller import MAX_WAIT_TIME_SECONDS, QueuePoller

logger = logging.getLogger(__name__)


def listen(
    poller: QueuePoller,
    queue_url: str,
    timeout_seconds: float,
    dedup_state: DedupState,
    clock: Callable[[], float] = time.monotonic,
) -> str | None:
    """
    Wait up to timeout_seconds for a new command.

    SQS caps a single long poll at 20 seconds, so longer timeouts are split
    into consecutive polls.

    Args:
        poller: Queue poller service.
        queue_url: Resolved queue URL.
        timeout_seconds: Total time to wait. 0 performs one immediate poll.
        dedup_state: Dedup state shared with previous calls.
        clock: Monotonic clock.

    Returns:
        Message body, or None if nothing new arrived in time.
    """
    deadline = clock() + max(0.0, timeout_seconds)

    while True:
        remaining = deadline - clock()
        wait_time = min(MAX_WAIT_TIME_SECONDS, max(0, math.ceil(remaining)))

        body = poller.poll_once(queue_url, wait_time, dedup_state)
        if body is not None:
            return body

        if clock() >= deadline:
            logger.debug("No new message within %s seconds", timeout_seconds)
            return None


def run_listener_loop(
    poller: QueuePoller,
    queue_url: str,
    dedup_state: DedupState,
    on_command: Callable[[str], None],
    wait_seconds: int = MAX_WAIT_TIME_SECONDS,
    max_commands: int | None = None,
) -> int:
    """
    Continuous loop that polls SQS and hands each new command to on_command.

    Args:
        poller: Queue poller service.
        queue_url: Resolved queue URL.
        dedup_state: Dedup state owned by this loop.
        on_command: Called with each new message body.
        wait_seconds: Long polling wait per receive.
        max_commands: Stop after this many commands. None polls forever.

    Returns:
        Number of commands handled.
    """
    logger.info("Starting continuous listener loop...")

    success_count = 0
    fail_count = 0

    while max_commands is None or success_count + fail_count < max_commands:
        message = poller.poll_message(queue_url, wait_seconds, dedup_state)

        if message is None:
            logger.debug("No new messages, continuing to poll...")
            continue

        if message.sent_timestamp is not None:
            logger.info(
                "Claimed message %s sent at %d",
                message.message_id,
                message.sent_timestamp,
            )

        # Already claimed: a failing command does not stop the loop.
        try:
            on_command(message.body)
            success_count += 1
        except Exception as e:
            logger.error(
                "Failed to handle command %s: %s", message.body, e, exc_info=True
            )
            fail_count += 1

        logger.info("Stats: %d success, %d failed", success_count, fail_count)

    return success_count + fail_count
