"""Long-poll receiver that claims each new message once per node."""

import logging
import time
from typing import Callable

from fanout_listener.infrastructure.sqs_client import SQSClient
from fanout_listener.models.schemas import DedupState, QueueMessage
from fanout_listener.services.fanout import NodeFanout

logger = logging.getLogger(__name__)

MAX_WAIT_TIME_SECONDS = 20
DEFAULT_DUPLICATE_BACKOFF_SECONDS = 60


class QueuePoller:
    """Receives, deduplicates, claims and fans out queue messages."""

    def __init__(
        self,
        sqs_client: SQSClient,
        fanout: NodeFanout,
        duplicate_backoff_seconds: float = DEFAULT_DUPLICATE_BACKOFF_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize queue poller.

        Args:
            sqs_client: SQSClient instance.
            fanout: Fan-out service used after a message is claimed.
            duplicate_backoff_seconds: Pause after seeing a message this
                node already claimed. Should be tuned to the queue's
                visibility timeout.
            sleep: Sleep function.
        """
        self._sqs_client = sqs_client
        self._fanout = fanout
        self._sleep = sleep
        self.duplicate_backoff_seconds = duplicate_backoff_seconds

    def poll_message(
        self,
        queue_url: str,
        wait_seconds: int,
        dedup_state: DedupState,
    ) -> QueueMessage | None:
        """
        Receive one message with long polling and claim it if it is new.

        Args:
            queue_url: Resolved queue URL.
            wait_seconds: Long polling wait, clamped to 0-20 seconds.
            dedup_state: Digest of the last claimed message. Updated only
                when a new message is claimed.

        Returns:
            The claimed message, or None on timeout or duplicate.

        Raises:
            TransportError: Receive or delete failed.
        """
        wait_time = max(0, min(int(wait_seconds), MAX_WAIT_TIME_SECONDS))

        raw_messages = self._sqs_client.receive_messages(
            queue_url=queue_url,
            max_messages=1,
            wait_time=wait_time,
        )
        if not raw_messages:
            return None

        message = QueueMessage.from_sqs(raw_messages[0])

        # Already claimed by this node: leave it for the others.
        if message.digest == dedup_state.last_seen_digest:
            logger.info(
                "Message contains current command. Not deleting: %s", message.body
            )
            self._sleep(self.duplicate_backoff_seconds)
            return None

        self._sqs_client.delete_message(
            queue_url=queue_url,
            receipt_handle=message.receipt_handle,
        )

        dedup_state.last_seen_digest = message.digest

        self._fanout.propagate(queue_url, message)

        return message

    def poll_once(
        self,
        queue_url: str,
        wait_seconds: int,
        dedup_state: DedupState,
    ) -> str | None:
        """
        Receive one message and return its body if this node has not seen it.

        Returns:
            Message body, or None on timeout or duplicate.
        """
        message = self.poll_message(queue_url, wait_seconds, dedup_state)
        return message.body if message else None
