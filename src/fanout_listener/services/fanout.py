"""Fan-out service that re-posts claimed messages for the other nodes."""

import logging

from fanout_listener.errors import MalformedCounterError, TransportError
from fanout_listener.infrastructure.sqs_client import SQSClient
from fanout_listener.models.schemas import NodeCounter, QueueMessage

logger = logging.getLogger(__name__)


class NodeFanout:
    """Re-publishes a claimed message with a decremented Nodes counter."""

    def __init__(self, sqs_client: SQSClient):
        """
        Initialize fan-out service.

        Args:
            sqs_client: SQS client instance.
        """
        self._sqs_client = sqs_client

    def propagate(self, queue_url: str, message: QueueMessage) -> bool:
        """
        Repost message for the other nodes with a decremented counter.

        {"Command": "pause"} with Nodes=2 is re-sent with Nodes=1; with
        Nodes=1 nothing is sent.

        Args:
            queue_url: Queue the message was claimed from.
            message: The claimed (already deleted) message.

        Returns:
            True if a copy was published, False otherwise.
        """
        attribute = message.nodes
        if attribute is None:
            logger.debug(
                "Node attribute not found. Not resending message for other nodes."
            )
            return False

        try:
            counter = NodeCounter.from_attribute(attribute)
        except MalformedCounterError as e:
            logger.error("Not resending message: %s", e)
            return False

        logger.debug("Node number: %d", counter.remaining)

        remaining = counter.decrement()
        if remaining == 0:
            logger.debug("Node Counter is now zero, not resending message")
            return False

        shared = message.with_node_count(remaining)
        logger.debug("Message after node decrement: %s", shared)

        try:
            self._sqs_client.send_message(
                queue_url=queue_url,
                message_body=shared.body,
                message_attributes=shared.message_attributes_for_send(),
            )
        except TransportError as e:
            logger.error("Failed to resend message with decremented counter: %s", e)
            return False

        return True
