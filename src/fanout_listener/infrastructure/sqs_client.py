"""SQS client wrapper for AWS operations."""

import logging
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from fanout_listener.errors import QueueNotFoundError, ResolutionError, TransportError

logger = logging.getLogger(__name__)

QUEUE_DOES_NOT_EXIST_CODES = {
    "AWS.SimpleQueueService.NonExistentQueue",
    "QueueDoesNotExist",
}


class SQSClient:
    """Handles SQS operations."""

    def __init__(self, client: Any):
        """
        Initialize SQS client wrapper.

        Args:
            client: boto3 SQS client instance.
        """
        self._client = client

    def get_queue_url(self, queue_name: str) -> str:
        """
        Resolve a queue name to its URL.

        Args:
            queue_name: SQS queue name.

        Returns:
            Queue URL.

        Raises:
            QueueNotFoundError: No queue with this name exists.
            ResolutionError: Any other failure.
        """
        try:
            response = self._client.get_queue_url(QueueName=queue_name)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in QUEUE_DOES_NOT_EXIST_CODES:
                raise QueueNotFoundError(queue_name) from e
            raise ResolutionError(
                queue_name, f"Unable to queue {queue_name!r}: {e}"
            ) from e
        except BotoCoreError as e:
            raise ResolutionError(
                queue_name, f"Unable to queue {queue_name!r}: {e}"
            ) from e

        queue_url = response["QueueUrl"]
        logger.info("Resolved queue %s -> %s", queue_name, queue_url)
        return queue_url

    def receive_messages(
        self,
        queue_url: str,
        max_messages: int = 1,
        wait_time: int = 20,
    ) -> list[dict]:
        """
        Receive messages from SQS queue with long polling.

        Args:
            queue_url: SQS queue URL.
            max_messages: Maximum number of messages to receive.
            wait_time: Long polling wait time in seconds.

        Returns:
            List of message dictionaries, including the SentTimestamp
            system attribute and all message attributes.

        Raises:
            TransportError: The receive call failed.
        """
        try:
            response = self._client.receive_message(
                QueueUrl=queue_url,
                AttributeNames=["SentTimestamp"],
                MaxNumberOfMessages=max_messages,
                MessageAttributeNames=["All"],
                WaitTimeSeconds=wait_time,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error("Failed to receive messages from SQS: %s", e)
            raise TransportError("ReceiveMessage", str(e)) from e

        messages = response.get("Messages", [])
        logger.debug("Received %d messages.", len(messages))
        if messages:
            logger.debug("%s", messages)
        return messages

    def delete_message(self, queue_url: str, receipt_handle: str) -> None:
        """
        Delete a message from SQS queue.

        Args:
            queue_url: SQS queue URL.
            receipt_handle: Message receipt handle.

        Raises:
            TransportError: The delete call failed.
        """
        try:
            self._client.delete_message(
                QueueUrl=queue_url,
                ReceiptHandle=receipt_handle,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error("Failed to delete message from SQS: %s", e)
            raise TransportError("DeleteMessage", str(e)) from e

        logger.debug("Message Deleted")

    def send_message(
        self,
        queue_url: str,
        message_body: str,
        message_attributes: dict[str, dict] | None = None,
    ) -> str:
        """
        Send a message to SQS queue.

        Args:
            queue_url: SQS queue URL.
            message_body: Raw message body.
            message_attributes: Attributes in send_message shape.

        Returns:
            MessageId of the new message.

        Raises:
            TransportError: The send call failed.
        """
        kwargs = {"QueueUrl": queue_url, "MessageBody": message_body}
        if message_attributes:
            kwargs["MessageAttributes"] = message_attributes

        try:
            response = self._client.send_message(**kwargs)
        except (ClientError, BotoCoreError) as e:
            raise TransportError("SendMessage", str(e)) from e

        logger.info("Sent message to %s: %s", queue_url, response["MessageId"])
        return response["MessageId"]
