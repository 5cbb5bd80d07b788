"""Pydantic models for SQS messages and the Nodes fan-out counter."""

import hashlib
import re
from dataclasses import dataclass

from pydantic import BaseModel, Field

from fanout_listener.errors import MalformedCounterError

NODES_ATTRIBUTE = "Nodes"
MAX_NODE_COUNT = 2**63 - 1

_COUNTER_PATTERN = re.compile(r"[0-9]{1,19}")


class MessageAttribute(BaseModel):
    """A single SQS message attribute."""

    data_type: str = "String"
    string_value: str | None = None
    binary_value: bytes | None = None

    @classmethod
    def from_sqs(cls, raw: dict) -> "MessageAttribute":
        """Build from a boto3 MessageAttributes entry."""
        return cls(
            data_type=raw.get("DataType", "String"),
            string_value=raw.get("StringValue"),
            binary_value=raw.get("BinaryValue"),
        )

    def to_sqs(self) -> dict:
        """
        Convert to the shape accepted by send_message.

        SQS returns empty StringListValues/BinaryListValues on receive but
        rejects them on send, so only the scalar value is kept.
        """
        attribute = {"DataType": self.data_type}
        if self.string_value is not None:
            attribute["StringValue"] = self.string_value
        if self.binary_value is not None:
            attribute["BinaryValue"] = self.binary_value
        return attribute


class QueueMessage(BaseModel):
    """Message received from the SQS queue."""

    body: str
    digest: str
    attributes: dict[str, MessageAttribute] = Field(default_factory=dict)
    receipt_handle: str | None = None
    message_id: str | None = None
    sent_timestamp: int | None = None

    @classmethod
    def from_sqs(cls, raw: dict) -> "QueueMessage":
        """
        Build from a boto3 ReceiveMessage entry.

        Args:
            raw: Message dict as returned in response["Messages"].

        Returns:
            QueueMessage with the body digest taken from MD5OfBody.
        """
        body = raw.get("Body", "")
        digest = raw.get("MD5OfBody") or body_digest(body)

        sent_timestamp = raw.get("Attributes", {}).get("SentTimestamp")

        return cls(
            body=body,
            digest=digest,
            attributes={
                name: MessageAttribute.from_sqs(value)
                for name, value in raw.get("MessageAttributes", {}).items()
            },
            receipt_handle=raw.get("ReceiptHandle"),
            message_id=raw.get("MessageId"),
            sent_timestamp=int(sent_timestamp) if sent_timestamp else None,
        )

    @property
    def nodes(self) -> MessageAttribute | None:
        """The Nodes attribute, if this message is part of a fan-out round."""
        return self.attributes.get(NODES_ATTRIBUTE)

    def with_node_count(self, count: int) -> "QueueMessage":
        """Return a copy whose Nodes attribute is set to count."""
        current = self.nodes
        data_type = current.data_type if current else "Number"

        attributes = dict(self.attributes)
        attributes[NODES_ATTRIBUTE] = MessageAttribute(
            data_type=data_type, string_value=str(count)
        )
        return self.model_copy(update={"attributes": attributes})

    def message_attributes_for_send(self) -> dict[str, dict]:
        """Attribute map for send_message."""
        return {name: value.to_sqs() for name, value in self.attributes.items()}


class NodeCounter(BaseModel):
    """Remaining number of nodes that still have to receive a message."""

    remaining: int = Field(ge=1)

    @classmethod
    def from_attribute(cls, attribute: MessageAttribute) -> "NodeCounter":
        """
        Parse the Nodes attribute.

        Raises:
            MalformedCounterError: Value is missing, not an ASCII decimal
                integer or outside 1..MAX_NODE_COUNT.
        """
        value = attribute.string_value
        if value is None or not _COUNTER_PATTERN.fullmatch(value):
            raise MalformedCounterError(value)

        try:
            remaining = int(value)
        except ValueError as e:
            raise MalformedCounterError(value) from e

        if not 1 <= remaining <= MAX_NODE_COUNT:
            raise MalformedCounterError(value)

        return cls(remaining=remaining)

    def decrement(self) -> int:
        return self.remaining - 1


@dataclass
class DedupState:
    """Digest of the last message this node claimed."""

    last_seen_digest: str = ""


def body_digest(body: str) -> str:
    """Hex MD5 of the message body, the same value SQS reports as MD5OfBody."""
    return hashlib.md5(body.encode("utf-8")).hexdigest()
