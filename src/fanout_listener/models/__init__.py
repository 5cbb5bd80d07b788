"""Models package."""

from fanout_listener.models.schemas import (
    NODES_ATTRIBUTE,
    DedupState,
    MessageAttribute,
    NodeCounter,
    QueueMessage,
    body_digest,
)

__all__ = [
    "NODES_ATTRIBUTE",
    "DedupState",
    "MessageAttribute",
    "NodeCounter",
    "QueueMessage",
    "body_digest",
]
