"""Shared fixtures: an in-memory stand-in for the SQS queue."""

import itertools
from unittest.mock import MagicMock

import pytest

from fanout_listener.infrastructure.sqs_client import SQSClient
from fanout_listener.models.schemas import body_digest


class FakeQueue:
    """Single in-memory queue exposing the SQSClient interface."""

    def __init__(self):
        self.messages: list[dict] = []
        self.sent: list[dict] = []
        self.deleted: list[str] = []
        self._ids = itertools.count(1)

    def put(self, body: str, attributes: dict[str, dict] | None = None) -> dict:
        n = next(self._ids)
        message = {
            "MessageId": f"msg-{n}",
            "ReceiptHandle": f"handle-{n}",
            "MD5OfBody": body_digest(body),
            "Body": body,
            "Attributes": {"SentTimestamp": str(1700000000000 + n)},
            "MessageAttributes": attributes or {},
        }
        self.messages.append(message)
        return message

    def receive_messages(self, queue_url, max_messages=1, wait_time=20):
        return self.messages[:max_messages]

    def delete_message(self, queue_url, receipt_handle):
        self.deleted.append(receipt_handle)
        self.messages = [
            m for m in self.messages if m["ReceiptHandle"] != receipt_handle
        ]

    def send_message(self, queue_url, message_body, message_attributes=None):
        self.sent.append(
            {"body": message_body, "attributes": message_attributes or {}}
        )
        return self.put(message_body, message_attributes)["MessageId"]


@pytest.fixture
def fake_queue():
    return FakeQueue()


@pytest.fixture
def mock_sqs_client():
    return MagicMock(spec=SQSClient)
