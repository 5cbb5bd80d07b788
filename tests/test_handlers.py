"""Tests for handlers layer and the CLI entry point."""

from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ProfileNotFound

from fanout_listener.errors import QueueNotFoundError, TransportError
from fanout_listener.handlers.listener import listen, run_listener_loop
from fanout_listener.main import main
from fanout_listener.models.schemas import DedupState, QueueMessage
from fanout_listener.services.poller import QueuePoller

QUEUE_URL = "https://sqs.test/queue"
PAUSE = '{"Command":"pause"}'


class FakeClock:
    """Monotonic clock advanced by each poll."""

    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def _message(body: str = PAUSE) -> QueueMessage:
    return QueueMessage(body=body, digest="d1", receipt_handle="handle-1")


class TestListen:
    """Tests for listen."""

    def test_returns_first_body(self):
        """Test listen returns as soon as a command arrives."""
        poller = MagicMock(spec=QueuePoller)
        poller.poll_once.return_value = PAUSE
        state = DedupState()

        assert listen(poller, QUEUE_URL, 60, state) == PAUSE
        poller.poll_once.assert_called_once_with(QUEUE_URL, 20, state)

    def test_splits_long_timeout_into_polls(self):
        """Test a 50 second timeout is served by 20 + 20 + 10 second polls."""
        clock = FakeClock()
        poller = MagicMock(spec=QueuePoller)
        waits = []

        def poll_once(queue_url, wait_seconds, dedup_state):
            waits.append(wait_seconds)
            clock.now += wait_seconds
            return None

        poller.poll_once.side_effect = poll_once

        assert listen(poller, QUEUE_URL, 50, DedupState(), clock=clock) is None
        assert waits == [20, 20, 10]

    def test_zero_timeout_polls_once(self):
        """Test timeout 0 issues a single immediate poll."""
        poller = MagicMock(spec=QueuePoller)
        poller.poll_once.return_value = None

        assert listen(poller, QUEUE_URL, 0, DedupState(), clock=FakeClock()) is None
        poller.poll_once.assert_called_once()
        assert poller.poll_once.call_args.args[1] == 0

    def test_transport_error_propagates(self):
        """Test queue failures are not swallowed."""
        poller = MagicMock(spec=QueuePoller)
        poller.poll_once.side_effect = TransportError("ReceiveMessage", "boom")

        with pytest.raises(TransportError):
            listen(poller, QUEUE_URL, 20, DedupState())


class TestRunListenerLoop:
    """Tests for run_listener_loop."""

    def test_handles_commands_until_limit(self):
        """Test new commands are passed on and empty polls are skipped."""
        poller = MagicMock(spec=QueuePoller)
        poller.poll_message.side_effect = [None, _message("a"), None, _message("b")]
        on_command = MagicMock()
        state = DedupState()

        handled = run_listener_loop(
            poller, QUEUE_URL, state, on_command, wait_seconds=5, max_commands=2
        )

        assert handled == 2
        assert [c.args[0] for c in on_command.call_args_list] == ["a", "b"]
        poller.poll_message.assert_called_with(QUEUE_URL, 5, state)

    def test_failing_command_does_not_stop_loop(self):
        """Test an exception from on_command is logged and polling continues."""
        poller = MagicMock(spec=QueuePoller)
        poller.poll_message.side_effect = [_message("a"), _message("b")]
        on_command = MagicMock(side_effect=[RuntimeError("bad"), None])

        handled = run_listener_loop(
            poller, QUEUE_URL, DedupState(), on_command, max_commands=2
        )

        assert handled == 2
        assert on_command.call_count == 2

    def test_transport_error_propagates(self):
        """Test queue failures stop the loop."""
        poller = MagicMock(spec=QueuePoller)
        poller.poll_message.side_effect = TransportError("DeleteMessage", "boom")

        with pytest.raises(TransportError):
            run_listener_loop(poller, QUEUE_URL, DedupState(), MagicMock())


class TestMain:
    """Tests for the CLI entry point."""

    @patch("fanout_listener.main.DependenciesContainer")
    def test_prints_received_command(self, mock_container_cls, capsys):
        """Test a received body is printed to stdout."""
        container = mock_container_cls.return_value
        container.sqs_client.return_value.get_queue_url.return_value = QUEUE_URL
        container.queue_poller.return_value.poll_once.return_value = PAUSE

        main(["chaos", "--timeout", "20"])

        assert capsys.readouterr().out == PAUSE + "\n"
        container.sqs_client.return_value.get_queue_url.assert_called_once_with(
            "chaos"
        )

    @patch("fanout_listener.main.DependenciesContainer")
    def test_missing_queue_exits_with_error(self, mock_container_cls):
        """Test an unknown queue name terminates with status 1."""
        container = mock_container_cls.return_value
        container.sqs_client.return_value.get_queue_url.side_effect = (
            QueueNotFoundError("missing")
        )

        with pytest.raises(SystemExit) as exc_info:
            main(["missing"])

        assert exc_info.value.code == 1

    @patch("fanout_listener.main.DependenciesContainer")
    def test_receive_failure_exits_with_error(self, mock_container_cls):
        """Test a transport failure terminates with status 1."""
        container = mock_container_cls.return_value
        container.sqs_client.return_value.get_queue_url.return_value = QUEUE_URL
        container.queue_poller.return_value.poll_once.side_effect = TransportError(
            "ReceiveMessage", "boom"
        )

        with pytest.raises(SystemExit) as exc_info:
            main(["chaos", "--timeout", "0"])

        assert exc_info.value.code == 1

    @patch("fanout_listener.main.DependenciesContainer")
    def test_empty_queue_name_exits_with_error(self, mock_container_cls):
        """Test running without a queue name fails validation."""
        with pytest.raises(SystemExit) as exc_info:
            main([""])

        assert exc_info.value.code == 1
        mock_container_cls.assert_not_called()

    @patch("fanout_listener.main.DependenciesContainer")
    def test_bad_aws_profile_exits_with_error(self, mock_container_cls):
        """Test session setup failures are reported instead of a traceback."""
        container = mock_container_cls.return_value
        container.sqs_client.side_effect = ProfileNotFound(profile="missing")

        with pytest.raises(SystemExit) as exc_info:
            main(["chaos"])

        assert exc_info.value.code == 1
