"""Main entry point for the fan-out listener."""

import argparse
import logging
import sys

from botocore.exceptions import BotoCoreError

from fanout_listener.config import config
from fanout_listener.errors import FanoutListenerError
from fanout_listener.handlers import listen, run_listener_loop
from fanout_listener.infrastructure import DependenciesContainer
from fanout_listener.models.schemas import DedupState

logger = logging.getLogger(__name__)


def setup_logging(level: str) -> None:
    """Configure logging to stderr so stdout carries only command bodies."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def print_command(body: str) -> None:
    print(body, flush=True)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Receive fan-out commands from an SQS queue, one copy per node"
    )
    parser.add_argument(
        "queue_name",
        nargs="?",
        default=config.queue_name,
        help="SQS queue name (defaults to SQS_QUEUE_NAME)",
    )
    parser.add_argument(
        "--timeout",
        type=int,
        default=config.wait_time_seconds,
        help="Seconds to wait for a command (split into 20s long polls)",
    )
    parser.add_argument(
        "--forever",
        action="store_true",
        help="Keep listening and print every new command",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Entry point with CLI argument parsing."""
    args = parse_args(argv)
    setup_logging("DEBUG" if args.verbose else config.log_level)

    try:
        config.queue_name = args.queue_name
        config.validate()
        if args.timeout < 0:
            raise ValueError("--timeout must not be negative")

        container = DependenciesContainer()
        sqs_client = container.sqs_client()
        poller = container.queue_poller()

        queue_url = sqs_client.get_queue_url(args.queue_name)
        dedup_state = DedupState()

        if args.forever:
            run_listener_loop(
                poller,
                queue_url,
                dedup_state,
                on_command=print_command,
                wait_seconds=config.wait_time_seconds,
            )
            return

        body = listen(poller, queue_url, args.timeout, dedup_state)
        if body is not None:
            print_command(body)

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(0)
    except (FanoutListenerError, BotoCoreError, ValueError) as e:
        logger.error("Fatal error: %s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
