"""Dependency injection container for the application."""

import boto3
from dependency_injector import providers
from dependency_injector.containers import DeclarativeContainer

from fanout_listener.config import config
from fanout_listener.infrastructure.sqs_client import SQSClient


def _create_session() -> boto3.Session:
    """Create boto3 session.

    - With AWS_PROFILE: uses that shared config profile
    - Otherwise: uses the default credential chain
    """
    if config.aws_profile:
        return boto3.Session(
            profile_name=config.aws_profile, region_name=config.aws_region
        )
    return boto3.Session(region_name=config.aws_region)


def _create_node_fanout(sqs_client: SQSClient):
    """Factory for NodeFanout to avoid circular import."""
    from fanout_listener.services.fanout import NodeFanout

    return NodeFanout(sqs_client)


def _create_queue_poller(sqs_client: SQSClient, fanout, duplicate_backoff_seconds):
    """Factory for QueuePoller to avoid circular import."""
    from fanout_listener.services.poller import QueuePoller

    return QueuePoller(
        sqs_client,
        fanout,
        duplicate_backoff_seconds=duplicate_backoff_seconds,
    )


class DependenciesContainer(DeclarativeContainer):
    """DI container for the application."""

    session = providers.Singleton(_create_session)

    # SQS dependency chain
    sqs_boto_client = providers.Singleton(
        lambda session: session.client("sqs"),
        session=session,
    )

    sqs_client = providers.Singleton(
        SQSClient,
        client=sqs_boto_client,
    )

    node_fanout = providers.Singleton(
        _create_node_fanout,
        sqs_client=sqs_client,
    )

    queue_poller = providers.Singleton(
        _create_queue_poller,
        sqs_client=sqs_client,
        fanout=node_fanout,
        duplicate_backoff_seconds=config.duplicate_backoff_seconds,
    )
