"""Infrastructure package."""

from fanout_listener.infrastructure.dependency_injection import DependenciesContainer
from fanout_listener.infrastructure.sqs_client import SQSClient

__all__ = ["DependenciesContainer", "SQSClient"]
