"""Configuration management for the fan-out listener."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env file from project root
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(env_path)


@dataclass
class Config:
    """Listener configuration loaded from environment variables."""

    # AWS
    aws_region: str = os.getenv("AWS_REGION", "us-east-1")
    aws_profile: str = os.getenv("AWS_PROFILE", "")

    # SQS
    queue_name: str = os.getenv("SQS_QUEUE_NAME", "")
    wait_time_seconds: int = int(os.getenv("WAIT_TIME_SECONDS", "20"))
    duplicate_backoff_seconds: float = float(
        os.getenv("DUPLICATE_BACKOFF_SECONDS", "60")
    )

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    def validate(self) -> None:
        """Validate required configuration."""
        if not self.queue_name:
            raise ValueError("SQS_QUEUE_NAME environment variable is required")
        if self.wait_time_seconds < 0:
            raise ValueError("WAIT_TIME_SECONDS must not be negative")
        if self.duplicate_backoff_seconds < 0:
            raise ValueError("DUPLICATE_BACKOFF_SECONDS must not be negative")


config = Config()
