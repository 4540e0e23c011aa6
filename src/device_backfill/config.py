"""Configuration management for the device backfill job."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env file from project root
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(env_path)

_TRUTHY = {"1", "true", "yes", "y"}


@dataclass
class Config:
    """Backfill configuration loaded from environment variables."""

    # Target table
    env: str = "dev"
    table_name: str = "dev-user"

    # Input
    file_path: Path = Path("./logs-insights-results.csv")

    # Pipeline
    concurrency_limit: int = 20
    progress_interval: int = 1000
    dry_run: bool = False

    # AWS
    aws_region: str = "us-east-1"
    aws_profile: str | None = None

    @classmethod
    def from_env(cls) -> "Config":
        """Build a config from the current environment."""
        env = os.getenv("ENV", "dev")
        return cls(
            env=env,
            table_name=os.getenv("TABLE_NAME") or f"{env}-user",
            file_path=Path(os.getenv("FILE_PATH", "./logs-insights-results.csv")),
            concurrency_limit=int(os.getenv("CONCURRENCY_LIMIT", "20")),
            progress_interval=int(os.getenv("PROGRESS_INTERVAL", "1000")),
            dry_run=os.getenv("DRY_RUN", "false").strip().lower() in _TRUTHY,
            aws_region=os.getenv("AWS_REGION", "us-east-1"),
            aws_profile=os.getenv("AWS_PROFILE") or None,
        )

    def with_env(self, env: str) -> "Config":
        """Return a copy targeting the table of another environment."""
        return Config(
            env=env,
            table_name=f"{env}-user",
            file_path=self.file_path,
            concurrency_limit=self.concurrency_limit,
            progress_interval=self.progress_interval,
            dry_run=self.dry_run,
            aws_region=self.aws_region,
            aws_profile=self.aws_profile,
        )

    def validate(self) -> None:
        """Validate required configuration."""
        if not self.table_name:
            raise ValueError("TABLE_NAME must not be empty")
        if self.concurrency_limit < 1:
            raise ValueError("CONCURRENCY_LIMIT must be at least 1")
        if self.progress_interval < 1:
            raise ValueError("PROGRESS_INTERVAL must be at least 1")
