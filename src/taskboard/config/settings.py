"""Application settings."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings

# Base table names; the deployed table is "<base>-<env_name>"
TABLE_TASKS = "Tasks"
TABLE_TASK_LIST_METADATA = "TaskListMetadata"
TABLE_LABELS = "Labels"


class Settings(BaseSettings):
    """Application settings."""

    env_name: str = Field(
        default="dev",
        description="Deployment environment, used as table name suffix",
    )

    region: str | None = Field(
        default=None,
        description="AWS region of the DynamoDB tables",
    )

    endpoint_url: str | None = Field(
        default=None,
        description="Custom DynamoDB endpoint (e.g., http://localhost:8000 for DynamoDB Local)",
    )

    config_file: Path | None = Field(
        default=None,
        description="Optional YAML file with board column configuration",
    )

    verify_ordering: bool = Field(
        default=True,
        description="Re-read touched partitions after each move, fail if positions are not dense",
    )

    lock_timeout: float = Field(
        default=10.0,
        gt=0,
        description="Seconds to wait for a partition lock",
    )

    verbose: int = Field(
        default=0,
        description="Verbosity level (0=off, 1=INFO, 2+=DEBUG)",
    )

    log_file: Path | None = Field(
        default=None,
        description="Optional path to write logs to file",
    )

    model_config = {
        "env_prefix": "TASKBOARD_",
    }

    def table_name(self, base_name: str) -> str:
        """Environment-specific table name, e.g. "Tasks-dev"."""
        return f"{base_name}-{self.env_name}"
