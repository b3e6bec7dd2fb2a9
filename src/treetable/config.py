"""Configuration management for treetable."""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DATABASE_NAME = "treetable.db"
DATA_DIR_NAME = "data"


class TreeTableConfig(BaseSettings):
    """Configuration for a treetable installation."""

    # Default to ~/.treetable but allow override with env var
    home: Path = Field(
        default_factory=lambda: Path.home() / ".treetable",
        description="Base path for treetable files",
    )

    database_name: str = Field(default=DATABASE_NAME, description="SQLite database file name")

    max_page_size: int = Field(
        default=999,
        gt=0,
        description="Upper bound for any page of tree nodes returned by a query",
    )

    log_level: str = Field(default="INFO", description="Log level for the stderr sink")
    log_to_file: bool = Field(default=False, description="Also write a rotating log file under home")

    host: str = "127.0.0.1"
    port: int = 8000

    model_config = SettingsConfigDict(
        env_prefix="TREETABLE_",
        extra="ignore",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    @property
    def database_path(self) -> Path:
        """Get SQLite database path."""
        return self.home / DATA_DIR_NAME / self.database_name

    @field_validator("home")
    @classmethod
    def ensure_path_exists(cls, v: Path) -> Path:
        """Ensure home path exists."""
        if not v.exists():
            v.mkdir(parents=True)
        return v


# Load config
config = TreeTableConfig()
