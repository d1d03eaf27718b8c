"""
Configuration for htmlsoups.

All settings can be set via environment variables with the HTMLSOUPS_ prefix.
"""

from dataclasses import dataclass
from enum import Enum

from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageBackend(str, Enum):
    """Where learned selectors are persisted."""

    MEMORY = "memory"
    FILE = "file"
    REDIS = "redis"


class SoupsSettings(BaseSettings):
    """Main settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="HTMLSOUPS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Storage
    storage_backend: StorageBackend = StorageBackend.FILE
    storage_path: str = "~/.htmlsoups/learned_patterns"
    redis_url: str = "redis://localhost:6379/0"
    redis_key_prefix: str = "htmlsoups:learning:"

    # Fetching
    request_timeout_seconds: float = 30.0
    max_retries: int = 3
    retry_delay_seconds: float = 1.0
    max_page_size_mb: float = 10.0
    verify_ssl: bool = True

    # Learning
    prune_below: float | None = None
    prune_min_attempts: int = 5

    # Logging
    log_level: str = "WARNING"
    log_format: str = "console"

    def learner_config(self) -> "LearnerConfig":
        """Build the learner configuration from settings."""
        return LearnerConfig(
            prune_below=self.prune_below,
            prune_min_attempts=self.prune_min_attempts,
        )

    def fetcher_config(self) -> "FetcherConfig":
        """Build the fetcher configuration from settings."""
        return FetcherConfig(
            timeout_seconds=self.request_timeout_seconds,
            max_retries=self.max_retries,
            retry_delay_seconds=self.retry_delay_seconds,
            max_content_size=int(self.max_page_size_mb * 1024 * 1024),
            verify_ssl=self.verify_ssl,
        )

    def storage_config(self) -> "StorageConfig":
        """Build the storage configuration from settings."""
        return StorageConfig(
            backend=self.storage_backend,
            path=self.storage_path,
            redis_url=self.redis_url,
            key_prefix=self.redis_key_prefix,
        )


@dataclass
class LearnerConfig:
    """Selector learner configuration."""

    # Pruning is off unless a threshold is set
    prune_below: float | None = None
    prune_min_attempts: int = 5


@dataclass
class FetcherConfig:
    """Configuration for the fetcher."""

    timeout_seconds: float = 30.0
    max_retries: int = 3
    retry_delay_seconds: float = 1.0
    max_redirects: int = 10
    max_content_size: int = 10 * 1024 * 1024  # 10MB
    verify_ssl: bool = True


@dataclass
class StorageConfig:
    """Configuration for learning state storage."""

    backend: StorageBackend = StorageBackend.FILE
    path: str = "~/.htmlsoups/learned_patterns"
    redis_url: str = "redis://localhost:6379/0"
    key_prefix: str = "htmlsoups:learning:"


def load_config() -> SoupsSettings:
    """Load configuration from environment variables."""
    return SoupsSettings()
