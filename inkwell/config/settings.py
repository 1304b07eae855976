"""Application settings using Pydantic Settings."""

from enum import Enum
from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class WordFilterMode(str, Enum):
    """How banned terms in submitted comments are handled."""

    MASK = "mask"
    BLOCK = "block"


class ContentSettings(BaseModel):
    """Moderation policy applied to incoming comments."""

    enable_word_filter: bool = False
    word_filter_mode: WordFilterMode = WordFilterMode.MASK
    require_comment_review: bool = True
    disharmony_words: str = ""


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="inkwell", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    environment: Literal["development", "staging", "production", "testing"] = Field(
        default="development", description="Environment name"
    )
    debug: bool = Field(default=True, description="Debug mode")

    # Redis
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL",
    )
    redis_max_connections: int = Field(default=10, description="Max Redis connections")
    redis_socket_timeout: float = Field(default=5.0, description="Redis socket timeout")
    redis_socket_connect_timeout: float = Field(
        default=5.0, description="Redis connect timeout"
    )
    redis_retry_on_timeout: bool = Field(default=True, description="Retry on timeout")
    redis_health_check_interval: int = Field(
        default=30, description="Health check interval"
    )

    # Cassandra
    cassandra_hosts: list[str] = Field(
        default=["localhost"], description="Cassandra hosts"
    )
    cassandra_port: int = Field(default=9042, description="Cassandra port")
    cassandra_keyspace: str = Field(default="inkwell", description="Cassandra keyspace")
    cassandra_username: str | None = Field(default=None, description="Cassandra user")
    cassandra_password: str | None = Field(
        default=None, description="Cassandra password"
    )
    cassandra_protocol_version: int = Field(default=4, description="Protocol version")
    cassandra_connect_timeout: float = Field(
        default=10.0, description="Connect timeout"
    )
    cassandra_request_timeout: float = Field(
        default=10.0, description="Request timeout"
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="DEBUG", description="Log level"
    )
    log_format: Literal["json", "console"] = Field(
        default="console", description="Log format"
    )
    log_include_caller_info: bool = Field(
        default=True, description="Include caller info"
    )
    log_to_file: bool = Field(default=True, description="Write rotating log files")
    log_dir: str = Field(default="logs", description="Directory for log files")
    log_file_max_bytes: int = Field(
        default=10 * 1024 * 1024, description="Max size per log file (10MB default)"
    )
    log_file_backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )

    # Content moderation
    content_enable_word_filter: bool = Field(
        default=False, description="Run submitted comments through the word filter"
    )
    content_word_filter_mode: WordFilterMode = Field(
        default=WordFilterMode.MASK,
        description="Mask banned terms or block the whole comment",
    )
    content_require_comment_review: bool = Field(
        default=True, description="New comments wait for approval"
    )
    content_disharmony_words: str = Field(
        default="fuck|shit", description="Banned terms separated by '|'"
    )
    content_word_source: Literal["config", "redis"] = Field(
        default="config", description="Where the banned term list is read from"
    )
    moderation_words_key: str = Field(
        default="inkwell:moderation:banned_words",
        description="Redis set holding banned terms",
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"

    @property
    def content_settings(self) -> ContentSettings:
        """Moderation policy as read by the comment service."""
        return ContentSettings(
            enable_word_filter=self.content_enable_word_filter,
            word_filter_mode=self.content_word_filter_mode,
            require_comment_review=self.content_require_comment_review,
            disharmony_words=self.content_disharmony_words,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
