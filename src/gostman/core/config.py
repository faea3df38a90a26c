"""
Gostman Configuration Management

Settings come from GOSTMAN_-prefixed environment variables or an env file,
with one nested section per component (GOSTMAN_STORAGE__DATA_DIR and so on).
"""

import os
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings


def default_data_dir() -> str:
    """Return the per-profile directory that holds the backing document."""
    if sys.platform == "win32":
        return str(Path(os.environ.get("APPDATA", Path.home())) / "Gostman")
    # Linux and macOS: ~/.local/share/Gostman
    return str(Path.home() / ".local" / "share" / "Gostman")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Logging level")
    file_path: Optional[str] = Field(default=None, description="Log file path")
    max_file_size: int = Field(
        default=10_000_000, description="Max log file size in bytes"
    )
    backup_count: int = Field(default=5, description="Number of backup log files")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v.upper()


class StorageConfig(BaseModel):
    """Persistent store configuration."""

    data_dir: str = Field(
        default_factory=default_data_dir, description="Directory of the backing file"
    )
    file_name: str = Field(default="gostman.json", description="Backing file name")

    @field_validator("file_name")
    @classmethod
    def validate_file_name(cls, v: str) -> str:
        if not v or Path(v).name != v:
            raise ValueError(f"Invalid file name: {v!r}. Must be a bare file name")
        return v


class ExecutorConfig(BaseModel):
    """Transport executor configuration."""

    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify TLS certificates")

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"Invalid timeout: {v}. Must be greater than zero")
        return v


class APIConfig(BaseModel):
    """HTTP API configuration."""

    host: str = Field(default="127.0.0.1", description="API bind host")
    port: int = Field(default=8000, description="API bind port")
    cors_origins: List[str] = Field(
        default_factory=lambda: ["*"], description="Allowed CORS origins"
    )

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        if not (1 <= v <= 65535):
            raise ValueError(f"Invalid port: {v}. Must be between 1 and 65535")
        return v


class GostmanConfig(BaseSettings):
    """Main Gostman configuration."""

    debug: bool = Field(
        default=False, description="Log at DEBUG unless a level is given explicitly"
    )

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    executor: ExecutorConfig = Field(default_factory=ExecutorConfig)
    api: APIConfig = Field(default_factory=APIConfig)

    model_config = ConfigDict(
        env_prefix="GOSTMAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def store_path(self) -> Path:
        """Full path of the backing document."""
        return Path(self.storage.data_dir).expanduser() / self.storage.file_name


# Global configuration instance
_config: Optional[GostmanConfig] = None


def get_config() -> GostmanConfig:
    """
    Get the global configuration instance.

    Returns:
        The global GostmanConfig instance
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def load_config(config_file: Optional[Path] = None) -> GostmanConfig:
    """
    Load configuration from an env file and environment variables.

    Args:
        config_file: Optional path to a dotenv-style configuration file

    Returns:
        Loaded configuration instance
    """
    if config_file and config_file.exists():
        return GostmanConfig(_env_file=str(config_file))
    return GostmanConfig()


def reload_config(config_file: Optional[Path] = None) -> GostmanConfig:
    """
    Replace the global configuration, optionally from an env file.

    Args:
        config_file: Optional path to a dotenv-style configuration file

    Returns:
        The new global configuration
    """
    global _config
    _config = load_config(config_file)
    return _config


def get_store_path() -> Path:
    """
    Get the configured backing document path.

    Returns:
        Path to the JSON document holding variables and saved requests
    """
    return get_config().store_path
