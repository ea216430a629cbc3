"""Pydantic configuration models for usersays."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


class ServerConfig(BaseModel):
    """HTTP server configuration."""

    host: str = "localhost"
    port: int = Field(default=4507, ge=1, le=65535)


class UploadConfig(BaseModel):
    """Upload processing configuration."""

    work_directory: Path | None = None
    form_field: str = "myFile"
    intents_directory: str = Field(default="intents", min_length=1)
    file_suffix: str = Field(default="_usersays_en.json", min_length=1)
    max_concurrency: int = Field(default=16, ge=1, le=1024)
    file_timeout_seconds: float = Field(default=30.0, gt=0.0, le=600.0)
    request_timeout_seconds: float = Field(default=120.0, gt=0.0, le=3600.0)
    max_archive_entries: int = Field(default=10000, ge=1)
    max_uncompressed_mb: int = Field(default=500, ge=1)
    report_failures: bool = False

    @field_validator("work_directory", mode="before")
    @classmethod
    def expand_path(cls, v: Path | str | None) -> Path | None:
        """Expand user path and resolve to absolute."""
        if v is None:
            return None
        if isinstance(v, str):
            v = Path(v)
        return v.expanduser().resolve()

    @field_validator("intents_directory")
    @classmethod
    def validate_directory_name(cls, v: str) -> str:
        """Intents directory must be a single path component."""
        if "/" in v or "\\" in v or v in (".", ".."):
            raise ValueError("intents_directory must be a plain directory name")
        return v


class LoggingConfig(BaseModel):
    """Logging configuration for loguru."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["console", "json"] = "console"
    file: Path | None = None
    rotation: str = "10 MB"
    retention: str = "7 days"


class Config(BaseSettings):
    """Root configuration for usersays."""

    server: ServerConfig = Field(default_factory=ServerConfig)
    upload: UploadConfig = Field(default_factory=UploadConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {
        "env_prefix": "USERSAYS_",
        "env_nested_delimiter": "__",
    }
