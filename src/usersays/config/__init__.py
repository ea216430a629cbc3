"""Configuration management for usersays."""

from usersays.config.loader import load_config
from usersays.config.models import Config, LoggingConfig, ServerConfig, UploadConfig

__all__ = ["Config", "LoggingConfig", "ServerConfig", "UploadConfig", "load_config"]
