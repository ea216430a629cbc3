"""usersays utility modules."""

from usersays.utils.logging import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
