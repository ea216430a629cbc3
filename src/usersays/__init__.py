"""usersays - intent phrase extraction from uploaded agent archives."""

__version__ = "0.1.0"
