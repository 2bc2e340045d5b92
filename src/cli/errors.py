"""Typed exception hierarchy for CLI-related errors.

All exceptions inherit from CLIError base class for easy catching and
include descriptive messages with context to help with debugging.
"""

from src.confluence_client.errors import SyncError


class CLIError(SyncError):
    """Base exception for all CLI-related errors."""
    pass


class ConfigNotFoundError(CLIError):
    """Raised when configuration file is not found."""

    def __init__(self, config_path: str):
        super().__init__(
            f"Configuration file not found at {config_path}"
        )
        self.config_path = config_path
